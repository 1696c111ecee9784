from bodyparser.middleware.body import BodyParserMiddleware

__all__ = ["BodyParserMiddleware"]
