"""
Immutable parser configuration.

Options are frozen pydantic models built once at startup and shared by every
request.  Field names are snake_case; the camelCase spelling
(``jsonTypes``, ``parseNestedObjects``, ``multipartLimit`` ...) is accepted
as an alias so configuration dicts written for other stacks load unchanged.
"""

from __future__ import annotations

from typing import Any, Callable, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr
from pydantic.alias_generators import to_camel

from bodyparser import config

# Strict types: a bool is not a size.
LimitSpec = Union[StrictInt, StrictFloat, StrictStr]


class _Options(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
    )


class JSONOptions(_Options):
    limit: LimitSpec = config.JSON_LIMIT
    strict: bool = config.JSON_STRICT
    type: str = "application/json"
    # What an empty or whitespace-only body decodes to.
    empty_body: Literal["undefined", "empty-object"] = "undefined"
    # Called as reviver(key, value) on every decoded value, innermost first.
    reviver: Callable[[Any, Any], Any] | None = None


class TextOptions(_Options):
    limit: LimitSpec = config.TEXT_LIMIT
    type: str = "text/"


class URLEncodedOptions(_Options):
    limit: LimitSpec = config.URLENCODED_LIMIT
    # None defers to BodyParserOptions.parse_nested_objects
    parse_nested_objects: bool | None = None


class MultipartOptions(_Options):
    limit: LimitSpec = config.MULTIPART_LIMIT
    # Per-file ceiling; defaults to ``limit``.
    file_limit: LimitSpec | None = None
    default_file_type: str = "text/plain"


class BodyParserOptions(_Options):
    json_options: JSONOptions = Field(default_factory=JSONOptions, alias="json")
    text_options: TextOptions = Field(default_factory=TextOptions, alias="text")
    urlencoded_options: URLEncodedOptions = Field(default_factory=URLEncodedOptions, alias="urlencoded")
    multipart_options: MultipartOptions = Field(default_factory=MultipartOptions, alias="multipart")

    json_types: tuple[str, ...] = ("application/json",)
    json_parser: Callable[[str], Any] | None = None
    on_error: Callable[..., Any] | None = None
    verify: Callable[..., Any] | None = None
    parse_nested_objects: bool = config.PARSE_NESTED_OBJECTS

    # Shorthands that take precedence over the per-format ``limit``.
    json_limit: LimitSpec | None = None
    text_limit: LimitSpec | None = None
    urlencoded_limit: LimitSpec | None = None
    multipart_limit: LimitSpec | None = None

    def resolved_json(self) -> JSONOptions:
        if self.json_limit is None:
            return self.json_options
        return self.json_options.model_copy(update={"limit": self.json_limit})

    def resolved_text(self) -> TextOptions:
        if self.text_limit is None:
            return self.text_options
        return self.text_options.model_copy(update={"limit": self.text_limit})

    def resolved_urlencoded(self) -> URLEncodedOptions:
        update: dict[str, Any] = {}
        if self.urlencoded_limit is not None:
            update["limit"] = self.urlencoded_limit
        if self.urlencoded_options.parse_nested_objects is None:
            update["parse_nested_objects"] = self.parse_nested_objects
        return self.urlencoded_options.model_copy(update=update)

    def resolved_multipart(self) -> MultipartOptions:
        if self.multipart_limit is None:
            return self.multipart_options
        return self.multipart_options.model_copy(update={"limit": self.multipart_limit})
