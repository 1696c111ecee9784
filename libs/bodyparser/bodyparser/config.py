"""
12-Factor configuration for the body parser.

Defaults for every decoder are read from environment variables once, at
import time.  They only seed :mod:`bodyparser.options`; a parser built with
explicit options never looks at the environment again.
"""

from __future__ import annotations

import os


def env(key: str, default: str = "") -> str:
    return os.environ.get(key, default)


def env_int(key: str, default: int = 0) -> int:
    return int(os.environ.get(key, str(default)))


def env_bool(key: str, default: bool = False) -> bool:
    return os.environ.get(key, str(default)).lower() in ("1", "true", "yes")


def env_limit(key: str, default: str) -> int | str:
    """Size limits may be given as ``"2mb"`` or as a bare byte count."""
    value = env(key, default).strip()
    return int(value) if value.isdigit() else value


# ── Logging ───────────────────────────────────────────────────────────

LOG_LEVEL = env("LOG_LEVEL", "INFO")
LOG_FORMAT = env("LOG_FORMAT", "json")

# ── Decoder defaults ──────────────────────────────────────────────────

JSON_LIMIT = env_limit("BODY_PARSER_JSON_LIMIT", "1mb")
TEXT_LIMIT = env_limit("BODY_PARSER_TEXT_LIMIT", "1mb")
URLENCODED_LIMIT = env_limit("BODY_PARSER_URLENCODED_LIMIT", "1mb")
MULTIPART_LIMIT = env_limit("BODY_PARSER_MULTIPART_LIMIT", "10mb")

JSON_STRICT = env_bool("BODY_PARSER_JSON_STRICT", True)
PARSE_NESTED_OBJECTS = env_bool("BODY_PARSER_PARSE_NESTED_OBJECTS", True)
