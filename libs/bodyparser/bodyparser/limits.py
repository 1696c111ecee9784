"""Human-readable size limits (``"500b"``, ``"1.5kb"``, ``"10mb"``) to bytes."""

from __future__ import annotations

import math
import re

from bodyparser.errors import InvalidLimitFormat, InvalidLimitType

MAX_LIMIT = 1024 * 1024 * 1024  # 1 GiB

# Fixed-length input and a bounded pattern keep matching linear.
_MAX_SPEC_LENGTH = 20
_LIMIT_RE = re.compile(r"(\d{1,10}(?:\.\d{1,3})?)\s*(b|kb|mb|gb)", re.IGNORECASE | re.ASCII)

_UNITS = {
    "b": 1,
    "kb": 1024,
    "mb": 1024 * 1024,
    "gb": 1024 * 1024 * 1024,
}


def _clamp(value: float) -> int:
    return int(min(max(0.0, value), MAX_LIMIT))


def parse_limit(value: int | float | str) -> int:
    """Return *value* as a byte count in ``[0, MAX_LIMIT]``.

    Numbers are clamped.  Strings must look like ``<digits>[.<digits>]<unit>``
    with a unit of ``b``, ``kb``, ``mb`` or ``gb`` (any case).
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise InvalidLimitType(f"Invalid limit type: expected number or string, got {type(value).__name__}")

    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            raise InvalidLimitFormat(f"Invalid limit value: {value}")
        return _clamp(value)

    if len(value) > _MAX_SPEC_LENGTH:
        raise InvalidLimitFormat(f"Invalid limit format: {value[:_MAX_SPEC_LENGTH]}...")

    match = _LIMIT_RE.fullmatch(value)
    if match is None:
        raise InvalidLimitFormat(f"Invalid limit format: {value}")

    amount = float(match.group(1))
    if not math.isfinite(amount) or amount < 0:
        raise InvalidLimitFormat(f"Invalid limit value: {value}")

    return _clamp(amount * _UNITS[match.group(2).lower()])
