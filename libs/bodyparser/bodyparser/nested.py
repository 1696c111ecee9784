"""
Bracket-path keys (``user[address][city]``, ``colors[]``) to nested values.

Every decoder assigns keys through :func:`assign` or :func:`insert`, so the
pollution denylist is enforced at each assignment site.  Containers are
plain ``dict`` and ``list`` objects: assigning a key never touches
attributes or behaviour of the container itself.
"""

from __future__ import annotations

import re
from typing import Any

from bodyparser.errors import MaxNestingExceeded

MAX_DEPTH = 20

DENYLIST = frozenset(
    {
        "__proto__",
        "constructor",
        "prototype",
        "hasOwnProperty",
        "isPrototypeOf",
        "propertyIsEnumerable",
        "valueOf",
        "toString",
    }
)

# base[index]remainder
_BRACKET_PATH = re.compile(r"([^\[]+)\[([^\]]*)\](.*)")


def is_denied(key: str) -> bool:
    return key in DENYLIST


def assign(container: dict[str, Any], key: str, value: Any) -> None:
    """Set *key*, promoting to a list when the key repeats."""
    if is_denied(key):
        return
    if key not in container:
        container[key] = value
    elif isinstance(container[key], list):
        container[key].append(value)
    else:
        container[key] = [container[key], value]


def insert(target: Any, key: str, value: Any, depth: int = 0) -> None:
    """Insert *value* into *target* following the bracket path in *key*.

    Intermediate maps and lists are created on demand.  Raises
    :class:`MaxNestingExceeded` once *depth* goes past :data:`MAX_DEPTH`.
    """
    if depth > MAX_DEPTH:
        raise MaxNestingExceeded()

    if is_denied(key) or not isinstance(target, dict):
        return

    match = _BRACKET_PATH.fullmatch(key)
    if match is None:
        assign(target, key, value)
        return

    base, index, remainder = match.groups()
    if is_denied(base):
        return

    if not isinstance(target.get(base), (dict, list)):
        target[base] = [] if index == "" else {}
    slot = target[base]

    if remainder:
        insert(slot, index + remainder, value, depth + 1)
    elif index == "":
        if isinstance(slot, list):
            slot.append(value)
    elif not is_denied(index) and isinstance(slot, dict):
        slot[index] = value
