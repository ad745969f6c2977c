"""Naming-convention heuristics and module identifier allocation.

These are plain string functions so they can be tested without a tree.
"""

from __future__ import annotations

import re
from typing import Set

CONSTANT_NAME = re.compile(r"[A-Z_]*")

DEFAULT_RESERVED_GLOBALS = ("Number", "Error")


def is_constant_name(name: str) -> bool:
    """`SOME_CONSTANT` style names, all upper case and underscores."""
    return CONSTANT_NAME.fullmatch(name) is not None


def is_class_like_name(name: str) -> bool:
    """
    Names whose first character is unchanged by upper-casing.

    Covers `ClassName` as well as `_private` and `$jq` style names, which the
    legacy code uses the same way.
    """
    first = name[:1]
    return first == first.upper()


def unique_module_variable_id(candidate: str, identifiers: Set[str]) -> str:
    """
    First of `candidate`, `candidate__1`, `candidate__2`, ... not in `identifiers`.

    `identifiers` is not modified; callers add the returned name themselves.
    """
    if candidate not in identifiers:
        return candidate

    suffix = 1
    while f"{candidate}__{suffix}" in identifiers:
        suffix += 1
    return f"{candidate}__{suffix}"
