"""Dotted numeric version ordering.

Versions in browser-compat-data are semver or partial semver
("73", "14.0", "7.0.0"). Components are compared numerically and
missing trailing components compare as 0, so "9" == "9.0.0".
Ranged versions ("≤37") are not part of the contract.
"""

import re
from typing import Tuple

VERSION_PATTERN = re.compile(r"^\d+(\.\d+(\.\d+)?)?$")


def is_simple_version(value: str) -> bool:
    """Return True if value is a full or partial dotted numeric version."""
    return isinstance(value, str) and VERSION_PATTERN.match(value) is not None


def parse_version(value: str) -> Tuple[int, ...]:
    """Split a dotted version into integer components.

    Raises:
        ValueError: If any component is not numeric
    """
    if not is_simple_version(value):
        raise ValueError(f"Not a dotted numeric version: {value!r}")
    return tuple(int(part) for part in value.split("."))


def compare_versions(a: str, b: str) -> int:
    """Compare two versions, returning -1, 0 or 1."""
    left = parse_version(a)
    right = parse_version(b)

    # Pad the shorter side with zeros
    width = max(len(left), len(right))
    left = left + (0,) * (width - len(left))
    right = right + (0,) * (width - len(right))

    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def version_gte(a: str, b: str) -> bool:
    """True if version a is at or after version b."""
    return compare_versions(a, b) >= 0
