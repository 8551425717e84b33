"""Turn browserslist-style target strings into compat-data Targets.

browserslist reports entries like "and_chr 120" or "ios_saf 15.2-15.3";
compat data names families differently ("chrome_android",
"safari_ios"). Ranged versions resolve to their lower bound.
"""

import logging
from collections.abc import Mapping
from typing import Any, Iterable, List, Union

from ecmacompat.kernel.compatibility import Target
from ecmacompat.kernel.version import is_simple_version

logger = logging.getLogger(__name__)


class TargetParseError(ValueError):
    """Raised when a target entry cannot be turned into a Target."""


# browserslist family -> compat-data family
BROWSERSLIST_FAMILIES = {
    "chrome": "chrome",
    "and_chr": "chrome_android",
    "edge": "edge",
    "firefox": "firefox",
    "and_ff": "firefox_android",
    "ie": "ie",
    "node": "nodejs",
    "opera": "opera",
    "op_mob": "opera_android",
    "safari": "safari",
    "ios_saf": "safari_ios",
    "samsung": "samsunginternet_android",
    "android": "webview_android",
    "deno": "deno",
}


def _lower_bound(version: str) -> str:
    return version.split("-", 1)[0]


def parse_target(entry: str) -> Target:
    """Parse "<family> <version>" into a Target.

    Raises:
        TargetParseError: If the entry is malformed or the family is unknown
    """
    parts = entry.split()
    if len(parts) != 2:
        raise TargetParseError(f"Expected '<family> <version>', got {entry!r}")
    family, version = parts

    compat_family = BROWSERSLIST_FAMILIES.get(family)
    if compat_family is None:
        raise TargetParseError(f"Unknown target family {family!r} in {entry!r}")

    version = _lower_bound(version)
    if not is_simple_version(version):
        raise TargetParseError(f"Target version must be dotted numeric, got {version!r} in {entry!r}")
    return Target(name=compat_family, version=version)


def parse_targets(entries: Iterable[Union[str, Mapping[str, Any]]], skip_unknown: bool = True) -> List[Target]:
    """Parse target strings or {"name", "version"} mappings, keeping order.

    Mappings are taken as already using compat-data family names. With
    skip_unknown, string entries for families compat data does not track
    ("op_mini all", "kaios 2.5") are dropped instead of raising.
    """
    targets: List[Target] = []
    for entry in entries:
        if isinstance(entry, Mapping):
            name = entry.get("name")
            version = entry.get("version")
            if not isinstance(name, str) or not isinstance(version, str) or not is_simple_version(version):
                raise TargetParseError(f"Invalid target object: {dict(entry)!r}")
            targets.append(Target(name=name, version=version))
            continue
        if not isinstance(entry, str):
            raise TargetParseError(f"Target must be a string or object, got {type(entry).__name__}")

        family = entry.split()[0] if entry.split() else ""
        if skip_unknown and family not in BROWSERSLIST_FAMILIES:
            logger.debug("Skipping target %r: no compat-data family for %r", entry, family)
            continue
        targets.append(parse_target(entry))

    # Same target listed twice adds nothing
    deduped = list(dict.fromkeys(targets))
    return deduped
