"""Runtime family aliasing: device/platform variants and their base families.

browser-compat-data often omits an entry for a mobile or embedded
variant when it does not diverge from its desktop counterpart. The
table below records which family a variant mirrors, so a missing variant
entry can be read as "same as base" rather than as missing data.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional

logger = logging.getLogger(__name__)


_DEFAULT_VARIANTS: Dict[str, str] = {
    "chrome_android": "chrome",
    "firefox_android": "firefox",
    "opera_android": "opera",
    "safari_ios": "safari",
    "samsunginternet_android": "chrome_android",
    "webview_android": "chrome_android",
    "webview_ios": "safari_ios",
}


@dataclass(frozen=True)
class FamilyAliases:
    """Mapping from variant family name to the base family it mirrors.

    Chains are followed (samsunginternet_android -> chrome_android ->
    chrome) until a family with an entry is found.
    """
    variants: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "variants", MappingProxyType(dict(self.variants)))

    def base_of(self, family: str) -> Optional[str]:
        """Direct base family of a variant, or None."""
        return self.variants.get(family)

    def is_variant(self, family: str) -> bool:
        return family in self.variants

    def fallback_for(self, family: str, support: Mapping[str, object]) -> Optional[str]:
        """Find the nearest base family of `family` that has an entry in `support`.

        Returns None if `family` is not a variant or no base in its chain
        has an entry.
        """
        seen = {family}
        current = self.variants.get(family)
        while current is not None and current not in seen:
            if current in support:
                return current
            seen.add(current)
            current = self.variants.get(current)
        return None

    def extended(self, overrides: Mapping[str, str]) -> "FamilyAliases":
        """Return a new table with `overrides` merged over this one."""
        merged = dict(self.variants)
        merged.update(overrides)
        logger.debug("Extended family aliases with %d override(s)", len(overrides))
        return FamilyAliases(merged)


DEFAULT_FAMILY_ALIASES = FamilyAliases(_DEFAULT_VARIANTS)
