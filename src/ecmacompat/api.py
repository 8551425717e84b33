"""Public API for ecmacompat package.

High-level functions that return complete, structured results.
Rule-reporting layers should use these functions instead of importing
from _internal.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, Mapping, Optional, Sequence, Union

from ecmacompat.codes import ReasonCode
from ecmacompat.contracts import CompatibilityReport, TargetFailure, UnsupportedFeature
from ecmacompat.kernel.compatibility import (
    FailedPair,
    Feature,
    SparseCompatDataError,
    Target,
    explain_feature,
    unsupported_features,
)
from ecmacompat.kernel.families import DEFAULT_FAMILY_ALIASES, FamilyAliases
from ecmacompat.kernel.support import VersionAddedKind
from ecmacompat._internal.io.catalog import load_catalog_from_paths, load_json
from ecmacompat.targets import parse_targets

logger = logging.getLogger(__name__)


def _normalize_path(path: Union[str, os.PathLike, Path]) -> Path:
    """Normalize path input to Path object."""
    return Path(path) if not isinstance(path, Path) else path


def _resolve_aliases(aliases: Union[FamilyAliases, Mapping[str, str], None]) -> FamilyAliases:
    if aliases is None:
        return DEFAULT_FAMILY_ALIASES
    if isinstance(aliases, FamilyAliases):
        return aliases
    if not isinstance(aliases, Mapping) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in aliases.items()
    ):
        raise ValueError("Alias overrides must map variant family names to base family names")
    return DEFAULT_FAMILY_ALIASES.extended(aliases)


def _failed_pair_to_failure(pair: FailedPair) -> TargetFailure:
    """Convert FailedPair dataclass to a TargetFailure model."""
    if pair.kind is VersionAddedKind.NEVER:
        reason = ReasonCode.NOT_SUPPORTED
    else:
        reason = ReasonCode.VERSION_TOO_LOW
    return TargetFailure(
        record_index=pair.record_index,
        target=pair.target,
        reason=reason,
        version_added=pair.version_added,
    )


def check(
    features: Sequence[Feature],
    targets: Sequence[Target],
    aliases: Union[FamilyAliases, Mapping[str, str], None] = None,
) -> CompatibilityReport:
    """Check features against targets and explain each failure.

    Args:
        features: Features with their compat nodes
        targets: Runtimes the code must run on
        aliases: Family alias table, or variant->base overrides merged over the defaults

    Returns:
        CompatibilityReport listing unsupported features in input order

    Raises:
        SparseCompatDataError: If any feature's compat data is sparse
    """
    alias_table = _resolve_aliases(aliases)
    unsupported = unsupported_features(features, targets, alias_table)

    findings = [
        UnsupportedFeature(
            name=feature.name,
            description=feature.description,
            failures=[_failed_pair_to_failure(p) for p in explain_feature(feature, targets, alias_table)],
        )
        for feature in unsupported
    ]
    return CompatibilityReport(
        ok=not findings,
        targets=list(targets),
        checked_count=len(features),
        unsupported=findings,
    )


def check_catalog(
    catalog: Union[str, os.PathLike, Path],
    compat_data: Union[str, os.PathLike, Path],
    targets: Iterable[Union[str, Mapping[str, str]]],
    aliases: Union[FamilyAliases, Mapping[str, str], Path, str, None] = None,
) -> CompatibilityReport:
    """Load a catalog and compat data from disk and check them against targets.

    Args:
        catalog: Path to catalog JSON
        compat_data: Path to browser-compat-data JSON
        targets: browserslist-style strings or {"name", "version"} objects
        aliases: Alias table, overrides mapping, or path to an overrides JSON file

    Returns:
        CompatibilityReport
    """
    features = load_catalog_from_paths(_normalize_path(catalog), _normalize_path(compat_data))
    parsed_targets = parse_targets(targets)
    if isinstance(aliases, (str, os.PathLike)):
        aliases = load_json(_normalize_path(aliases))
    logger.debug("Checking %d feature(s) against %s", len(features), ", ".join(map(str, parsed_targets)))
    return check(features, parsed_targets, aliases)


__all__ = [
    "Feature",
    "Target",
    "FamilyAliases",
    "SparseCompatDataError",
    "unsupported_features",
    "check",
    "check_catalog",
]
