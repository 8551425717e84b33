"""Evaluate features against target runtimes.

Two passes over the input:
1. Validation: every feature's compat nodes are parsed into CompatRecords
   and checked against the queried families. The first sparse feature
   raises SparseCompatDataError.
2. Collection: features failing any (record, target) pair are returned in
   input order.

Validation completes for every feature before collection starts, so an
unsupported feature earlier in the list never hides broken data later on.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from .families import DEFAULT_FAMILY_ALIASES, FamilyAliases
from .support import CompatRecord, SupportStatement, VersionAddedKind, is_supported, primary_entry

logger = logging.getLogger(__name__)


class CompatValidationError(Exception):
    """Base exception for compat data validation errors."""
    pass


class SparseCompatDataError(CompatValidationError):
    """Raised when a feature's compat data is missing or malformed.

    Usually caused by a catalog entry pointing at the wrong compat-data
    path. Not recoverable: the caller should fail the run.
    """
    def __init__(self, feature: "Feature", label: str, rendering: str, detail: Optional[str] = None):
        self.feature = feature
        self.label = label
        self.rendering = rendering
        self.detail = detail
        msg = f"Sparse compat_features for rule '{label}': {rendering}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


class Target(BaseModel):
    """A runtime the evaluated code must run on."""
    name: str  # compat-data family, e.g. "chrome", "nodejs"
    version: str

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.name} {self.version}"


class Feature(BaseModel):
    """A language/API feature with its compat-data nodes.

    `compat_features` holds raw compat nodes as produced by the catalog
    loader; a None entry marks a node that could not be resolved.
    """
    name: Optional[str] = None
    description: Optional[str] = None
    compat_features: List[Optional[Any]]

    model_config = ConfigDict(frozen=True)

    @property
    def label(self) -> str:
        return self.description or self.name or "<unnamed feature>"


@dataclass(frozen=True)
class FailedPair:
    """One (record, target) combination a feature fails."""
    record_index: int
    target: Target
    kind: VersionAddedKind
    version_added: Union[bool, str, None]


def _render_nodes(nodes: Sequence[Any]) -> str:
    """Render compat nodes as 'object,undefined,...' to locate holes."""
    tokens = []
    for node in nodes:
        if node is None:
            tokens.append("undefined")
        elif isinstance(node, (Mapping, CompatRecord)):
            tokens.append("object")
        else:
            tokens.append(type(node).__name__)
    return ",".join(tokens)


def _parse_record(node: Any) -> CompatRecord:
    if isinstance(node, CompatRecord):
        return node
    return CompatRecord.model_validate(node)


def validate_feature(
    feature: Feature,
    targets: Sequence[Target] = (),
    aliases: FamilyAliases = DEFAULT_FAMILY_ALIASES,
) -> List[CompatRecord]:
    """Parse and check a feature's compat nodes.

    Every node must be present and well-formed. Every queried family must
    have an entry unless it is a registered variant, and the primary entry
    of each queried family must carry a comparable version.

    Returns:
        Parsed CompatRecords, one per node

    Raises:
        SparseCompatDataError: If any node is missing or malformed
    """
    nodes = feature.compat_features
    rendering = _render_nodes(nodes)

    if not nodes:
        raise SparseCompatDataError(feature, feature.label, rendering, "no compat nodes")

    records: List[CompatRecord] = []
    for index, node in enumerate(nodes):
        if node is None or not isinstance(node, (Mapping, CompatRecord)):
            raise SparseCompatDataError(feature, feature.label, rendering)
        try:
            records.append(_parse_record(node))
        except ValidationError as e:
            raise SparseCompatDataError(
                feature,
                feature.label,
                rendering,
                f"record {index} is malformed: {e.error_count()} validation error(s)",
            ) from e

    for index, record in enumerate(records):
        for target in targets:
            statement = record.support.get(target.name)
            if statement is None:
                if aliases.is_variant(target.name):
                    # Missing variant entry: no known divergence from the base family
                    logger.debug(
                        "%s: no '%s' entry in record %d, mirroring %s",
                        feature.label, target.name, index,
                        aliases.fallback_for(target.name, record.support) or "no base entry",
                    )
                    continue
                raise SparseCompatDataError(
                    feature,
                    feature.label,
                    rendering,
                    f"record {index} has no support entry for '{target.name}'",
                )
            # Secondary entries are never evaluated, so only the primary must be comparable
            entry = primary_entry(statement)
            if not entry.has_simple_version:
                raise SparseCompatDataError(
                    feature,
                    feature.label,
                    rendering,
                    f"record {index} has non-numeric version_added {entry.version_added!r} for '{target.name}'",
                )

    return records


def _statement_for(record: CompatRecord, target: Target) -> Optional[SupportStatement]:
    """Support statement for the target's family; None for a variant without its own entry."""
    return record.support.get(target.name)


def _failed_pairs(
    records: Sequence[CompatRecord],
    targets: Sequence[Target],
    first_only: bool,
) -> List[FailedPair]:
    failures: List[FailedPair] = []
    for index, record in enumerate(records):
        for target in targets:
            statement = _statement_for(record, target)
            if statement is None:
                # Variant family without its own entry: no known divergence
                continue
            if is_supported(statement, target.version):
                continue
            entry = primary_entry(statement)
            failures.append(FailedPair(index, target, entry.kind, entry.version_added))
            if first_only:
                return failures
    return failures


def unsupported_features(
    features: Sequence[Feature],
    targets: Sequence[Target],
    aliases: FamilyAliases = DEFAULT_FAMILY_ALIASES,
) -> List[Feature]:
    """Return the features unsupported by at least one target.

    Args:
        features: Features with their compat nodes
        targets: Runtimes the code must run on
        aliases: Variant-to-base family table

    Returns:
        Order-preserving subsequence of `features`, each at most once

    Raises:
        SparseCompatDataError: If any feature's compat data is sparse
    """
    validated = [validate_feature(feature, targets, aliases) for feature in features]

    unsupported = [
        feature
        for feature, records in zip(features, validated)
        if _failed_pairs(records, targets, first_only=True)
    ]
    logger.debug(
        "Evaluated %d feature(s) against %d target(s): %d unsupported",
        len(features), len(targets), len(unsupported),
    )
    return unsupported


def explain_feature(
    feature: Feature,
    targets: Sequence[Target],
    aliases: FamilyAliases = DEFAULT_FAMILY_ALIASES,
) -> List[FailedPair]:
    """List every (record, target) pair the feature fails, in evaluation order."""
    records = validate_feature(feature, targets, aliases)
    return _failed_pairs(records, targets, first_only=False)
