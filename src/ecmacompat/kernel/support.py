"""Support statements from browser-compat-data and the primary-path resolver."""

from enum import Enum
from typing import Annotated, Any, Dict, List, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from .version import is_simple_version, version_gte


class VersionAddedKind(str, Enum):
    """Tagged shapes of a `version_added` value."""
    VERSION = "version"   # "73", "14.0", "7.0.0"
    ALWAYS = "always"     # true: supported, exact version unknown
    NEVER = "never"       # false
    UNKNOWN = "unknown"   # null


class Flag(BaseModel):
    """A runtime or preference flag gating a support entry."""
    type: str  # "preference" | "runtime_flag"
    name: str
    value_to_set: Optional[str] = None

    model_config = ConfigDict(extra="ignore", frozen=True)


class SupportEntry(BaseModel):
    """One simple support statement for a runtime family.

    Only `version_added` and `flags` take part in evaluation; the other
    fields are carried for reporting.
    """
    version_added: Union[StrictBool, str, None]
    version_removed: Union[StrictBool, str, None] = None
    flags: Optional[List[Flag]] = None
    partial_implementation: Optional[bool] = None
    prefix: Optional[str] = None
    alternative_name: Optional[str] = None
    notes: Union[str, List[str], None] = None

    model_config = ConfigDict(extra="ignore", frozen=True)

    @property
    def has_simple_version(self) -> bool:
        """False for ranged or non-numeric versions ("≤37", "preview")."""
        return not isinstance(self.version_added, str) or is_simple_version(self.version_added)

    @property
    def kind(self) -> VersionAddedKind:
        if self.version_added is True:
            return VersionAddedKind.ALWAYS
        if self.version_added is False:
            return VersionAddedKind.NEVER
        if self.version_added is None:
            return VersionAddedKind.UNKNOWN
        return VersionAddedKind.VERSION

    @property
    def is_flagged(self) -> bool:
        return bool(self.flags)


SupportStatement = Union[SupportEntry, Annotated[List[SupportEntry], Field(min_length=1)]]


class CompatData(BaseModel):
    """The `__compat` block of a compat-data node."""
    support: Dict[str, SupportStatement]
    description: Optional[str] = None
    mdn_url: Optional[str] = None

    model_config = ConfigDict(extra="ignore", frozen=True)


class CompatRecord(BaseModel):
    """A compat-data node: `{"__compat": {"support": {family: statement}}}`."""
    compat: CompatData = Field(alias="__compat")

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    @property
    def support(self) -> Dict[str, SupportStatement]:
        return self.compat.support


def _as_entry(value: Union[SupportEntry, Mapping[str, Any]]) -> SupportEntry:
    if isinstance(value, SupportEntry):
        return value
    return SupportEntry.model_validate(value)


def primary_entry(statement: Union[SupportStatement, Sequence[Any], Mapping[str, Any]]) -> SupportEntry:
    """Return the entry that decides support.

    Where a family has several entries, the first is the default
    (unflagged) path. Later entries are alternatives such as flagged or
    prefixed support and are never consulted.
    """
    if isinstance(statement, (list, tuple)):
        if not statement:
            raise ValueError("Empty support statement")
        return _as_entry(statement[0])
    return _as_entry(statement)


def is_supported(statement: Union[SupportStatement, Sequence[Any], Mapping[str, Any]], target_version: str) -> bool:
    """Decide whether a target version has default support.

    Args:
        statement: A support entry or list of entries for one family
        target_version: Concrete version of the target runtime

    Returns:
        True if the primary entry covers target_version
    """
    entry = primary_entry(statement)
    kind = entry.kind

    if kind is VersionAddedKind.NEVER:
        return False
    if kind is VersionAddedKind.ALWAYS or kind is VersionAddedKind.UNKNOWN:
        return True
    if kind is VersionAddedKind.VERSION:
        return version_gte(target_version, entry.version_added)
    raise AssertionError(f"Unhandled version_added kind: {kind}")
