"""Public report models for ecmacompat package."""

from typing import List, Optional, Union
from pydantic import BaseModel, Field

from ecmacompat.codes import ReasonCode
from ecmacompat.kernel.compatibility import Target


class TargetFailure(BaseModel):
    """A single target a feature is not supported by."""
    record_index: int  # index into the feature's compat_features
    target: Target
    reason: ReasonCode
    version_added: Union[bool, str, None]  # "73" | False


class UnsupportedFeature(BaseModel):
    """A feature unsupported by at least one target."""
    name: Optional[str] = None
    description: Optional[str] = None
    failures: List[TargetFailure]  # evaluation order: record, then target


class CompatibilityReport(BaseModel):
    """Result of checking a feature catalog against targets."""
    ok: bool
    targets: List[Target]
    checked_count: int
    unsupported: List[UnsupportedFeature] = Field(default_factory=list)  # input order
