"""ecmacompat: find language features unsupported by target runtimes."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("ecmacompat")
except PackageNotFoundError:
    __version__ = "dev"

# Public API exports
from ecmacompat.api import check, check_catalog
from ecmacompat.kernel.compatibility import (
    Feature,
    Target,
    SparseCompatDataError,
    unsupported_features,
)
from ecmacompat.kernel.families import FamilyAliases, DEFAULT_FAMILY_ALIASES
from ecmacompat.contracts import CompatibilityReport, UnsupportedFeature, TargetFailure
from ecmacompat.codes import ReasonCode

__all__ = [
    "__version__",
    "unsupported_features",
    "check",
    "check_catalog",
    "Feature",
    "Target",
    "SparseCompatDataError",
    "FamilyAliases",
    "DEFAULT_FAMILY_ALIASES",
    "CompatibilityReport",
    "UnsupportedFeature",
    "TargetFailure",
    "ReasonCode",
]
