"""Load a feature catalog and resolve its compat-data paths."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ecmacompat.kernel.compatibility import Feature

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Raised when a catalog or compat-data file cannot be loaded."""


class CatalogEntry(BaseModel):
    """One catalog entry: a rule name and the compat-data nodes it checks."""
    name: str
    description: Optional[str] = None
    compat_paths: List[str] = Field(..., min_length=1)  # e.g. "javascript.builtins.Array.flat"

    model_config = ConfigDict(extra="forbid")


def load_json(path: Union[str, Path]) -> Any:
    """Read a UTF-8 JSON document."""
    json_path = Path(path)
    try:
        return json.loads(json_path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise CatalogError(f"File not found: {json_path}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"Invalid JSON in {json_path}: {e}") from e


def resolve_compat_path(compat_data: Dict[str, Any], dotted_path: str) -> Optional[Dict[str, Any]]:
    """Walk a dotted path into compat data.

    Returns None if any segment is missing, leaving a hole for the
    validator to report.
    """
    node: Any = compat_data
    for segment in dotted_path.split("."):
        if not isinstance(node, dict) or segment not in node:
            logger.debug("Compat path %s not found (missing segment %r)", dotted_path, segment)
            return None
        node = node[segment]
    return node if isinstance(node, dict) else None


def load_catalog(catalog: List[Dict[str, Any]], compat_data: Dict[str, Any]) -> List[Feature]:
    """Build Features from catalog entries, in catalog order.

    Raises:
        CatalogError: If the catalog structure is invalid
    """
    if not isinstance(catalog, list):
        raise CatalogError("Catalog must be a JSON list of entries")
    if not isinstance(compat_data, dict):
        raise CatalogError("Compat data must be a JSON object")

    features: List[Feature] = []
    seen = set()
    for position, raw_entry in enumerate(catalog):
        try:
            entry = CatalogEntry.model_validate(raw_entry)
        except ValidationError as e:
            raise CatalogError(f"Invalid catalog entry at index {position}: {e}") from e
        if entry.name in seen:
            raise CatalogError(f"Duplicate catalog entry name: {entry.name}")
        seen.add(entry.name)

        features.append(Feature(
            name=entry.name,
            description=entry.description,
            compat_features=[resolve_compat_path(compat_data, p) for p in entry.compat_paths],
        ))

    logger.debug("Loaded %d catalog feature(s)", len(features))
    return features


def load_catalog_from_paths(catalog_path: Union[str, Path], compat_data_path: Union[str, Path]) -> List[Feature]:
    """Load catalog and compat data JSON files and build Features."""
    return load_catalog(load_json(catalog_path), load_json(compat_data_path))
