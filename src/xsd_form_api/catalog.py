"""Load and index XSD-derived field catalogs.

A :class:`FieldCatalog` pairs the ordered field descriptors with the type
catalog they reference. Construction validates the structure and builds the
explicit tree once (see :mod:`xsd_form_api.tree`); afterwards the catalog is
read-only and safe to share across requests.

Catalog files are JSON arrays. Two named catalogs are known out of the box,
matching the files emitted by the schema extraction tooling:

=========  =====================  ===================
Name       Field file             Type file
=========  =====================  ===================
header     ``headerFields.json``  ``headerTypes.json``
message    ``messageFields.json`` ``fieldTypes.json``
=========  =====================  ===================

Typical usage::

        from pathlib import Path
        from xsd_form_api.catalog import load_named_catalog

        catalog = load_named_catalog(Path("data"), "message")
        for entry in catalog.traverse():
                print("  " * entry.depth, entry.descriptor.label)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence

from .errors import MalformedCatalog
from .input_kinds import InputKind, resolve_input_kind
from .models import DEFAULT_FIELD_TYPE, FieldDescriptor, FieldType
from .tree import CatalogTree, TraversalEntry, VisibilityState, build_tree, traverse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogSource:
    """File names making up one named catalog."""

    fields_file: str
    types_file: str


CATALOG_SOURCES: Dict[str, CatalogSource] = {
    "header": CatalogSource("headerFields.json", "headerTypes.json"),
    "message": CatalogSource("messageFields.json", "fieldTypes.json"),
}


class FieldCatalog:
    """Validated, indexed view over a field catalog and its type catalog.

    Args:
        descriptors: Field descriptor records (any order; sorted by ``id``).
        field_types: Type records referenced by ``xsd_type``.
        name: Optional catalog name used in logs and API payloads.

    Raises:
        MalformedCatalog: If the descriptors violate the catalog invariants.
    """

    def __init__(
        self,
        descriptors: Iterable[FieldDescriptor],
        field_types: Iterable[FieldType] = (),
        name: str = "catalog",
    ) -> None:
        self.name = name
        self.tree: CatalogTree = build_tree(list(descriptors))
        self.types: Dict[str, FieldType] = {}
        for field_type in field_types:
            # First definition wins, as with a linear lookup over the list.
            self.types.setdefault(field_type.name, field_type)

    @classmethod
    def from_records(
        cls,
        field_records: Sequence[Dict[str, Any]],
        type_records: Sequence[Dict[str, Any]] = (),
        name: str = "catalog",
    ) -> "FieldCatalog":
        """Build a catalog from decoded JSON records."""
        if not isinstance(field_records, list):
            raise MalformedCatalog(f"Field catalog '{name}' must be a JSON array")
        if not isinstance(type_records, (list, tuple)):
            raise MalformedCatalog(f"Type catalog '{name}' must be a JSON array")
        return cls(
            (FieldDescriptor.from_dict(record) for record in field_records),
            (FieldType.from_dict(record) for record in type_records),
            name=name,
        )

    # ---------------- Lookup ---------------- #

    @property
    def descriptors(self) -> List[FieldDescriptor]:
        return [node.descriptor for node in self.tree.nodes]

    def __len__(self) -> int:
        return len(self.tree)

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return (node.descriptor for node in self.tree.nodes)

    def __contains__(self, path: object) -> bool:
        return path in self.tree

    def get(self, path: str) -> Optional[FieldDescriptor]:
        if path not in self.tree:
            return None
        return self.tree.node(path).descriptor

    def children(self, path: str) -> List[FieldDescriptor]:
        return self.tree.children(path)

    def descendant_paths(self, path: str) -> List[str]:
        return self.tree.descendant_paths(path)

    def find_type(self, name: Optional[str]) -> FieldType:
        """Resolve a type name, falling back to the default string type."""
        if name is None:
            return DEFAULT_FIELD_TYPE
        return self.types.get(name, DEFAULT_FIELD_TYPE)

    def input_kind(self, descriptor: FieldDescriptor) -> Optional[InputKind]:
        """Input kind for a leaf field; ``None`` for group headers."""
        if descriptor.is_group:
            return None
        return resolve_input_kind(self.find_type(descriptor.xsd_type))

    def traverse(self, visibility: Optional[VisibilityState] = None) -> List[TraversalEntry]:
        return traverse(self.tree, visibility)

    def search(self, query: str, limit: int = 100) -> List[FieldDescriptor]:
        """Case-insensitive match on label, tag or path, in catalog order."""
        lower = query.lower()
        matches: List[FieldDescriptor] = []
        for descriptor in self:
            if len(matches) >= limit:
                break
            if (
                lower in descriptor.label.lower()
                or lower in descriptor.tag.lower()
                or lower in descriptor.path.lower()
            ):
                matches.append(descriptor)
        return matches

    def summary(self) -> Dict[str, Any]:
        groups = sum(1 for d in self if d.is_group)
        return {
            "name": self.name,
            "total_fields": len(self) - groups,
            "total_groups": groups,
            "total_types": len(self.types),
            "max_depth": self.tree.depth(),
        }


def _read_json_array(path: Path) -> List[Dict[str, Any]]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise MalformedCatalog(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, list):
        raise MalformedCatalog(f"{path} must contain a JSON array")
    return data


def load_field_catalog(
    fields_path: Path, types_path: Optional[Path] = None, name: Optional[str] = None
) -> FieldCatalog:
    """Load a catalog from a field file and an optional type file.

    A missing type file is not an error: every field then resolves to the
    default string type.

    Raises:
        FileNotFoundError: If ``fields_path`` does not exist.
        MalformedCatalog: If either file is not a valid catalog.
    """
    fields_path = Path(fields_path)
    catalog_name = name or fields_path.stem
    field_records = _read_json_array(fields_path)
    type_records: List[Dict[str, Any]] = []
    if types_path is not None and Path(types_path).exists():
        type_records = _read_json_array(Path(types_path))
    elif types_path is not None:
        logger.warning(f"Type catalog {types_path} not found; using default string type")

    catalog = FieldCatalog.from_records(field_records, type_records, name=catalog_name)
    logger.info(
        f"Loaded catalog '{catalog_name}' with {len(catalog)} descriptors "
        f"and {len(catalog.types)} types from {fields_path}"
    )
    return catalog


def load_named_catalog(directory: Path, name: str) -> FieldCatalog:
    """Load one of :data:`CATALOG_SOURCES` from ``directory``.

    Raises:
        KeyError: If ``name`` is not a known catalog name.
    """
    source = CATALOG_SOURCES[name]
    directory = Path(directory)
    return load_field_catalog(
        directory / source.fields_file, directory / source.types_file, name=name
    )


def available_catalogs(directory: Path) -> List[str]:
    """Names of known catalogs whose field file exists in ``directory``."""
    directory = Path(directory)
    return [
        name
        for name, source in CATALOG_SOURCES.items()
        if (directory / source.fields_file).exists()
    ]
