"""Derive JSON-friendly form rows from a field catalog.

Combines the traversal order with the resolved input kinds into flat rows a
client can render directly: group rows become collapsible section headers,
field rows carry the input kind and its validation hints.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from .catalog import FieldCatalog
from .tree import NodeRole, TraversalEntry, VisibilityState


def collapse_optional_groups(catalog: FieldCatalog) -> VisibilityState:
    """Initial visibility where only required groups start expanded."""
    return VisibilityState(
        d.path for d in catalog if d.is_group and not d.required
    )


class FormSchemaBuilder:
    """Build form rows for a catalog.

    Args:
        catalog: Catalog providing structure and types.
    """

    def __init__(self, catalog: FieldCatalog) -> None:
        self.catalog = catalog

    def build(self, visibility: Optional[VisibilityState] = None) -> List[Dict[str, Any]]:
        return [self.row(entry) for entry in self.catalog.traverse(visibility)]

    def row(self, entry: TraversalEntry) -> Dict[str, Any]:
        descriptor = entry.descriptor
        row: Dict[str, Any] = {
            "id": descriptor.id,
            "path": descriptor.path,
            "tag": descriptor.tag,
            "label": descriptor.label,
            "help": descriptor.documentation_definition or None,
            "role": entry.role.value,
            "depth": entry.depth,
            "required": descriptor.required,
            "repeatable": descriptor.repeatable,
            "choice": descriptor.is_choice,
        }
        if entry.role is NodeRole.GROUP:
            row["expanded"] = entry.expanded
            row["child_count"] = len(self.catalog.children(descriptor.path))
        else:
            kind = self.catalog.input_kind(descriptor)
            row["type"] = descriptor.xsd_type
            row["input"] = kind.to_dict() if kind else None
        return row

    def field_paths(self, rows: Iterable[Dict[str, Any]]) -> List[str]:
        """Paths of the value-bearing rows, i.e. the keys a submission may use."""
        return [row["path"] for row in rows if row["role"] == NodeRole.FIELD.value]
