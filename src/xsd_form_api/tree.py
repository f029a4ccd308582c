"""Explicit hierarchy over a flat field catalog and its form traversal.

The catalog encodes the XSD element hierarchy implicitly: every descriptor
names its parent through ``parent_path``. :func:`build_tree` turns that into
an arena of :class:`TreeNode` objects (one per descriptor, indexed by path,
children held as arena indices) once at load time. :func:`traverse` then walks
the arena depth-first, pre-order, producing the sequence in which a form
renders its rows.

Progressive disclosure is driven by :class:`VisibilityState`. Every group node
is visible by default; hiding one keeps the group row itself but drops all of
its descendants from the traversal. Visibility lives outside the tree so the
tree (and the catalog behind it) is never mutated, and repeated traversals
with the same state return identical sequences.

Example:
        from xsd_form_api.tree import VisibilityState, build_tree, traverse

        tree = build_tree(descriptors)
        rows = traverse(tree)
        state = VisibilityState()
        state.hide("GrpHdr")
        collapsed = traverse(tree, state)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .errors import MalformedCatalog
from .models import FieldDescriptor


class NodeRole(str, Enum):
    """Role of a traversal entry."""

    GROUP = "group"
    FIELD = "field"


@dataclass(frozen=True)
class TreeNode:
    """Arena slot for one descriptor.

    Attributes:
        index: Position of this node in :attr:`CatalogTree.nodes`.
        descriptor: The catalog record.
        parent: Arena index of the parent, ``None`` for top-level nodes.
        children: Arena indices of direct children in catalog order.
    """

    index: int
    descriptor: FieldDescriptor
    parent: Optional[int]
    children: Tuple[int, ...]

    @property
    def role(self) -> NodeRole:
        return NodeRole.GROUP if self.descriptor.is_group else NodeRole.FIELD


@dataclass(frozen=True)
class CatalogTree:
    """Immutable arena of :class:`TreeNode` built by :func:`build_tree`."""

    nodes: Tuple[TreeNode, ...]
    roots: Tuple[int, ...]
    index: Dict[str, int]

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, path: object) -> bool:
        return path in self.index

    def node(self, path: str) -> TreeNode:
        """Return the node for ``path``.

        Raises:
            KeyError: If the path is not part of the catalog.
        """
        return self.nodes[self.index[path]]

    def children(self, path: str) -> List[FieldDescriptor]:
        return [self.nodes[i].descriptor for i in self.node(path).children]

    def descendant_paths(self, path: str) -> List[str]:
        """Recompute the descendant paths of ``path`` in pre-order.

        Replaces the cached ``subPaths`` list shipped with the catalog.
        """
        result: List[str] = []
        stack = list(reversed(self.node(path).children))
        while stack:
            node = self.nodes[stack.pop()]
            result.append(node.descriptor.path)
            stack.extend(reversed(node.children))
        return result

    def depth(self) -> int:
        """Maximum nesting depth (1 for a catalog of top-level fields only)."""
        if not self.nodes:
            return 0
        return max(node.descriptor.level for node in self.nodes) + 1


class VisibilityState:
    """Per-group visibility flags used by :func:`traverse`.

    Only hidden paths are stored, so every group is visible unless hidden
    explicitly. The state belongs to one form interaction; it never touches
    the catalog.

    Example:
        >>> state = VisibilityState()
        >>> state.is_visible("GrpHdr")
        True
        >>> state.toggle("GrpHdr")
        False
        >>> state.is_visible("GrpHdr")
        False
    """

    def __init__(self, hidden: Optional[Iterable[str]] = None) -> None:
        self._hidden: Set[str] = set(hidden or ())

    def is_visible(self, path: str) -> bool:
        return path not in self._hidden

    def hide(self, path: str) -> None:
        self._hidden.add(path)

    def show(self, path: str) -> None:
        self._hidden.discard(path)

    def toggle(self, path: str) -> bool:
        """Flip the flag for ``path`` and return the new visibility."""
        if path in self._hidden:
            self._hidden.discard(path)
            return True
        self._hidden.add(path)
        return False

    @property
    def hidden(self) -> frozenset:
        return frozenset(self._hidden)

    def copy(self) -> "VisibilityState":
        return VisibilityState(self._hidden)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VisibilityState):
            return NotImplemented
        return self._hidden == other._hidden

    def __repr__(self) -> str:
        return f"VisibilityState(hidden={sorted(self._hidden)!r})"


@dataclass(frozen=True)
class TraversalEntry:
    """One row of the form traversal.

    Attributes:
        descriptor: Catalog record for the row.
        role: ``group`` for headers, ``field`` for value inputs.
        depth: Distance from the top-level row (equals ``descriptor.level``).
        expanded: For groups, whether the subtree was included. Always
            ``True`` for fields.
    """

    descriptor: FieldDescriptor
    role: NodeRole
    depth: int
    expanded: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.descriptor.id,
            "path": self.descriptor.path,
            "tag": self.descriptor.tag,
            "label": self.descriptor.label,
            "role": self.role.value,
            "depth": self.depth,
            "expanded": self.expanded,
        }


def build_tree(descriptors: Sequence[FieldDescriptor]) -> CatalogTree:
    """Build the arena for ``descriptors``.

    Descriptors are ordered by ``id`` (stable, so an id-ordered catalog keeps
    its file order); that order is the sibling order everywhere downstream.

    Raises:
        MalformedCatalog: On duplicate paths, a ``parent_path`` that matches no
            descriptor, a level that is not the parent's level + 1, or a
            top-level descriptor whose level is not 0.
    """
    ordered = sorted(descriptors, key=lambda d: d.id)

    index: Dict[str, int] = {}
    for position, descriptor in enumerate(ordered):
        if descriptor.path in index:
            raise MalformedCatalog(
                f"Duplicate path '{descriptor.path}' (ids "
                f"{ordered[index[descriptor.path]].id} and {descriptor.id})",
                path=descriptor.path,
            )
        index[descriptor.path] = position

    child_lists: List[List[int]] = [[] for _ in ordered]
    parents: List[Optional[int]] = [None] * len(ordered)
    roots: List[int] = []
    for position, descriptor in enumerate(ordered):
        if descriptor.is_top_level:
            if descriptor.level != 0:
                raise MalformedCatalog(
                    f"Descriptor '{descriptor.path}' has no parent but level {descriptor.level}",
                    path=descriptor.path,
                )
            roots.append(position)
            continue
        parent_position = index.get(descriptor.parent_path)
        if parent_position is None:
            raise MalformedCatalog(
                f"Descriptor '{descriptor.path}' references missing parent "
                f"'{descriptor.parent_path}'",
                path=descriptor.path,
            )
        parent = ordered[parent_position]
        if descriptor.level != parent.level + 1:
            raise MalformedCatalog(
                f"Descriptor '{descriptor.path}' has level {descriptor.level}, "
                f"expected {parent.level + 1} under '{parent.path}'",
                path=descriptor.path,
            )
        parents[position] = parent_position
        child_lists[parent_position].append(position)

    nodes = tuple(
        TreeNode(
            index=position,
            descriptor=descriptor,
            parent=parents[position],
            children=tuple(child_lists[position]),
        )
        for position, descriptor in enumerate(ordered)
    )
    return CatalogTree(nodes=nodes, roots=tuple(roots), index=index)


def traverse(
    tree: CatalogTree, visibility: Optional[VisibilityState] = None
) -> List[TraversalEntry]:
    """Return the depth-first, pre-order form sequence.

    Args:
        tree: Arena produced by :func:`build_tree`.
        visibility: Group visibility flags; all groups visible when omitted.

    Returns:
        Entries for every reachable node. A hidden group appears with
        ``expanded=False`` and none of its descendants.
    """
    state = visibility or VisibilityState()
    result: List[TraversalEntry] = []
    stack: List[Tuple[int, int]] = [(i, 0) for i in reversed(tree.roots)]
    while stack:
        position, depth = stack.pop()
        node = tree.nodes[position]
        role = node.role
        expanded = role is NodeRole.FIELD or state.is_visible(node.descriptor.path)
        result.append(
            TraversalEntry(
                descriptor=node.descriptor, role=role, depth=depth, expanded=expanded
            )
        )
        if expanded:
            stack.extend((child, depth + 1) for child in reversed(node.children))
    return result
