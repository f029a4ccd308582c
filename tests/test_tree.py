import pytest

from xsd_form_api.errors import MalformedCatalog
from xsd_form_api.models import FieldDescriptor
from xsd_form_api.tree import NodeRole, VisibilityState, build_tree, traverse


def _descriptor(id, path, parent="", level=0, xsd_type=None):
    return FieldDescriptor(
        id=id,
        level=level,
        tag=path.rsplit(".", 1)[-1],
        path=path,
        parent_path=parent,
        xsd_type=xsd_type,
    )


@pytest.fixture
def descriptors():
    # A has children B and C; B has grandchild D; E is a second top-level field.
    return [
        _descriptor(1, "A"),
        _descriptor(2, "A.B", "A", 1),
        _descriptor(3, "A.B.D", "A.B", 2, "Text"),
        _descriptor(4, "A.C", "A", 1, "Text"),
        _descriptor(5, "E", xsd_type="Text"),
    ]


def _paths(entries):
    return [entry.descriptor.path for entry in entries]


def test_preorder_visits_children_before_next_sibling(descriptors):
    entries = traverse(build_tree(descriptors))
    assert _paths(entries) == ["A", "A.B", "A.B.D", "A.C", "E"]
    assert [entry.depth for entry in entries] == [0, 1, 2, 1, 0]


def test_roles_follow_xsd_type(descriptors):
    entries = traverse(build_tree(descriptors))
    roles = {entry.descriptor.path: entry.role for entry in entries}
    assert roles["A"] is NodeRole.GROUP
    assert roles["A.B"] is NodeRole.GROUP
    assert roles["A.B.D"] is NodeRole.FIELD
    assert roles["E"] is NodeRole.FIELD


def test_hiding_group_drops_descendants_but_keeps_group(descriptors):
    tree = build_tree(descriptors)
    state = VisibilityState()
    state.hide("A")

    entries = traverse(tree, state)

    assert _paths(entries) == ["A", "E"]
    assert entries[0].role is NodeRole.GROUP
    assert entries[0].expanded is False


def test_hiding_nested_group(descriptors):
    entries = traverse(build_tree(descriptors), VisibilityState(["A.B"]))
    assert _paths(entries) == ["A", "A.B", "A.C", "E"]


def test_hiding_a_field_has_no_effect(descriptors):
    tree = build_tree(descriptors)
    assert traverse(tree, VisibilityState(["E"])) == traverse(tree)


def test_traversal_is_idempotent(descriptors):
    tree = build_tree(descriptors)
    state = VisibilityState(["A.B"])
    first = traverse(tree, state)
    second = traverse(tree, state)
    assert first == second
    assert state == VisibilityState(["A.B"])


def test_traversal_does_not_mutate_tree(descriptors):
    tree = build_tree(descriptors)
    before = [(node.descriptor, node.children) for node in tree.nodes]
    traverse(tree, VisibilityState(["A"]))
    assert [(node.descriptor, node.children) for node in tree.nodes] == before


def test_siblings_ordered_by_id_not_input_order(descriptors):
    tree = build_tree(list(reversed(descriptors)))
    assert _paths(traverse(tree)) == ["A", "A.B", "A.B.D", "A.C", "E"]


def test_toggle_round_trip():
    state = VisibilityState()
    assert state.toggle("A") is False
    assert state.hidden == frozenset({"A"})
    assert state.toggle("A") is True
    assert state.is_visible("A")


def test_copy_is_independent():
    state = VisibilityState(["A"])
    clone = state.copy()
    clone.show("A")
    assert not state.is_visible("A")
    assert clone.is_visible("A")


def test_children_and_descendants(descriptors):
    tree = build_tree(descriptors)
    assert [d.path for d in tree.children("A")] == ["A.B", "A.C"]
    assert tree.descendant_paths("A") == ["A.B", "A.B.D", "A.C"]
    assert tree.descendant_paths("E") == []
    assert tree.depth() == 3


def test_dangling_parent_raises():
    with pytest.raises(MalformedCatalog) as exc_info:
        build_tree([_descriptor(1, "A"), _descriptor(2, "X.B", "X", 1, "Text")])
    assert exc_info.value.path == "X.B"
    assert "missing parent" in str(exc_info.value)


def test_duplicate_path_raises():
    with pytest.raises(MalformedCatalog, match="Duplicate path"):
        build_tree([_descriptor(1, "A"), _descriptor(2, "A")])


def test_level_mismatch_raises():
    with pytest.raises(MalformedCatalog, match="expected 1"):
        build_tree([_descriptor(1, "A"), _descriptor(2, "A.B", "A", 2, "Text")])


def test_top_level_with_nonzero_level_raises():
    with pytest.raises(MalformedCatalog):
        build_tree([_descriptor(1, "A", level=1)])


def test_empty_catalog():
    tree = build_tree([])
    assert traverse(tree) == []
    assert tree.depth() == 0
