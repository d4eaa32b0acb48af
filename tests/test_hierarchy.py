"""Mini README: Tests for the cost center and product trees.

Structure:
    * insertion - parent links, root appends, missing parents.
    * update/delete - in-place edits and subtree removal.
    * path_to/list_selectable - labels, ordering and idempotence.
"""

from __future__ import annotations

import pytest

from sitebooks.errors import NodeNotFoundError, ValidationError
from sitebooks.hierarchy import (
    CostCenterDetails,
    CostCenterTree,
    ProductDetails,
    ProductTree,
    TreeNode,
)


def test_demo_cost_centers_are_seeded_when_no_roots_given() -> None:
    """Constructing without roots loads the demo hierarchy; an empty list does not."""

    tree = CostCenterTree()
    assert len(tree) == 9
    assert [root.node_id for root in tree.roots] == ["cc-g-a", "cc-const"]
    assert len(CostCenterTree([])) == 0


def test_insert_under_parent_links_both_directions() -> None:
    """A child records its parent and is appended to the parent's children."""

    tree = CostCenterTree()
    node = tree.add_cost_center("Sand", "cc-mat")

    parent = tree.get("cc-mat")
    assert node.parent_id == "cc-mat"
    assert parent.children[-1] is node
    assert [child.name for child in parent.children] == ["Cement", "Steel", "Sand"]
    assert node.payload.is_launchable is True
    assert node.children == []


def test_root_insert_grows_forest_by_one() -> None:
    """Inserting without a parent appends exactly one top-level category."""

    products = ProductTree()
    before_roots = len(products.roots)
    before_size = len(products)

    node = products.add_product("Finishes", "")

    assert len(products) == before_size + 1
    assert len(products.roots) == before_roots + 1
    assert products.roots[-1] is node
    assert node.parent_id is None
    assert node.payload.is_category


def test_insert_under_missing_parent_raises_and_leaves_tree_untouched() -> None:
    """Unknown parents are reported instead of silently ignored."""

    tree = ProductTree()
    size, revision = len(tree), tree.revision

    with pytest.raises(NodeNotFoundError):
        tree.insert("X", ProductDetails(), "nonexistent-id")

    assert len(tree) == size
    assert tree.revision == revision


def test_blank_names_are_rejected() -> None:
    tree = CostCenterTree([])
    with pytest.raises(ValidationError):
        tree.add_cost_center("   ")
    node = tree.add_cost_center("  Site Office  ")
    assert node.name == "Site Office"
    with pytest.raises(ValidationError):
        tree.rename_cost_center(node.node_id, "", True)


def test_generated_identifiers_are_unique() -> None:
    tree = CostCenterTree([])
    first = tree.add_cost_center("A")
    second = tree.add_cost_center("B", first.node_id)
    assert first.node_id != second.node_id
    assert first.node_id.startswith("cc_")


def test_update_replaces_fields_but_keeps_structure() -> None:
    """Renaming keeps children and parent intact."""

    tree = CostCenterTree()
    children_before = list(tree.get("cc-mat").children)

    updated = tree.rename_cost_center("cc-mat", "Building Materials", True)

    assert updated.name == "Building Materials"
    assert updated.payload.is_launchable is True
    assert updated.parent_id == "cc-const"
    assert updated.children == children_before
    assert tree.path_to("cc-cim") == "Construction Costs / Building Materials / Cement"


def test_update_missing_node_raises() -> None:
    tree = ProductTree()
    with pytest.raises(NodeNotFoundError):
        tree.update_product("missing", "Anything", "kg")


def test_delete_removes_entire_subtree_from_every_lookup() -> None:
    """Descendants disappear from get, path_to, walk and list_selectable."""

    tree = CostCenterTree()
    assert tree.has_children("cc-const")

    removed = tree.delete("cc-const")

    assert removed == ["cc-const", "cc-mat", "cc-cim", "cc-aco", "cc-mo", "cc-equip"]
    for node_id in removed:
        assert node_id not in tree
        assert tree.path_to(node_id) == ""
        with pytest.raises(NodeNotFoundError):
            tree.get(node_id)
    walked = {node.node_id for node, _depth in tree.walk()}
    assert walked == {"cc-g-a", "cc-sal", "cc-esc"}
    assert {option.node_id for option in tree.list_selectable()} == {"cc-sal", "cc-esc"}


def test_delete_child_keeps_siblings_in_order() -> None:
    tree = ProductTree()
    tree.delete("prod-areia")
    assert [child.node_id for child in tree.get("prodcat-agreg").children] == ["prod-brita1"]
    with pytest.raises(NodeNotFoundError):
        tree.delete("prod-areia")


def test_path_to_joins_names_from_root() -> None:
    tree = CostCenterTree()
    assert tree.path_to("cc-cim") == "Construction Costs / Materials / Cement"
    assert tree.path_to("cc-g-a") == "General & Administrative"
    assert tree.path_to(None) == ""
    assert tree.path_to("missing") == ""


def test_path_to_honours_custom_separator() -> None:
    tree = CostCenterTree(separator=" > ")
    assert tree.path_to("cc-aco") == "Construction Costs > Materials > Steel"


def test_list_selectable_products_only_returns_units_sorted_by_path() -> None:
    """Categories are skipped and labels are ordered by full path."""

    tree = ProductTree()
    options = tree.list_selectable()
    labels = [option.full_path for option in options]

    assert labels == sorted(labels)
    assert labels[0] == "Aggregates / Crushed Stone No. 1"
    assert all(option.unit for option in options)
    assert "prodcat-agreg" not in {option.node_id for option in options}
    assert len(options) == 6
    sand = next(option for option in options if option.node_id == "prod-areia")
    assert sand.unit == "m³"


def test_list_selectable_cost_centers_follow_launchable_flag() -> None:
    tree = CostCenterTree()
    selectable = {option.node_id for option in tree.list_selectable()}
    assert selectable == {"cc-sal", "cc-esc", "cc-cim", "cc-aco", "cc-mo", "cc-equip"}

    tree.rename_cost_center("cc-mo", "Labour", False)
    assert "cc-mo" not in {option.node_id for option in tree.list_selectable()}


def test_reads_are_idempotent_without_mutation() -> None:
    tree = ProductTree()
    assert tree.list_selectable() == tree.list_selectable()
    assert tree.path_to("prod-arg-aciii") == tree.path_to("prod-arg-aciii")


def test_revision_increments_on_every_mutation() -> None:
    tree = ProductTree([])
    node = tree.add_product("Paint", "l")
    tree.update_product(node.node_id, "Paint (white)", "l")
    tree.delete(node.node_id)
    assert tree.revision == 3


def test_explicit_roots_must_be_consistent() -> None:
    """Seeded roots cannot declare parents or reuse identifiers."""

    orphan = TreeNode(node_id="x", name="X", parent_id="y", payload=CostCenterDetails())
    with pytest.raises(ValidationError):
        CostCenterTree([orphan])

    duplicate = TreeNode(node_id="a", name="A", parent_id=None, payload=CostCenterDetails())
    twin = TreeNode(node_id="a", name="B", parent_id=None, payload=CostCenterDetails())
    with pytest.raises(ValidationError):
        CostCenterTree([duplicate, twin])


def test_as_dict_exports_nested_payload() -> None:
    tree = ProductTree()
    snapshot = tree.as_dict()
    aggregates = snapshot[0]
    assert aggregates["id"] == "prodcat-agreg"
    assert aggregates["is_category"] is True
    assert aggregates["children"][0]["unit"] == "m³"
    assert tree.unit_of("prod-cimento-cpii") == "sc"
    assert tree.unit_of("prodcat-cimento") == ""
