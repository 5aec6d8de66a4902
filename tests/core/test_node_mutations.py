"""Tests for the structural edit operations on MindMap."""

from mindmapper.graph.builder import Direction
from mindmapper.graph.classify import OTHER
from mindmapper.graph.GraphNode import NodeShape
from mindmapper.graph.reconstructor import reconstruct_outline
from tests.core.graph_test_helpers import (
    PROJECT_OUTLINE,
    assert_valid_tree,
    build_mind_map,
    child_ids,
    parent_map,
)


class TestAddChild:
    """Tests for MindMap.add_child()."""

    def test_adds_placeholder_leaf(self, flat_map):
        entry = flat_map.add_child("task_1")

        child = flat_map.find_by_id(entry.target_id)
        assert child.original_text == "New Task"
        assert child.depth == 2
        assert child.parent.id == "task_1"
        assert child.shape is NodeShape.LEAF

    def test_leaf_parent_becomes_container(self, flat_map):
        parent = flat_map.find_by_id("task_3")
        assert parent.shape is NodeShape.LEAF

        entry = flat_map.add_child("task_3")

        assert parent.shape is NodeShape.CONTAINER
        assert entry.before_state["parent_shape"] == "box"
        assert entry.after_state["parent_shape"] == "dot"

    def test_new_ids_do_not_collide(self, flat_map):
        first = flat_map.add_child("task_0").target_id
        second = flat_map.add_child("task_0").target_id

        assert first == "task_4"
        assert second == "task_5"

    def test_inherits_parent_category(self, project_map):
        entry = project_map.add_child("task_3")

        child = project_map.find_by_id(entry.target_id)
        assert child.category == "Documentation"
        assert child.color == project_map.find_by_id("task_3").color

    def test_root_rejected_by_default(self, flat_map):
        assert flat_map.add_child("root") is None
        assert flat_map.node_count() == 5
        assert len(flat_map.mutation_log) == 0

    def test_root_allowed_when_enabled(self):
        mind_map = build_mind_map("A", allow_root_children=True)

        entry = mind_map.add_child("root")

        child = mind_map.find_by_id(entry.target_id)
        assert child.depth == 1
        assert child.category == OTHER

    def test_unknown_parent_is_noop(self, flat_map):
        assert flat_map.add_child("task_99") is None
        assert flat_map.node_count() == 5

    def test_reconstruction_after_add(self, flat_map):
        flat_map.add_child("task_1")

        assert reconstruct_outline(flat_map) == "A\n  B\n    New Task\n  C\nD"

    def test_logged(self, flat_map):
        entry = flat_map.add_child("task_1")

        assert flat_map.mutation_log.last() is entry
        assert entry.operation == "add_child"


class TestAddSibling:
    """Tests for MindMap.add_sibling()."""

    def test_adds_under_same_parent(self, flat_map):
        entry = flat_map.add_sibling("task_1")

        sibling = flat_map.find_by_id(entry.target_id)
        assert sibling.parent.id == "task_0"
        assert sibling.depth == 2
        assert child_ids(flat_map, "task_0") == ["task_1", "task_2", "task_4"]

    def test_top_level_sibling(self, flat_map):
        flat_map.add_sibling("task_0")

        assert reconstruct_outline(flat_map) == "A\n  B\n  C\nD\nNew Task"

    def test_inherits_category(self, project_map):
        entry = project_map.add_sibling("task_4")

        assert project_map.find_by_id(entry.target_id).category == "Documentation"

    def test_root_rejected(self, flat_map):
        assert flat_map.add_sibling("root") is None

    def test_unknown_node_rejected(self, flat_map):
        assert flat_map.add_sibling("missing") is None


class TestDeleteNode:
    """Tests for MindMap.delete_node()."""

    def test_removes_full_subtree(self, nested_map):
        # A has children B and D; B has child C
        before = nested_map.node_count()

        entry = nested_map.delete_node("task_0")

        assert before - nested_map.node_count() == 4
        assert sorted(entry.before_state["removed_ids"]) == ["task_0", "task_1", "task_2", "task_3"]
        for node_id in entry.before_state["removed_ids"]:
            assert not nested_map.has_node(node_id)
        assert nested_map.edge_count() == len(list(nested_map.iter_edges())) == 1
        assert_valid_tree(nested_map)

    def test_parent_reverts_to_leaf(self):
        mind_map = build_mind_map("A\n  B")

        mind_map.delete_node("task_1")

        assert mind_map.find_by_id("task_0").shape is NodeShape.LEAF
        assert mind_map.find_by_id("task_0").display_label == "A"

    def test_root_rejected(self, flat_map):
        assert flat_map.delete_node("root") is None
        assert flat_map.node_count() == 5

    def test_unknown_rejected(self, flat_map):
        assert flat_map.delete_node("task_42") is None

    def test_reconstruction_after_delete(self, nested_map):
        nested_map.delete_node("task_1")

        assert reconstruct_outline(nested_map) == "A\n  D\nE"


class TestMoveNode:
    """Tests for MindMap.move_node()."""

    def test_reparent(self, flat_map):
        entry = flat_map.move_node("task_3", "task_0")

        assert entry.before_state["parent_id"] == "root"
        assert flat_map.find_by_id("task_3").parent.id == "task_0"
        assert reconstruct_outline(flat_map) == "A\n  B\n  C\n  D"
        assert_valid_tree(flat_map)

    def test_depths_follow_subtree(self, nested_map):
        nested_map.move_node("task_1", "task_4")

        assert nested_map.find_by_id("task_1").depth == 2
        assert nested_map.find_by_id("task_2").depth == 3
        nested_map.move_node("task_1", "root")
        assert nested_map.find_by_id("task_1").depth == 1
        assert nested_map.find_by_id("task_2").depth == 2
        assert_valid_tree(nested_map)

    def test_shapes_follow_out_degree(self):
        mind_map = build_mind_map("A\n  B\nC")

        mind_map.move_node("task_1", "task_2")

        assert mind_map.find_by_id("task_0").shape is NodeShape.LEAF
        assert mind_map.find_by_id("task_2").shape is NodeShape.CONTAINER

    def test_cycle_rejected(self, nested_map):
        assert nested_map.move_node("task_0", "task_2") is None
        assert nested_map.move_node("task_0", "task_0") is None
        assert_valid_tree(nested_map)

    def test_noop_move_rejected(self, flat_map):
        assert flat_map.move_node("task_1", "task_0") is None
        assert len(flat_map.mutation_log) == 0

    def test_root_and_unknown_rejected(self, flat_map):
        assert flat_map.move_node("root", "task_0") is None
        assert flat_map.move_node("task_1", "nowhere") is None
        assert flat_map.move_node("nowhere", "task_0") is None


class TestUpdateText:
    """Tests for MindMap.update_text()."""

    def test_updates_text_and_label(self, flat_map):
        entry = flat_map.update_text("task_3", "  Set up the staging environment today ")

        node = flat_map.find_by_id("task_3")
        assert node.original_text == "Set up the staging environment today"
        assert node.display_label == "Set up the staging\nenvironment today"
        assert entry.before_state == {"text": "D"}

    def test_multiline_text_joined(self, flat_map):
        flat_map.update_text("task_3", "first\n  second")

        assert flat_map.find_by_id("task_3").original_text == "first second"
        assert reconstruct_outline(flat_map).splitlines()[-1] == "first second"

    def test_blank_rejected(self, flat_map):
        assert flat_map.update_text("task_3", "   ") is None
        assert flat_map.find_by_id("task_3").original_text == "D"

    def test_root_rejected(self, flat_map):
        assert flat_map.update_text("root", "New root") is None

    def test_unchanged_rejected(self, flat_map):
        assert flat_map.update_text("task_3", "D") is None

    def test_category_untouched(self, project_map):
        project_map.update_text("task_5", "Buy milk")

        assert project_map.find_by_id("task_5").category == "Deployment"


class TestRefreshStyles:
    """Tests for MindMap.refresh_styles()."""

    def test_switch_to_inheritance(self, project_map):
        entry = project_map.refresh_styles(auto_group=False)

        assert {n.category for n in project_map.all_nodes() if not n.is_root} == {OTHER}
        assert entry.before_state["categories"]["task_0"] == "Design"

    def test_round_trip_restores_keywords(self):
        mind_map = build_mind_map(PROJECT_OUTLINE, auto_group=False)

        mind_map.refresh_styles(auto_group=True)

        assert mind_map.find_by_id("task_5").category == "Deployment"

    def test_no_change_returns_none(self, project_map):
        assert project_map.refresh_styles(auto_group=True) is None

    def test_structure_untouched(self, project_map):
        before = parent_map(project_map)

        project_map.refresh_styles(auto_group=False)

        assert parent_map(project_map) == before

    def test_reclassifies_after_text_edit(self, project_map):
        project_map.update_text("task_5", "Buy milk")

        project_map.refresh_styles(auto_group=True)

        assert project_map.find_by_id("task_5").category == OTHER


class TestNavigate:
    """Tests for MindMap.navigate()."""

    def test_up_and_left_go_to_parent(self, flat_map):
        assert flat_map.navigate("up", "task_1") == "task_0"
        assert flat_map.navigate(Direction.LEFT, "task_0") == "root"

    def test_down_goes_to_first_child(self, flat_map):
        assert flat_map.navigate("down", "root") == "task_0"
        assert flat_map.navigate("right", "task_0") == "task_1"

    def test_leaf_goes_to_next_sibling(self, flat_map):
        assert flat_map.navigate("down", "task_1") == "task_2"

    def test_last_sibling_has_no_neighbor(self, flat_map):
        assert flat_map.navigate("down", "task_2") is None
        assert flat_map.navigate("down", "task_3") is None

    def test_root_has_no_parent(self, flat_map):
        assert flat_map.navigate("up", "root") is None

    def test_unknown_direction_and_node(self, flat_map):
        assert flat_map.navigate("sideways", "task_0") is None
        assert flat_map.navigate("up", "missing") is None

    def test_case_insensitive_direction(self, flat_map):
        assert flat_map.navigate("UP", "task_1") == "task_0"


class TestEditSequences:
    """Every sequence of edits keeps a valid tree."""

    def test_mixed_edits(self, nested_map):
        nested_map.add_child("task_4")
        nested_map.add_sibling("task_2")
        nested_map.move_node("task_3", "task_5")
        nested_map.delete_node("task_1")
        nested_map.update_text("task_3", "Renamed")

        assert_valid_tree(nested_map)
        assert len(nested_map.mutation_log) == 5
        assert reconstruct_outline(nested_map) == "A\nE\n  New Task\n    Renamed"
