"""Tests for graph -> outline reconstruction."""

from mindmapper.graph.builder import MindMapBuilder
from mindmapper.graph.reconstructor import (
    iter_outline_lines,
    reconstruct_outline,
    render_outline_lines,
    to_outline_forest,
)
from tests.core.graph_test_helpers import (
    FLAT_OUTLINE,
    NESTED_OUTLINE,
    PROJECT_OUTLINE,
    build_mind_map,
    chain_outline,
    outline_shape,
    parent_map,
)


class TestReconstructOutline:
    """Tests for reconstruct_outline()."""

    def test_unedited_round_trip(self):
        for outline in (FLAT_OUTLINE, NESTED_OUTLINE, PROJECT_OUTLINE):
            assert reconstruct_outline(build_mind_map(outline)) == outline

    def test_empty_document(self):
        assert reconstruct_outline(MindMapBuilder().build()) == ""

    def test_normalizes_indentation(self):
        mind_map = build_mind_map("A\n\tB\n\t\tC\nD")

        assert reconstruct_outline(mind_map) == "A\n  B\n    C\nD"

    def test_uses_original_text_not_label(self):
        long_text = "Set up the staging environment for the whole team today"
        mind_map = build_mind_map(f"Parent\n  {long_text}")

        assert "\n" in mind_map.find_by_id("task_1").display_label
        assert reconstruct_outline(mind_map) == f"Parent\n  {long_text}"

    def test_idempotent_after_edits(self, nested_map):
        nested_map.add_child("task_4")
        nested_map.move_node("task_3", "task_4")
        nested_map.delete_node("task_2")

        first = reconstruct_outline(nested_map)
        rebuilt = build_mind_map(first)

        assert reconstruct_outline(rebuilt) == first
        assert parent_map(rebuilt) == parent_map(nested_map)

    def test_many_siblings_keep_order(self):
        outline = "\n".join(f"Item {i}" for i in range(15))

        assert reconstruct_outline(build_mind_map(outline)) == outline


class TestHelpers:
    """Tests for the line-level and forest views."""

    def test_iter_outline_lines(self, flat_map):
        assert list(iter_outline_lines(flat_map)) == [(0, "A"), (1, "B"), (1, "C"), (0, "D")]

    def test_render_outline_lines(self):
        assert render_outline_lines([(0, "A"), (2, "B")]) == "A\n    B"

    def test_to_outline_forest(self, nested_map):
        forest = to_outline_forest(nested_map)

        assert outline_shape(forest) == [("A", [("B", [("C", [])]), ("D", [])]), ("E", [])]
        assert forest[0].children[0].children[0].indent_level == 2

    def test_to_outline_forest_deep_chain(self):
        forest = to_outline_forest(build_mind_map(chain_outline(1200)))

        nodes = list(forest[0].walk())
        assert len(forest) == 1
        assert len(nodes) == 1200
        assert nodes[-1].text == "n1199"
        assert nodes[-1].indent_level == 1199
