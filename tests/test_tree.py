"""Tests for the node model, path addressing and flattening."""

import json

import pytest

from jtree._path import (
    ROOT,
    child_path,
    collect_all_paths,
    iter_paths,
    path_chain,
)
from jtree.flatten import LineKind, flatten
from jtree.node import NULL, Node, NodeKind, count_nodes, number_text, parse_value

EXAMPLE = '{"a": 1, "b": [true, null, "x"]}'

NESTED = {
    "name": "demo",
    "tags": ["x", "y"],
    "owner": {"id": 7, "roles": ["admin", {"scope": "all"}], "empty": {}},
    "items": [],
    "ratio": 0.5,
}


def _example() -> Node:
    return parse_value(json.loads(EXAMPLE))


def _container_paths(node: Node) -> list[str]:
    return [p for p, n in iter_paths(node) if n.is_container]


class TestParseValue:
    """Ordered type discrimination."""

    def test_bool_is_not_number(self):
        assert parse_value(True).kind is NodeKind.BOOL
        assert parse_value(False).kind is NodeKind.BOOL
        assert parse_value(True).value is True

    def test_numbers(self):
        assert parse_value(1).kind is NodeKind.NUMBER
        assert parse_value(2.5).kind is NodeKind.NUMBER
        assert parse_value(0).value == 0

    def test_string_and_null(self):
        assert parse_value("hi") == Node(NodeKind.STRING, "hi")
        assert parse_value(None) is NULL

    def test_object_keeps_insertion_order(self):
        node = parse_value(json.loads('{"b": 1, "a": 2, "c": 3}'))
        assert [k for k, _ in node.children] == ["b", "a", "c"]

    def test_array_children_indexed(self):
        node = parse_value(["x", "y"])
        assert [k for k, _ in node.children] == [0, 1]
        assert node.child_count == 2

    def test_unsupported_value_becomes_null(self):
        assert parse_value(object()) is NULL
        assert parse_value({1, 2}) is NULL

    def test_unsupported_value_keeps_siblings(self):
        node = parse_value([1, object(), "x"])
        kinds = [child.kind for _, child in node.children]
        assert kinds == [NodeKind.NUMBER, NodeKind.NULL, NodeKind.STRING]
        assert node.total_lines == 5

    def test_leaf_child_count_is_zero(self):
        assert parse_value("x").child_count == 0
        assert not parse_value(3).is_container


class TestTotalLines:
    """Container line counts."""

    def test_example(self):
        root = _example()
        assert root.total_lines == 8
        assert dict(root.children)["b"].total_lines == 5

    def test_leaf(self):
        assert parse_value("x").total_lines == 1
        assert parse_value(None).total_lines == 1

    def test_empty_containers(self):
        assert parse_value({}).total_lines == 2
        assert parse_value([]).total_lines == 2

    def test_invariant_holds_everywhere(self):
        root = parse_value(NESTED)
        for _, node in iter_paths(root):
            if node.is_container:
                expected = 2 + sum(c.total_lines for _, c in node.children)
                assert node.total_lines == expected
            else:
                assert node.total_lines == 1


class TestNodeEquality:
    def test_same_structure_equal(self):
        assert parse_value([1, {"a": "x"}]) == parse_value([1, {"a": "x"}])

    def test_key_order_matters(self):
        left = parse_value(json.loads('{"a": 1, "b": 2}'))
        right = parse_value(json.loads('{"b": 2, "a": 1}'))
        assert left != right

    def test_bool_differs_from_number(self):
        assert parse_value(True) != parse_value(1)

    def test_int_and_float_compare_as_numbers(self):
        assert parse_value(1) == parse_value(1.0)

    def test_different_variants(self):
        assert parse_value([]) != parse_value({})
        assert parse_value("null") != parse_value(None)


class TestNumberText:
    def test_int(self):
        assert number_text(1) == "1"

    def test_float(self):
        assert number_text(200.5) == "200.5"
        assert number_text(1.0) == "1.0"

    def test_large_float(self):
        assert number_text(1e100) == "1e+100"


class TestPaths:
    """Path addressing."""

    def test_child_path(self):
        assert child_path(ROOT, "a") == "root.a"
        assert child_path("root.a", 0) == "root.a[0]"
        assert child_path("root.a[0]", "b") == "root.a[0].b"

    def test_collect_all_paths_example(self):
        assert collect_all_paths(_example()) == {
            "root",
            "root.a",
            "root.b",
            "root.b[0]",
            "root.b[1]",
            "root.b[2]",
        }

    def test_one_path_per_node(self):
        root = parse_value(NESTED)
        assert len(collect_all_paths(root)) == count_nodes(root)

    def test_iter_paths_document_order(self):
        paths = [p for p, _ in iter_paths(_example())]
        assert paths == [
            "root",
            "root.a",
            "root.b",
            "root.b[0]",
            "root.b[1]",
            "root.b[2]",
        ]

    def test_path_chain(self):
        assert path_chain(_example(), "root.b[1]") == ["root", "root.b", "root.b[1]"]
        assert path_chain(_example(), "root") == ["root"]

    def test_path_chain_nested(self):
        root = parse_value(NESTED)
        assert path_chain(root, "root.owner.roles[1].scope") == [
            "root",
            "root.owner",
            "root.owner.roles",
            "root.owner.roles[1]",
            "root.owner.roles[1].scope",
        ]

    def test_path_chain_does_not_confuse_indices(self):
        root = parse_value({"a": list(range(12))})
        assert path_chain(root, "root.a[10]") == ["root", "root.a", "root.a[10]"]

    def test_path_chain_key_with_dot(self):
        root = parse_value({"x.y": [1]})
        assert path_chain(root, "root.x.y[0]") == ["root", "root.x.y", "root.x.y[0]"]

    def test_path_chain_unknown_path(self):
        with pytest.raises(KeyError):
            path_chain(_example(), "root.zzz")
        with pytest.raises(KeyError):
            path_chain(_example(), "root.b[3]")


class TestFlatten:
    """Flattening with an expansion set."""

    def test_fully_expanded_example(self):
        root = _example()
        lines = flatten(root, collect_all_paths(root))
        assert [ln.id for ln in lines] == [
            "root",
            "root.a",
            "root.b",
            "root.b[0]",
            "root.b[1]",
            "root.b[2]",
            "root.b_closing",
            "root_closing",
        ]
        assert [ln.kind for ln in lines] == [
            LineKind.OPENING,
            LineKind.VALUE,
            LineKind.OPENING,
            LineKind.VALUE,
            LineKind.VALUE,
            LineKind.VALUE,
            LineKind.CLOSING,
            LineKind.CLOSING,
        ]
        assert [ln.line_number for ln in lines] == list(range(1, 9))
        assert [ln.depth for ln in lines] == [0, 1, 1, 2, 2, 2, 1, 0]

    def test_is_last_flags(self):
        root = _example()
        lines = flatten(root, collect_all_paths(root))
        assert [ln.is_last for ln in lines] == [
            True, False, True, False, False, True, True, True,
        ]

    def test_keys_only_on_object_members(self):
        root = _example()
        lines = flatten(root, collect_all_paths(root))
        assert [ln.key for ln in lines] == [None, "a", "b", None, None, None, None, None]

    def test_brackets(self):
        root = _example()
        lines = flatten(root, collect_all_paths(root))
        assert lines[0].bracket == "{"
        assert lines[2].bracket == "["
        assert lines[6].bracket == "]"
        assert lines[7].bracket == "}"

    def test_collapsed_child_example(self):
        root = _example()
        expanded = collect_all_paths(root) - {"root.b"}
        lines = flatten(root, expanded)
        assert len(lines) == 8 - (5 - 1)
        assert [ln.id for ln in lines] == ["root", "root.a", "root.b", "root_closing"]
        assert lines[2].kind is LineKind.OPENING
        assert lines[2].expanded is False
        assert [ln.line_number for ln in lines] == [1, 2, 3, 8]

    def test_collapsed_sibling_keeps_document_numbering(self):
        root = parse_value(json.loads('{"a": [1, 2], "b": 3}'))
        lines = flatten(root, {"root"})
        assert [ln.line_number for ln in lines] == [1, 2, 6, 7]

    def test_collapsed_root(self):
        lines = flatten(_example(), set())
        assert len(lines) == 1
        assert lines[0].kind is LineKind.OPENING
        assert not lines[0].expanded

    def test_scalar_root(self):
        lines = flatten(parse_value(5), set())
        assert len(lines) == 1
        assert lines[0].kind is LineKind.VALUE
        assert lines[0].line_number == 1
        assert lines[0].is_last

    def test_empty_container_expanded(self):
        root = parse_value({"e": {}})
        lines = flatten(root, collect_all_paths(root))
        assert [ln.id for ln in lines] == ["root", "root.e", "root.e_closing", "root_closing"]
        assert len(lines) == root.total_lines

    def test_full_expansion_matches_total_lines(self):
        root = parse_value(NESTED)
        assert len(flatten(root, collect_all_paths(root))) == root.total_lines

    def test_collapsing_removes_total_lines_minus_one(self):
        root = parse_value(NESTED)
        everything = collect_all_paths(root)
        full = len(flatten(root, everything))
        for path, node in iter_paths(root):
            if not node.is_container:
                continue
            lines = flatten(root, everything - {path})
            assert full - len(lines) == node.total_lines - 1
            collapsed = [ln for ln in lines if ln.path == path]
            assert len(collapsed) == 1
            assert collapsed[0].kind is LineKind.OPENING

    def test_closing_numbers_follow_opening(self):
        root = parse_value(NESTED)
        lines = flatten(root, collect_all_paths(root))
        by_id = {ln.id: ln for ln in lines}
        for path in _container_paths(root):
            opening = by_id[path]
            closing = by_id[path + "_closing"]
            assert closing.line_number == opening.line_number + opening.node.total_lines - 1

    def test_collapsed_subtrees_not_visited(self):
        class RecordingSet(set):
            def __init__(self, *args):
                super().__init__(*args)
                self.asked = []

            def __contains__(self, item):
                self.asked.append(item)
                return super().__contains__(item)

        root = parse_value({"a": {"b": {"c": 1}}, "d": [[1], [2]]})
        expanded = RecordingSet({"root"})
        flatten(root, expanded)
        assert expanded.asked == ["root", "root.a", "root.d"]

    def test_pure(self):
        root = _example()
        expanded = {"root", "root.b"}
        assert flatten(root, expanded) == flatten(root, expanded)
        assert expanded == {"root", "root.b"}
