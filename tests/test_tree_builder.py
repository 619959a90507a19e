"""Tests for flat-list -> tree construction and its traversal helpers."""

import itertools

from portfolio_docs.services.tree_builder import (
    build_content_index,
    build_tree,
    collect_descendant_ids,
    count_nodes,
    find_node,
    iter_nodes,
)
from tests.conftest import make_record


def _names(nodes):
    return [n.name for n in nodes]


def _shape(nodes):
    """Comparable (id, children) structure of a forest."""
    return [(n.id, _shape(n.children)) for n in nodes]


class TestBasicShape:

    def test_empty_input(self):
        assert build_tree([]) == []

    def test_single_root(self):
        tree = build_tree([make_record("a", "folder", "Only")])
        assert len(tree) == 1
        assert tree[0].children == []

    def test_reporting_example(self):
        records = [
            make_record("a", "folder", "Reporting"),
            make_record("b", "folder", "2024-Q1", parent_id="a"),
            make_record("c", "file", "notes.pdf", parent_id="b"),
        ]
        tree = build_tree(records)

        assert _names(tree) == ["Reporting"]
        assert _names(tree[0].children) == ["2024-Q1"]
        assert _names(tree[0].children[0].children) == ["notes.pdf"]
        assert count_nodes(tree) == 3

    def test_child_listed_before_parent(self):
        records = [
            make_record("c", "file", "notes.pdf", parent_id="b"),
            make_record("b", "folder", "2024-Q1", parent_id="a"),
            make_record("a", "folder", "Reporting"),
        ]
        assert _shape(build_tree(records)) == [("a", [("b", [("c", [])])])]

    def test_input_records_not_mutated(self):
        records = [
            make_record("a", "folder", "Root"),
            make_record("b", "file", "x", parent_id="a"),
        ]
        before = [r.model_dump() for r in records]
        build_tree(records)
        assert [r.model_dump() for r in records] == before


class TestOrdering:

    def test_folders_before_files(self):
        records = [
            make_record("f1", "file", "aaa.pdf"),
            make_record("d1", "folder", "zzz"),
            make_record("s1", "synthesis", "bbb.txt"),
        ]
        assert _names(build_tree(records)) == ["zzz", "aaa.pdf", "bbb.txt"]

    def test_names_ignore_case(self):
        records = [
            make_record("1", "file", "cherry"),
            make_record("2", "file", "Banana"),
            make_record("3", "file", "apple"),
        ]
        assert _names(build_tree(records)) == ["apple", "Banana", "cherry"]

    def test_accents_sort_with_base_letter(self):
        records = [
            make_record("1", "folder", "zeta"),
            make_record("2", "folder", "Éclair"),
            make_record("3", "folder", "alpha"),
        ]
        assert _names(build_tree(records)) == ["alpha", "Éclair", "zeta"]

    def test_equal_names_keep_input_order(self):
        records = [make_record("x", "file", "same"), make_record("y", "file", "same")]
        assert [n.id for n in build_tree(records)] == ["x", "y"]
        assert [n.id for n in build_tree(list(reversed(records)))] == ["y", "x"]

    def test_children_sorted_at_every_level(self):
        records = [
            make_record("root", "folder", "Root"),
            make_record("b", "file", "b.pdf", parent_id="root"),
            make_record("sub", "folder", "Sub", parent_id="root"),
            make_record("a", "file", "a.pdf", parent_id="root"),
            make_record("z", "file", "z.pdf", parent_id="sub"),
            make_record("y", "folder", "Y", parent_id="sub"),
        ]
        tree = build_tree(records)
        assert _names(tree[0].children) == ["Sub", "a.pdf", "b.pdf"]
        assert _names(tree[0].children[0].children) == ["Y", "z.pdf"]

    def test_permuted_input_builds_identical_tree(self):
        records = [
            make_record("a", "folder", "Reporting"),
            make_record("b", "folder", "Deck", parent_id="a"),
            make_record("c", "file", "notes.pdf", parent_id="a"),
            make_record("d", "file", "model.xlsx"),
        ]
        expected = _shape(build_tree(records))
        for permutation in itertools.permutations(records):
            assert _shape(build_tree(list(permutation))) == expected


class TestDegradedInput:

    def test_dangling_parent_becomes_root(self):
        records = [make_record("a", "file", "orphan.pdf", parent_id="missing")]
        tree = build_tree(records)
        assert [n.id for n in tree] == ["a"]

    def test_self_reference_becomes_root(self):
        tree = build_tree([make_record("a", "folder", "Loop", parent_id="a")])
        assert _shape(tree) == [("a", [])]

    def test_non_folder_parent_becomes_root(self):
        records = [
            make_record("f", "file", "parent.pdf"),
            make_record("g", "file", "child.pdf", parent_id="f"),
        ]
        tree = build_tree(records)
        assert count_nodes(tree) == 2
        assert all(n.children == [] for n in tree)

    def test_two_cycle_terminates_and_keeps_all_nodes(self):
        records = [
            make_record("b", "folder", "B", parent_id="a"),
            make_record("a", "folder", "A", parent_id="b"),
        ]
        tree = build_tree(records)
        assert _shape(tree) == [("a", [("b", [])])]

    def test_three_cycle_with_attached_file(self):
        records = [
            make_record("a", "folder", "A", parent_id="c"),
            make_record("b", "folder", "B", parent_id="a"),
            make_record("c", "folder", "C", parent_id="b"),
            make_record("d", "file", "D", parent_id="a"),
        ]
        tree = build_tree(records)
        assert count_nodes(tree) == 4
        assert _shape(tree) == [("a", [("b", [("c", [])]), ("d", [])])]

    def test_duplicate_ids_do_not_crash(self):
        records = [
            make_record("dup", "folder", "First"),
            make_record("dup", "folder", "Second"),
            make_record("child", "file", "x.pdf", parent_id="dup"),
        ]
        tree = build_tree(records)
        assert count_nodes(tree) == 3
        second = next(n for n in tree if n.name == "Second")
        assert [c.id for c in second.children] == ["child"]

    def test_deep_chain(self):
        depth = 3000
        records = [make_record("n0", "folder", "n0")]
        records += [
            make_record(f"n{i}", "folder", f"n{i}", parent_id=f"n{i - 1}") for i in range(1, depth)
        ]
        tree = build_tree(records)
        assert count_nodes(tree) == depth
        assert len(tree) == 1


class TestCountAndNoDuplication:

    def test_every_id_appears_once(self):
        records = [
            make_record("r", "folder", "R"),
            make_record("s", "folder", "S", parent_id="r"),
            make_record("t", "file", "T", parent_id="s"),
            make_record("u", "file", "U", parent_id="ghost"),
            make_record("v", "file", "V", parent_id="t"),
        ]
        ids = [n.id for n in iter_nodes(build_tree(records))]
        assert sorted(ids) == sorted(r.id for r in records)
        assert len(ids) == len(set(ids))


class TestHelpers:

    def _records(self):
        return [
            make_record("root", "folder", "Root"),
            make_record("sub", "folder", "Sub", parent_id="root"),
            make_record("f1", "file", "a.pdf", parent_id="sub", storage_path="c/1_a.pdf"),
            make_record("f2", "file", "b.txt", parent_id="root", text_content="hello"),
            make_record("other", "file", "c.pdf"),
        ]

    def test_iter_nodes_is_preorder(self):
        ids = [n.id for n in iter_nodes(build_tree(self._records()))]
        assert ids == ["root", "sub", "f1", "f2", "other"]

    def test_find_node(self):
        tree = build_tree(self._records())
        assert find_node(tree, "f1").name == "a.pdf"
        assert find_node(tree, "nope") is None

    def test_collect_descendants_root_first(self):
        ids = collect_descendant_ids(self._records(), "root")
        assert ids[0] == "root"
        assert set(ids) == {"root", "sub", "f1", "f2"}

    def test_collect_descendants_of_leaf(self):
        assert collect_descendant_ids(self._records(), "f1") == ["f1"]

    def test_collect_descendants_unknown_id(self):
        assert collect_descendant_ids(self._records(), "nope") == []

    def test_collect_descendants_terminates_on_cycle(self):
        records = [
            make_record("a", "folder", "A", parent_id="b"),
            make_record("b", "folder", "B", parent_id="a"),
        ]
        assert sorted(collect_descendant_ids(records, "a")) == ["a", "b"]

    def test_content_index(self):
        index = build_content_index(self._records())
        assert index == {"f2": "hello"}
