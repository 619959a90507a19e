"""Tests for splicing report-derived virtual nodes into the flat list."""

from portfolio_docs.schemas.document import SourceItem
from portfolio_docs.services.tree_builder import build_tree, count_nodes, find_node
from portfolio_docs.services.virtual_nodes import (
    is_virtual_id,
    merge_virtual_nodes,
    virtual_node_id,
)
from tests.conftest import make_record


def _reporting_space():
    return [
        make_record("rep", "folder", "Reporting"),
        make_record("q1", "folder", "Q1 2024", parent_id="rep"),
        make_record("deck", "folder", "Deck"),
    ]


def _synthesis(source_id="r1", label="Q1 2024", content="Revenue up 20%."):
    return SourceItem(id=source_id, kind="synthesis", label=label, content=content)


def _virtual(merged):
    return [r for r in merged if r.is_virtual]


class TestShortCircuit:

    def test_no_items_returns_records_unchanged(self):
        records = _reporting_space()
        merged = merge_virtual_nodes(records, [])
        assert merged == records
        assert merged is not records

    def test_none_items(self):
        records = _reporting_space()
        assert merge_virtual_nodes(records, None) == records


class TestAnchoring:

    def test_synthesis_lands_in_period_folder(self):
        merged = merge_virtual_nodes(_reporting_space(), [_synthesis()])
        (node,) = _virtual(merged)
        assert node.id == "virtual-synthesis-r1"
        assert node.type == "synthesis"
        assert node.parent_id == "q1"
        assert node.name == "Synthesis.txt"
        assert node.text_content == "Revenue up 20%."
        assert node.source_report_id == "r1"

    def test_period_match_ignores_case_and_spacing(self):
        merged = merge_virtual_nodes(_reporting_space(), [_synthesis(label="  q1   2024 ")])
        assert _virtual(merged)[0].parent_id == "q1"

    def test_falls_back_to_anchor_folder(self):
        merged = merge_virtual_nodes(_reporting_space(), [_synthesis(label="Q2 2024")])
        (node,) = _virtual(merged)
        assert node.parent_id == "rep"
        assert node.name == "Synthesis - Q2 2024.txt"

    def test_falls_back_to_root_without_anchor_folder(self):
        records = [make_record("deck", "folder", "Deck")]
        (node,) = _virtual(merge_virtual_nodes(records, [_synthesis()]))
        assert node.parent_id is None

    def test_anchor_name_is_case_insensitive(self):
        records = [make_record("rep", "folder", "reporting")]
        (node,) = _virtual(merge_virtual_nodes(records, [_synthesis(label=None)]))
        assert node.parent_id == "rep"
        assert node.name == "Synthesis.txt"

    def test_root_level_anchor_preferred(self):
        records = [
            make_record("x", "folder", "Archive"),
            make_record("a-nested", "folder", "Reporting", parent_id="x"),
            make_record("z-root", "folder", "Reporting"),
        ]
        (node,) = _virtual(merge_virtual_nodes(records, [_synthesis()]))
        assert node.parent_id == "z-root"

    def test_files_named_like_anchor_are_ignored(self):
        records = [make_record("f", "file", "Reporting")]
        (node,) = _virtual(merge_virtual_nodes(records, [_synthesis()]))
        assert node.parent_id is None

    def test_custom_anchor_folder(self):
        item = SourceItem(id="r1", kind="synthesis", label=None, content="x", anchor_folder="Deck")
        (node,) = _virtual(merge_virtual_nodes(_reporting_space(), [item]))
        assert node.parent_id == "deck"


class TestReportFiles:

    def test_report_file_node(self):
        item = SourceItem(
            id="f1",
            kind="report-file",
            label="Q1 2024",
            file_name="board-deck.pdf",
            storage_path="reports/f1.pdf",
            mime_type="application/pdf",
        )
        (node,) = _virtual(merge_virtual_nodes(_reporting_space(), [item]))
        assert node.id == "virtual-report-file-f1"
        assert node.type == "file"
        assert node.name == "board-deck.pdf"
        assert node.storage_path == "reports/f1.pdf"
        assert node.report_file_id == "f1"
        assert node.parent_id == "q1"

    def test_unknown_kind_skipped(self):
        item = SourceItem(id="x", kind="mystery")
        assert _virtual(merge_virtual_nodes(_reporting_space(), [item])) == []


class TestDeduplication:

    def test_promoted_synthesis_not_duplicated(self):
        records = _reporting_space() + [
            make_record("p", "synthesis", "Synthesis.txt", parent_id="q1", source_report_id="r1"),
        ]
        assert _virtual(merge_virtual_nodes(records, [_synthesis()])) == []

    def test_promoted_report_file_not_duplicated(self):
        records = _reporting_space() + [
            make_record("p", "file", "deck.pdf", parent_id="q1", report_file_id="f1"),
        ]
        item = SourceItem(id="f1", kind="report-file", file_name="deck.pdf")
        assert _virtual(merge_virtual_nodes(records, [item])) == []

    def test_back_reference_kinds_do_not_cross(self):
        records = [make_record("p", "file", "x", source_report_id="f1")]
        item = SourceItem(id="f1", kind="report-file", file_name="deck.pdf")
        assert len(_virtual(merge_virtual_nodes(records, [item]))) == 1

    def test_repeated_item_produces_one_node(self):
        merged = merge_virtual_nodes(_reporting_space(), [_synthesis(), _synthesis()])
        assert len(_virtual(merged)) == 1


class TestIdentity:

    def test_ids_stable_across_merges(self):
        records = _reporting_space()
        items = [_synthesis("r1"), _synthesis("r2", label="Q2 2024")]
        first = [r.id for r in _virtual(merge_virtual_nodes(records, items))]
        second = [r.id for r in _virtual(merge_virtual_nodes(records, items))]
        assert first == second == ["virtual-synthesis-r1", "virtual-synthesis-r2"]

    def test_custom_prefix(self):
        (node,) = _virtual(merge_virtual_nodes(_reporting_space(), [_synthesis()], prefix="gen"))
        assert node.id == "gen-synthesis-r1"
        assert virtual_node_id("synthesis", "r1", prefix="gen") == node.id

    def test_is_virtual_id(self):
        assert is_virtual_id("virtual-synthesis-abc")
        assert is_virtual_id("virtual-report-file-abc")
        assert not is_virtual_id("3f2a-uuid")


class TestMergeIntoTree:

    def test_output_feeds_tree_builder(self):
        records = _reporting_space()
        items = [_synthesis(), SourceItem(id="f1", kind="report-file", label="Q1 2024", file_name="a.pdf")]
        merged = merge_virtual_nodes(records, items, company_id="company-1")

        assert merged[: len(records)] == records
        tree = build_tree(merged)
        assert count_nodes(tree) == len(records) + 2

        q1 = find_node(tree, "q1")
        assert [c.name for c in q1.children] == ["a.pdf", "Synthesis.txt"]
        assert all(c.company_id == "company-1" for c in q1.children)
