"""Splice report-derived virtual nodes into a flat document list.

Virtual nodes are never persisted. They are rebuilt on every read from the
company's reports and disappear as soon as a persisted record carries a
back-reference to the same source (the item has been promoted).

Anchor resolution for an item, first match wins:
    1. a child folder of the anchor folder whose name matches the item label
    2. the anchor folder itself (``Reporting`` by default)
    3. the root
When several folders share the anchor name, root-level folders win, then the
smallest id.
"""

import logging
from typing import Dict, List, Optional, Sequence, Set

from ..core.config import settings
from ..schemas.document import DocumentRecord, SourceItem, FILE, FOLDER, SYNTHESIS

REPORT_FILE = "report-file"
SOURCE_KINDS = (SYNTHESIS, REPORT_FILE)

logger = logging.getLogger(__name__)


def virtual_node_id(kind: str, source_id: str, prefix: Optional[str] = None) -> str:
    """Stable id of the virtual node for a source item."""
    prefix = prefix or settings.virtual_id_prefix
    return f"{prefix}-{kind}-{source_id}"


def is_virtual_id(node_id: str, prefix: Optional[str] = None) -> bool:
    prefix = prefix or settings.virtual_id_prefix
    return any(node_id.startswith(f"{prefix}-{kind}-") for kind in SOURCE_KINDS)


def merge_virtual_nodes(
    records: Sequence[DocumentRecord],
    items: Optional[Sequence[SourceItem]],
    company_id: Optional[str] = None,
    prefix: Optional[str] = None,
) -> List[DocumentRecord]:
    """Return *records* followed by one virtual node per unpromoted item."""
    if not items:
        return list(records)

    promoted = {
        SYNTHESIS: {r.source_report_id for r in records if r.source_report_id},
        REPORT_FILE: {r.report_file_id for r in records if r.report_file_id},
    }
    taken_ids: Set[str] = {r.id for r in records}
    resolver = _AnchorResolver(records)

    virtual: List[DocumentRecord] = []
    for item in items:
        if item.kind not in SOURCE_KINDS:
            logger.warning("Unknown source item kind, skipping", extra={"kind": item.kind, "source_id": item.id})
            continue
        if item.id in promoted[item.kind]:
            continue
        node_id = virtual_node_id(item.kind, item.id, prefix)
        if node_id in taken_ids:
            continue
        taken_ids.add(node_id)

        parent_id, in_period_folder = resolver.resolve(item.anchor_folder, item.label)
        virtual.append(_make_node(item, node_id, parent_id, in_period_folder, company_id))

    logger.debug(
        "Merged virtual nodes",
        extra={"persisted": len(records), "virtual": len(virtual), "company_id": company_id},
    )
    return list(records) + virtual


# ----------------------------------------------------------------------
# Internals
# ----------------------------------------------------------------------

def _normalize(label: Optional[str]) -> str:
    return " ".join((label or "").split()).casefold()


class _AnchorResolver:
    """Folder lookups shared by every item of one merge."""

    def __init__(self, records: Sequence[DocumentRecord]):
        self._by_name: Dict[str, List[DocumentRecord]] = {}
        self._children: Dict[str, List[DocumentRecord]] = {}
        for record in records:
            if record.type != FOLDER:
                continue
            self._by_name.setdefault(_normalize(record.name), []).append(record)
            if record.parent_id:
                self._children.setdefault(record.parent_id, []).append(record)

    def resolve(self, anchor_name: str, label: Optional[str]) -> tuple[Optional[str], bool]:
        """(parent_id, anchored_in_period_folder) for an item."""
        candidates = self._by_name.get(_normalize(anchor_name))
        if not candidates:
            return None, False
        anchor = min(candidates, key=lambda f: (f.parent_id is not None, f.id))

        wanted = _normalize(label)
        if wanted:
            period_folders = [
                f for f in self._children.get(anchor.id, []) if _normalize(f.name) == wanted
            ]
            if period_folders:
                return min(period_folders, key=lambda f: f.id).id, True
        return anchor.id, False


def _make_node(
    item: SourceItem,
    node_id: str,
    parent_id: Optional[str],
    in_period_folder: bool,
    company_id: Optional[str],
) -> DocumentRecord:
    if item.kind == SYNTHESIS:
        if in_period_folder or not item.label:
            name = "Synthesis.txt"
        else:
            name = f"Synthesis - {item.label}.txt"
        return DocumentRecord(
            id=node_id,
            company_id=company_id,
            type=SYNTHESIS,
            name=name,
            parent_id=parent_id,
            mime_type="text/plain",
            text_content=item.content,
            source_report_id=item.id,
            created_at=item.created_at,
            updated_at=item.created_at,
            is_virtual=True,
        )

    return DocumentRecord(
        id=node_id,
        company_id=company_id,
        type=FILE,
        name=item.file_name or "Report file",
        parent_id=parent_id,
        storage_path=item.storage_path,
        mime_type=item.mime_type,
        original_file_name=item.file_name,
        report_file_id=item.id,
        created_at=item.created_at,
        updated_at=item.created_at,
        is_virtual=True,
    )
