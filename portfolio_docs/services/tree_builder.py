"""Flat document list -> sorted navigation tree.

Pure functions only. Every input record lands exactly once in the output,
whatever the state of its ``parent_id``: dangling parents, self references,
non-folder parents and parent cycles all degrade to root placement.
"""

import logging
import unicodedata
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from ..schemas.document import DocumentRecord, DocumentTreeNode, FOLDER

logger = logging.getLogger(__name__)


def build_tree(records: Sequence[DocumentRecord]) -> List[DocumentTreeNode]:
    """Build the sorted forest for *records*.

    Duplicate ids resolve last-write-wins: children attach to the last record
    carrying the id, earlier duplicates are still placed on their own.
    """
    nodes = [_to_node(record) for record in records]

    by_id: Dict[str, DocumentTreeNode] = {}
    for node in nodes:
        by_id[node.id] = node

    parent_of: Dict[str, Optional[str]] = {
        node_id: _resolve_parent(node, by_id) for node_id, node in by_id.items()
    }
    _break_cycles(parent_of)

    roots: List[DocumentTreeNode] = []
    for node in nodes:
        if by_id[node.id] is node:
            parent_id = parent_of[node.id]
        else:
            parent_id = _resolve_parent(node, by_id)

        if parent_id is None:
            roots.append(node)
        else:
            by_id[parent_id].children.append(node)

    _sort_forest(roots)
    return roots


def count_nodes(tree: Iterable[DocumentTreeNode]) -> int:
    return sum(1 for _ in iter_nodes(tree))


def iter_nodes(tree: Iterable[DocumentTreeNode]) -> Iterator[DocumentTreeNode]:
    """Pre-order walk over every node of the forest."""
    stack = list(reversed(list(tree)))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def find_node(tree: Iterable[DocumentTreeNode], node_id: str) -> Optional[DocumentTreeNode]:
    for node in iter_nodes(tree):
        if node.id == node_id:
            return node
    return None


def collect_descendant_ids(records: Sequence[DocumentRecord], root_id: str) -> List[str]:
    """Ids of *root_id* and everything below it, root first.

    Used to cascade folder deletion. Returns an empty list when *root_id* is
    not among *records*.
    """
    if not any(record.id == root_id for record in records):
        return []

    children_by_parent: Dict[str, List[str]] = {}
    for record in records:
        if record.parent_id and record.parent_id != record.id:
            children_by_parent.setdefault(record.parent_id, []).append(record.id)

    collected: List[str] = []
    visited = set()
    stack = [root_id]
    while stack:
        current = stack.pop()
        if current in visited:
            continue
        visited.add(current)
        collected.append(current)
        stack.extend(reversed(children_by_parent.get(current, [])))
    return collected


def build_content_index(records: Iterable[DocumentRecord]) -> Dict[str, str]:
    """Map of id -> inline text for every record that carries some."""
    return {
        record.id: record.text_content
        for record in records
        if record.text_content is not None
    }


# ----------------------------------------------------------------------
# Internals
# ----------------------------------------------------------------------

def _to_node(record: DocumentRecord) -> DocumentTreeNode:
    data = record.model_dump(exclude={"children"})
    return DocumentTreeNode(**data, children=[])


def _resolve_parent(
    node: DocumentTreeNode, by_id: Dict[str, DocumentTreeNode]
) -> Optional[str]:
    """Parent id *node* may attach to, or None for root placement."""
    parent_id = node.parent_id
    if not parent_id:
        return None
    if parent_id == node.id:
        logger.warning("Self-referencing parent, placing at root", extra={"document_id": node.id})
        return None
    parent = by_id.get(parent_id)
    if parent is None:
        logger.debug(
            "Parent missing, placing at root",
            extra={"document_id": node.id, "parent_id": parent_id},
        )
        return None
    if parent.type != FOLDER:
        logger.warning(
            "Parent is not a folder, placing at root",
            extra={"document_id": node.id, "parent_id": parent_id, "parent_type": parent.type},
        )
        return None
    return parent_id


def _break_cycles(parent_of: Dict[str, Optional[str]]) -> None:
    """Cut every parent cycle at its smallest id, in place."""
    on_path, done = 1, 2
    state: Dict[str, int] = {}

    for start in parent_of:
        if start in state:
            continue

        path: List[str] = []
        current = start
        while current is not None and current not in state:
            state[current] = on_path
            path.append(current)
            current = parent_of[current]

        if current is not None and state[current] == on_path:
            cycle = path[path.index(current):]
            breaker = min(cycle)
            parent_of[breaker] = None
            logger.warning(
                "Parent cycle detected, placing one member at root",
                extra={"cycle": cycle, "document_id": breaker},
            )

        for node_id in path:
            state[node_id] = done


def _collation_key(name: str) -> Tuple[str, str, str]:
    """Locale-style ordering: base letters, then accents, then case (lower first)."""
    folded = name.casefold()
    base = "".join(
        ch for ch in unicodedata.normalize("NFKD", folded) if not unicodedata.combining(ch)
    )
    return base, folded, name.swapcase()


def _sort_key(node: DocumentTreeNode) -> Tuple[int, Tuple[str, str, str]]:
    return (0 if node.type == FOLDER else 1, _collation_key(node.name or ""))


def _sort_forest(roots: List[DocumentTreeNode]) -> None:
    # sort() is stable, so equal keys keep input order.
    pending = [roots]
    while pending:
        siblings = pending.pop()
        siblings.sort(key=_sort_key)
        pending.extend(node.children for node in siblings if node.children)
