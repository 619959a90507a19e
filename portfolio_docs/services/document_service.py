"""Document service — deep module for a company's document space.

Owns reads (tree with virtual report nodes, content lookup) and every
mutation (folder creation, file registration, rename, move, cascading delete,
content update, promotion of virtual nodes). The hierarchy itself is always
computed by the pure functions in ``tree_builder`` and ``virtual_nodes``;
this module only fetches records and persists changes.
"""

import logging
import time
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..exceptions import (
    DatabaseError,
    DocumentNotFoundError,
    FolderNotFoundError,
    InvalidParentError,
    ReportNotFoundError,
    ValidationError,
)
from ..models import CompanyReport, PortfolioDocument
from ..repositories import DocumentRepository, ReportRepository
from ..schemas.document import (
    DocumentRecord,
    DocumentTreeNode,
    SourceItem,
    FolderCreate,
    FileRegister,
    TextDocumentCreate,
    DeleteResult,
    FOLDER,
    FILE,
    SYNTHESIS,
)
from ..schemas.report import ReportCreate
from .name_sanitizer import build_storage_path
from .report_period import parse_report_period
from .tree_builder import build_tree, build_content_index, collect_descendant_ids
from .virtual_nodes import REPORT_FILE, is_virtual_id, merge_virtual_nodes

logger = logging.getLogger(__name__)


class DocumentService:
    """All document-space operations behind a simple interface.

    Public methods:
        get_tree             -- sorted forest including virtual report nodes
        get_content          -- inline text of a persisted or virtual node
        create_folder        -- new folder, optionally inside another folder
        register_file        -- record an uploaded file and its storage path
        create_text_document -- record holding inline text
        rename / move        -- metadata mutations; move rejects cycles
        delete               -- cascading delete, returns blobs to release
        update_content       -- edit inline text, synced to the linked report
        promote_virtual      -- persist a virtual node
        register_report      -- store a report produced by the reporting pipeline
        get_report           -- one report of the company
    """

    def __init__(self, db: Session):
        self.db = db
        self.doc_repo = DocumentRepository(db)
        self.report_repo = ReportRepository(db)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_records(self, company_id: str) -> List[DocumentRecord]:
        rows = self.doc_repo.list_by_company(company_id, limit=settings.tree_document_limit)
        if len(rows) == settings.tree_document_limit:
            logger.warning(
                "Document list truncated at tree limit",
                extra={"company_id": company_id, "limit": settings.tree_document_limit},
            )
        return [DocumentRecord.model_validate(row) for row in rows]

    def get_source_items(self, company_id: str) -> List[SourceItem]:
        """Report-derived items, newest period first."""
        reports = sorted(
            self.report_repo.list_by_company(company_id),
            key=lambda r: (parse_report_period(r.report_period), r.report_date or date.min),
            reverse=True,
        )
        items: List[SourceItem] = []
        for report in reports:
            items.extend(self._items_for_report(report))
        return items

    def get_merged_records(self, company_id: str) -> List[DocumentRecord]:
        return merge_virtual_nodes(
            self.get_records(company_id),
            self.get_source_items(company_id),
            company_id=company_id,
        )

    def get_tree(self, company_id: str) -> List[DocumentTreeNode]:
        return build_tree(self.get_merged_records(company_id))

    def get_content(self, company_id: str, node_id: str) -> str:
        """Inline text of *node_id*, virtual synthesis nodes included."""
        records = self.get_merged_records(company_id)
        content_index = build_content_index(records)
        if node_id in content_index:
            return content_index[node_id]
        if any(record.id == node_id for record in records):
            raise ValidationError(f"Document has no inline content: {node_id}", field="document_id")
        raise DocumentNotFoundError(node_id)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_folder(self, company_id: str, data: FolderCreate) -> PortfolioDocument:
        if data.parent_id:
            self._require_folder(company_id, data.parent_id, data.name)

        folder = self.doc_repo.create(
            company_id,
            type=FOLDER,
            name=data.name,
            parent_id=data.parent_id,
            created_by=data.created_by,
        )
        self._commit()
        logger.info("Folder created", extra={"company_id": company_id, "document_id": folder.id})
        return folder

    def register_file(
        self, company_id: str, data: FileRegister, timestamp_ms: Optional[int] = None
    ) -> PortfolioDocument:
        """Record an uploaded file. The caller uploads the bytes to ``storage_path``."""
        if data.parent_id:
            self._require_folder(company_id, data.parent_id, data.file_name)

        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)

        document = self.doc_repo.create(
            company_id,
            type=FILE,
            name=data.file_name,
            parent_id=data.parent_id,
            storage_path=build_storage_path(company_id, data.file_name, timestamp_ms),
            mime_type=data.mime_type,
            file_size_bytes=data.file_size_bytes,
            original_file_name=data.file_name,
            report_file_id=data.report_file_id,
            created_by=data.created_by,
        )
        self._commit()
        logger.info(
            "File registered",
            extra={"company_id": company_id, "document_id": document.id, "storage_path": document.storage_path},
        )
        return document

    def create_text_document(self, company_id: str, data: TextDocumentCreate) -> PortfolioDocument:
        if data.parent_id:
            self._require_folder(company_id, data.parent_id, data.name)

        document = self.doc_repo.create(
            company_id,
            type=FILE,
            name=data.name,
            parent_id=data.parent_id,
            mime_type="text/plain",
            text_content=data.text_content,
            created_by=data.created_by,
        )
        self._commit()
        return document

    def rename(self, company_id: str, document_id: str, new_name: str) -> PortfolioDocument:
        document = self._require_document(company_id, document_id)
        result = self.doc_repo.update(document, name=new_name)
        self._commit()
        return result

    def move(self, company_id: str, document_id: str, new_parent_id: Optional[str]) -> PortfolioDocument:
        """Re-parent a document. ``None`` moves it to the root."""
        document = self._require_document(company_id, document_id)

        if new_parent_id:
            if new_parent_id == document_id:
                raise InvalidParentError(document_id, new_parent_id, "a document cannot contain itself")
            self._require_folder(company_id, new_parent_id, document_id)
            if document.type == FOLDER:
                subtree = collect_descendant_ids(self._all_records(company_id), document_id)
                if new_parent_id in subtree:
                    raise InvalidParentError(
                        document_id, new_parent_id, "cannot move a folder into its own descendant"
                    )

        result = self.doc_repo.update(document, parent_id=new_parent_id)
        self._commit()
        return result

    def delete(self, company_id: str, document_id: str) -> DeleteResult:
        """Delete a document and, for folders, everything below it."""
        records = self._all_records(company_id)
        ids = collect_descendant_ids(records, document_id)
        if not ids:
            raise DocumentNotFoundError(document_id)

        wanted = set(ids)
        storage_paths = [r.storage_path for r in records if r.id in wanted and r.storage_path]

        deleted = self.doc_repo.delete_many(company_id, ids)
        self._commit()
        logger.info(
            "Documents deleted",
            extra={"company_id": company_id, "document_id": document_id, "deleted": deleted},
        )
        return DeleteResult(deleted_ids=ids, storage_paths=storage_paths)

    def update_content(self, company_id: str, document_id: str, content: str) -> PortfolioDocument:
        """Replace inline text; a linked report gets the same text as its synthesis."""
        document = self._require_document(company_id, document_id)
        if document.type == FOLDER:
            raise ValidationError("Folders have no content", field="document_id")

        result = self.doc_repo.update(document, text_content=content)
        if document.source_report_id:
            report = self.report_repo.update_cleaned_content(
                company_id, document.source_report_id, content
            )
            if report is None:
                logger.warning(
                    "Linked report missing, content not synced",
                    extra={"document_id": document_id, "report_id": document.source_report_id},
                )
        self._commit()
        return result

    def promote_virtual(self, company_id: str, virtual_id: str) -> PortfolioDocument:
        """Persist a virtual node so it survives as a regular record.

        The new record keeps the back-reference, which stops the merger from
        producing the virtual node again.
        """
        node = None
        if is_virtual_id(virtual_id):
            node = next(
                (r for r in self.get_merged_records(company_id) if r.id == virtual_id and r.is_virtual),
                None,
            )
        if node is None:
            raise DocumentNotFoundError(virtual_id)

        fields = node.model_dump(exclude={"id", "company_id", "is_virtual", "created_at", "updated_at"})
        document = self.doc_repo.create(company_id, **fields)
        self._commit()
        logger.info(
            "Virtual node promoted",
            extra={"company_id": company_id, "virtual_id": virtual_id, "document_id": document.id},
        )
        return document

    def register_report(self, company_id: str, data: ReportCreate) -> CompanyReport:
        report = self.report_repo.create(company_id, data)
        self._commit()
        logger.info("Report registered", extra={"company_id": company_id, "report_id": report.id})
        return report

    def get_report(self, company_id: str, report_id: str) -> CompanyReport:
        report = self.report_repo.get_in_company(company_id, report_id)
        if report is None:
            raise ReportNotFoundError(report_id)
        return report

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Commit failed", extra={"error": str(e)})
            raise DatabaseError("Failed to save document changes", original_error=e) from e

    def _all_records(self, company_id: str) -> List[DocumentRecord]:
        """Every record of the company, ignoring the tree limit."""
        return [DocumentRecord.model_validate(row) for row in self.doc_repo.list_by_company(company_id)]

    def _require_document(self, company_id: str, document_id: str) -> PortfolioDocument:
        document = self.doc_repo.get_in_company(company_id, document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document

    def _require_folder(self, company_id: str, folder_id: str, child: str) -> PortfolioDocument:
        folder = self.doc_repo.get_in_company(company_id, folder_id)
        if folder is None:
            raise FolderNotFoundError(folder_id)
        if folder.type != FOLDER:
            raise InvalidParentError(child, folder_id, "parent is not a folder")
        return folder

    def _items_for_report(self, report: CompanyReport) -> List[SourceItem]:
        anchor = settings.reporting_folder_name
        items: List[SourceItem] = []
        if report.cleaned_content:
            items.append(SourceItem(
                id=report.id,
                kind=SYNTHESIS,
                label=report.report_period,
                content=report.cleaned_content,
                anchor_folder=anchor,
                created_at=report.created_at,
            ))
        for file in sorted(report.files, key=lambda f: (f.file_name, f.id)):
            items.append(SourceItem(
                id=file.id,
                kind=REPORT_FILE,
                label=report.report_period,
                anchor_folder=anchor,
                file_name=file.file_name,
                storage_path=file.storage_path,
                mime_type=file.mime_type,
                created_at=report.created_at,
            ))
        return items

