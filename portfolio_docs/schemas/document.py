"""Document record, tree node and request schemas."""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional, List


FOLDER = "folder"
FILE = "file"
SYNTHESIS = "synthesis"
DOCUMENT_TYPES = (FOLDER, FILE, SYNTHESIS)


def _validate_display_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Name cannot be empty")
    if '/' in v:
        raise ValueError("Name cannot contain '/'")
    return v


class DocumentRecord(BaseModel):
    """A persisted (or virtual) entry of a company's document space."""
    id: str
    company_id: Optional[str] = None
    type: str  # 'folder', 'file' or 'synthesis'
    name: str
    parent_id: Optional[str] = None
    storage_path: Optional[str] = None
    mime_type: Optional[str] = None
    file_size_bytes: Optional[int] = None
    original_file_name: Optional[str] = None
    text_content: Optional[str] = None
    source_report_id: Optional[str] = None
    report_file_id: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    is_virtual: bool = False

    class Config:
        from_attributes = True

    @property
    def is_folder(self) -> bool:
        return self.type == FOLDER


class DocumentTreeNode(DocumentRecord):
    """A record plus its ordered children. Rebuilt on every read."""
    children: List['DocumentTreeNode'] = []


DocumentTreeNode.model_rebuild()


class SourceItem(BaseModel):
    """A report-derived item that may surface in the tree as a virtual node.

    kind='synthesis'   -- the AI synthesis of a report (id = report id)
    kind='report-file' -- an original report file (id = report file id)
    """
    id: str
    kind: str = SYNTHESIS
    label: Optional[str] = None  # report period, e.g. "Q1 2024"
    content: Optional[str] = None
    anchor_folder: str = "Reporting"
    file_name: Optional[str] = None
    storage_path: Optional[str] = None
    mime_type: Optional[str] = None
    created_at: Optional[datetime] = None


# --- Requests ---

class FolderCreate(BaseModel):
    """Create a folder."""
    name: str
    parent_id: Optional[str] = None
    created_by: Optional[str] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _validate_display_name(v)


class FileRegister(BaseModel):
    """Register an uploaded file. The bytes live in external storage."""
    file_name: str
    parent_id: Optional[str] = None
    mime_type: Optional[str] = None
    file_size_bytes: Optional[int] = Field(default=None, ge=0)
    report_file_id: Optional[str] = None
    created_by: Optional[str] = None

    @field_validator('file_name')
    @classmethod
    def validate_file_name(cls, v: str) -> str:
        return _validate_display_name(v)


class TextDocumentCreate(BaseModel):
    """Create a document holding inline text."""
    name: str
    text_content: str
    parent_id: Optional[str] = None
    created_by: Optional[str] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _validate_display_name(v)


class RenameRequest(BaseModel):
    name: str

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _validate_display_name(v)


class MoveRequest(BaseModel):
    """Move a document to a new parent folder."""
    parent_id: Optional[str] = None  # None = root level


class ContentUpdate(BaseModel):
    content: str


# --- Responses ---

class ContentResponse(BaseModel):
    id: str
    content: str


class DeleteResult(BaseModel):
    """Outcome of a (cascading) delete."""
    deleted_ids: List[str]
    storage_paths: List[str]  # blobs the caller should release
