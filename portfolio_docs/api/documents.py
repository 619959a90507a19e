"""Document API: tree, content lookup, and folder/file mutations.

Single router for a company's document space. Delegates to DocumentService
(deep module); routes only translate HTTP to service calls.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.document import (
    DocumentRecord,
    DocumentTreeNode,
    FolderCreate,
    FileRegister,
    TextDocumentCreate,
    RenameRequest,
    MoveRequest,
    ContentUpdate,
    ContentResponse,
    DeleteResult,
)
from ..services.document_service import DocumentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/companies/{company_id}/documents", tags=["documents"])


# -- Reads ----------------------------------------------------------------

@router.get("/tree", response_model=List[DocumentTreeNode])
def get_tree(company_id: str, db: Session = Depends(get_db)):
    """Sorted document tree, including virtual report nodes."""
    return DocumentService(db).get_tree(company_id)


@router.get("/{document_id}/content", response_model=ContentResponse)
def get_content(company_id: str, document_id: str, db: Session = Depends(get_db)):
    content = DocumentService(db).get_content(company_id, document_id)
    return ContentResponse(id=document_id, content=content)


# -- Creation -------------------------------------------------------------

@router.post("/folders", response_model=DocumentRecord, status_code=201)
def create_folder(company_id: str, data: FolderCreate, db: Session = Depends(get_db)):
    return DocumentService(db).create_folder(company_id, data)


@router.post("/files", response_model=DocumentRecord, status_code=201)
def register_file(company_id: str, data: FileRegister, db: Session = Depends(get_db)):
    """Register an uploaded file. Response carries the storage path to upload to."""
    return DocumentService(db).register_file(company_id, data)


@router.post("/text", response_model=DocumentRecord, status_code=201)
def create_text_document(company_id: str, data: TextDocumentCreate, db: Session = Depends(get_db)):
    return DocumentService(db).create_text_document(company_id, data)


@router.post("/virtual/{virtual_id}/promote", response_model=DocumentRecord, status_code=201)
def promote_virtual(company_id: str, virtual_id: str, db: Session = Depends(get_db)):
    return DocumentService(db).promote_virtual(company_id, virtual_id)


# -- Mutations ------------------------------------------------------------

@router.patch("/{document_id}/name", response_model=DocumentRecord)
def rename_document(
    company_id: str, document_id: str, data: RenameRequest, db: Session = Depends(get_db)
):
    return DocumentService(db).rename(company_id, document_id, data.name)


@router.put("/{document_id}/parent", response_model=DocumentRecord)
def move_document(
    company_id: str, document_id: str, data: MoveRequest, db: Session = Depends(get_db)
):
    return DocumentService(db).move(company_id, document_id, data.parent_id)


@router.put("/{document_id}/content", response_model=DocumentRecord)
def update_content(
    company_id: str, document_id: str, data: ContentUpdate, db: Session = Depends(get_db)
):
    return DocumentService(db).update_content(company_id, document_id, data.content)


@router.delete("/{document_id}", response_model=DeleteResult)
def delete_document(company_id: str, document_id: str, db: Session = Depends(get_db)):
    """Delete a document; folders cascade to all descendants."""
    return DocumentService(db).delete(company_id, document_id)
