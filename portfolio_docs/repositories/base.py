"""Base repository with shared company-scoped get-by-ID patterns.

Subclasses specify model_class and, when it differs, id_column.
"""

from typing import TypeVar, Generic, Optional, Type
from sqlalchemy.orm import Session, Query

from ..database import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Shared repository logic for SQLAlchemy models owned by a company.

    Class variables to set in subclasses:
        model_class:     The SQLAlchemy model (e.g., PortfolioDocument)
        id_column:       Name of the primary-key column (default "id")
    """

    model_class: Type[ModelT]
    id_column: str = "id"

    def __init__(self, db: Session):
        self.db = db

    def _scoped(self, company_id: str) -> Query:
        """Base query restricted to one company's rows."""
        return self.db.query(self.model_class).filter(self.model_class.company_id == company_id)

    def get_in_company(self, company_id: str, entity_id: str) -> Optional[ModelT]:
        """Get entity by primary key within a company, or None if not found."""
        col = getattr(self.model_class, self.id_column)
        return self._scoped(company_id).filter(col == entity_id).first()
