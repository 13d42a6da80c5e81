from contextlib import contextmanager
import logging
from typing import Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.core.errors import StorageFailure

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


@contextmanager
def storage_errors(db: Session, operation: str):
    try:
        yield
    except SQLAlchemyError as exc:
        logger.warning("Record store %s failed: %s", operation, exc)
        db.rollback()
        raise StorageFailure() from exc


class RecordStore:
    """
    Thin select/insert/update/delete facade over a SQLAlchemy session.

    Writes are flushed immediately so generated ids and constraint violations
    surface at the call site; nothing is committed unless ``commit=True`` or
    ``commit()`` is called, which lets a service group several writes into one
    transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    @property
    def dialect(self) -> str:
        bind = self.db.get_bind()
        return bind.dialect.name if bind is not None else ""

    def query(self, model: type[ModelT], **filters: Any):
        query = self.db.query(model)
        for field, value in filters.items():
            query = query.filter(getattr(model, field) == value)
        return query

    def find(self, model: type[ModelT], *, order_by=None, **filters: Any) -> list[ModelT]:
        with storage_errors(self.db, f"find {model.__tablename__}"):
            query = self.query(model, **filters)
            if order_by is not None:
                query = query.order_by(order_by)
            return query.all()

    def find_one(self, model: type[ModelT], **filters: Any) -> ModelT | None:
        with storage_errors(self.db, f"find_one {model.__tablename__}"):
            return self.query(model, **filters).first()

    def insert(self, record: ModelT, *, commit: bool = False) -> ModelT:
        with storage_errors(self.db, f"insert {record.__tablename__}"):
            self.db.add(record)
            self.db.flush()
            if commit:
                self.db.commit()
                self.db.refresh(record)
        return record

    def update(self, record: ModelT, patch: dict[str, Any], *, commit: bool = False) -> ModelT:
        with storage_errors(self.db, f"update {record.__tablename__}"):
            for field, value in patch.items():
                setattr(record, field, value)
            self.db.flush()
            if commit:
                self.db.commit()
                self.db.refresh(record)
        return record

    def update_where(self, model: type[ModelT], conditions: list, patch: dict[str, Any]) -> int:
        # Conditional UPDATE; callers use the rowcount as a compare-and-swap result.
        with storage_errors(self.db, f"update_where {model.__tablename__}"):
            rowcount = (
                self.db.query(model)
                .filter(*conditions)
                .update(patch, synchronize_session="fetch")
            )
            self.db.flush()
        return rowcount

    def delete(self, model: type[ModelT], *, commit: bool = False, **filters: Any) -> int:
        with storage_errors(self.db, f"delete {model.__tablename__}"):
            deleted = self.query(model, **filters).delete(synchronize_session="fetch")
            if commit:
                self.db.commit()
        return deleted

    def execute(self, statement, params: dict | None = None):
        with storage_errors(self.db, "execute"):
            return self.db.execute(statement, params or {})

    def commit(self) -> None:
        with storage_errors(self.db, "commit"):
            self.db.commit()

    def refresh(self, record: ModelT) -> ModelT:
        with storage_errors(self.db, f"refresh {record.__tablename__}"):
            self.db.refresh(record)
        return record

    def rollback(self) -> None:
        self.db.rollback()
