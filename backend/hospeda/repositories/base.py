"""
Hospeda Backend — Generic Repository
=====================================

What:  Data-access object shared by every entity: find_by_id, find_one,
       find_all, count, create, update, soft_delete, restore, hard_delete.
Why:   Services never build SQL for the common operations, and the
       soft-delete predicate lives in exactly one place.
How:   Bound to an AsyncSession and an ORM class. Every read goes through
       `_where_clauses`, which adds `deleted_at IS NULL` unless the caller
       explicitly asks for tombstoned rows.
Who:   Instantiated by BaseCrudService (or injected as a mock in unit tests).

Query building:
    filters   equality per column; list/tuple/set values become IN (...);
              a Range value becomes inclusive >= / <= bounds
    q         case-insensitive LIKE across `search_columns`, OR-ed together
    scope     an extra SQL predicate from the permission layer, AND-ed in
"""

import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Generic, Iterator, List, Mapping, Optional, Sequence, Tuple, Type, TypeVar

from sqlalchemy import ColumnElement, asc, desc, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hospeda.database import Base
from hospeda.exceptions import DatabaseError
from hospeda.models.base import utcnow

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


@dataclass(frozen=True)
class Range:
    """Inclusive bounds for a filter value; either side may be open."""

    lower: Any = None
    upper: Any = None


@contextmanager
def database_errors(source: str, operation: str) -> Iterator[None]:
    """Re-raises SQLAlchemy failures as DatabaseError, keeping the cause chained."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Database error in %s.%s: %s", source, operation, str(exc))
        raise DatabaseError(
            context={
                "source": source,
                "operation": operation,
                "error_type": type(exc).__name__,
            }
        ) from exc


class BaseRepository(Generic[ModelT]):
    """Async CRUD access for one ORM model with uniform soft-delete handling."""

    model: Type[ModelT]
    # Columns matched by the free-text `q` parameter
    search_columns: Sequence[str] = ()
    default_sort = "created_at"

    def __init__(self, session: AsyncSession, model: Optional[Type[ModelT]] = None):
        self.session = session
        if model is not None:
            self.model = model
        if getattr(self, "model", None) is None:
            raise TypeError(f"{type(self).__name__} needs a model class")

    def _wrap_errors(self, operation: str):
        return database_errors(self.model.__name__, operation)

    # ── Query helpers ─────────────────────────────────────────────────────
    def column(self, name: str):
        """Returns the mapped column attribute or raises for unknown names."""
        if name not in self.model.__table__.columns:
            raise ValueError(f"{self.model.__name__} has no column '{name}'")
        return getattr(self.model, name)

    def _where_clauses(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        q: Optional[str] = None,
        scope: Optional[ColumnElement[bool]] = None,
        include_deleted: bool = False,
    ) -> List[ColumnElement[bool]]:
        clauses: List[ColumnElement[bool]] = []
        if not include_deleted:
            clauses.append(self.model.deleted_at.is_(None))
        for name, value in (filters or {}).items():
            if value is None:
                continue
            column = self.column(name)
            if isinstance(value, Range):
                if value.lower is not None:
                    clauses.append(column >= value.lower)
                if value.upper is not None:
                    clauses.append(column <= value.upper)
            elif isinstance(value, (list, tuple, set, frozenset)):
                clauses.append(column.in_(list(value)))
            else:
                clauses.append(column == value)
        if q and self.search_columns:
            pattern = f"%{q.strip()}%"
            clauses.append(or_(*(self.column(c).ilike(pattern) for c in self.search_columns)))
        if scope is not None:
            clauses.append(scope)
        return clauses

    # ── Reads ─────────────────────────────────────────────────────────────
    async def find_by_id(self, entity_id: uuid.UUID, include_deleted: bool = False) -> Optional[ModelT]:
        query = select(self.model).where(
            self.model.id == entity_id,
            *self._where_clauses(include_deleted=include_deleted),
        )
        with self._wrap_errors("find_by_id"):
            result = await self.session.execute(query)
            return result.scalar_one_or_none()

    async def find_one(self, filters: Mapping[str, Any], include_deleted: bool = False) -> Optional[ModelT]:
        query = (
            select(self.model)
            .where(*self._where_clauses(filters, include_deleted=include_deleted))
            .limit(1)
        )
        with self._wrap_errors("find_one"):
            result = await self.session.execute(query)
            return result.scalars().first()

    async def find_all(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        page: int = 1,
        page_size: int = 20,
        q: Optional[str] = None,
        scope: Optional[ColumnElement[bool]] = None,
        sort_by: Optional[str] = None,
        sort_order: str = "desc",
        include_deleted: bool = False,
    ) -> Tuple[List[ModelT], int]:
        """
        Returns one page of rows plus the total number of matching rows.

        Ordering falls back to `created_at` and always ends with `id` so that
        pages are stable when timestamps collide.
        """
        clauses = self._where_clauses(filters, q, scope, include_deleted)
        order_column = self.column(sort_by or self.default_sort)
        direction = asc if sort_order == "asc" else desc

        query = (
            select(self.model)
            .where(*clauses)
            .order_by(direction(order_column), direction(self.model.id))
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        count_query = select(func.count()).select_from(self.model).where(*clauses)

        with self._wrap_errors("find_all"):
            items = list((await self.session.execute(query)).scalars().all())
            total = (await self.session.execute(count_query)).scalar_one()
        return items, int(total)

    async def count(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        q: Optional[str] = None,
        scope: Optional[ColumnElement[bool]] = None,
        include_deleted: bool = False,
    ) -> int:
        query = (
            select(func.count())
            .select_from(self.model)
            .where(*self._where_clauses(filters, q, scope, include_deleted))
        )
        with self._wrap_errors("count"):
            return int((await self.session.execute(query)).scalar_one())

    # ── Writes ────────────────────────────────────────────────────────────
    async def create(self, values: Dict[str, Any]) -> ModelT:
        entity = self.model(**values)
        with self._wrap_errors("create"):
            self.session.add(entity)
            await self.session.flush()
            await self.session.refresh(entity)
        return entity

    async def update(self, entity: ModelT, values: Mapping[str, Any]) -> ModelT:
        """Applies a partial update; `updated_at` is always refreshed here."""
        for name, value in values.items():
            self.column(name)
            setattr(entity, name, value)
        entity.updated_at = utcnow()
        with self._wrap_errors("update"):
            await self.session.flush()
            await self.session.refresh(entity)
        return entity

    async def soft_delete(self, entity: ModelT, actor_id: Optional[uuid.UUID]) -> int:
        """Sets the tombstone. Returns 0 when the row was already deleted."""
        if entity.deleted_at is not None:
            return 0
        entity.deleted_at = utcnow()
        entity.deleted_by_id = actor_id
        with self._wrap_errors("soft_delete"):
            await self.session.flush()
        return 1

    async def restore(self, entity: ModelT) -> int:
        """Clears the tombstone and nothing else. Returns 0 for live rows."""
        if entity.deleted_at is None:
            return 0
        entity.deleted_at = None
        entity.deleted_by_id = None
        with self._wrap_errors("restore"):
            await self.session.flush()
        return 1

    async def hard_delete(self, entity: ModelT) -> int:
        with self._wrap_errors("hard_delete"):
            await self.session.delete(entity)
            await self.session.flush()
        return 1
