"""Generic async repository with soft-delete, pagination, and tenant isolation."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Generic CRUD repository. All queries are filtered by tenant_id.

    Soft-deletes: rows with `deleted_at IS NOT NULL` are excluded from all
    standard reads. Hard-delete is intentionally never exposed.

    Subclasses set `model` and may set `default_sort` / `default_order`,
    used when the caller does not ask for a sort column.
    """

    model: type[ModelT]
    default_sort: str = "created_at"
    default_order: str = "desc"

    def __init__(self, session: AsyncSession, tenant_id: str):
        self._session = session
        self._tenant_id = tenant_id

    @property
    def session(self) -> AsyncSession:
        return self._session

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _base_query(self, include_deleted: bool = False):
        """Return a SELECT filtered by tenant_id and excluding soft-deleted rows."""
        q = select(self.model).where(self.model.tenant_id == self._tenant_id)
        if not include_deleted and hasattr(self.model, "deleted_at"):
            q = q.where(self.model.deleted_at.is_(None))
        return q

    def _apply_sort(self, q, order_by: str | None, order: str | None):
        # Only real columns sort; properties and relationships get the default ordering
        if order_by and order_by in self.model.__table__.c:
            name, direction = order_by, order or self.default_order
        else:
            name, direction = self.default_sort, self.default_order
        col = getattr(self.model, name)
        return q.order_by(col.desc() if direction == "desc" else col.asc(), self.model.id)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def get_by_id(self, entity_id: str) -> ModelT | None:
        result = await self._session.execute(
            self._base_query().where(self.model.id == entity_id)
        )
        return result.scalars().first()

    async def first(self, *conditions: Any, include_deleted: bool = False) -> ModelT | None:
        result = await self._session.execute(
            self._base_query(include_deleted).where(*conditions).limit(1)
        )
        return result.scalars().first()

    async def exists(self, *conditions: Any, include_deleted: bool = False) -> bool:
        """True when a matching row exists.

        Uniqueness checks pass include_deleted=True: numbers and codes of
        soft-deleted rows stay reserved because the unique constraints
        still cover them.
        """
        return await self.first(*conditions, include_deleted=include_deleted) is not None

    async def count(self, *conditions: Any) -> int:
        q = self._base_query().where(*conditions)
        return (
            await self._session.execute(select(func.count()).select_from(q.subquery()))
        ).scalar_one()

    async def aggregate(self, expr: Any, *conditions: Any) -> Any:
        """A single aggregate (sum, max, ...) over the live rows that match."""
        q = select(expr).where(self.model.tenant_id == self._tenant_id).where(*conditions)
        if hasattr(self.model, "deleted_at"):
            q = q.where(self.model.deleted_at.is_(None))
        return (await self._session.execute(q)).scalar_one()

    async def find(self, *conditions: Any, order_by: Any = None) -> list[ModelT]:
        """All matching rows, unpaginated."""
        q = self._base_query().where(*conditions)
        if order_by is not None:
            q = q.order_by(*order_by) if isinstance(order_by, (list, tuple)) else q.order_by(order_by)
        return list((await self._session.execute(q)).scalars().all())

    async def list(
        self,
        *,
        offset: int = 0,
        limit: int = 20,
        order_by: str | None = None,
        order: str | None = None,
        filters: dict[str, Any] | None = None,
        conditions: list[Any] | None = None,
    ) -> tuple[list[ModelT], int]:
        """Return (items, total_count) with pagination, equality filters and extra conditions."""
        q = self._base_query()

        # Apply simple equality filters
        if filters:
            for col_name, value in filters.items():
                if value is not None and hasattr(self.model, col_name):
                    q = q.where(getattr(self.model, col_name) == value)
        if conditions:
            q = q.where(*conditions)

        # Count
        count_q = select(func.count()).select_from(q.subquery())
        total = (await self._session.execute(count_q)).scalar_one()

        # Order + paginate
        q = self._apply_sort(q, order_by, order).offset(offset).limit(limit)

        items = (await self._session.execute(q)).scalars().all()
        return list(items), total

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def changes(self, data: BaseModel, *, exclude: set[str] | None = None) -> dict[str, Any]:
        """The fields an update payload actually sets.

        A null sent for a NOT NULL column leaves the stored value alone.
        """
        columns = self.model.__table__.c
        return {
            field: value
            for field, value in data.model_dump(exclude_unset=True, exclude=exclude).items()
            if value is not None or field not in columns or columns[field].nullable
        }

    async def create(self, **kwargs: Any) -> ModelT:
        instance = self.model(tenant_id=self._tenant_id, **kwargs)
        return await self.add(instance)

    async def add(self, instance: ModelT) -> ModelT:
        """Persist a pre-built instance (with children), stamping the tenant."""
        instance.tenant_id = self._tenant_id
        self._session.add(instance)
        await self._session.flush()  # populate id
        await self._session.refresh(instance)
        return instance

    async def save(self, instance: ModelT) -> ModelT:
        """Flush attribute changes made on a loaded instance."""
        await self._session.flush()
        await self._session.refresh(instance)
        return instance

    async def update(self, entity_id: str, **kwargs: Any) -> ModelT | None:
        kwargs.pop("id", None)
        kwargs.pop("tenant_id", None)
        if "updated_at" not in kwargs and hasattr(self.model, "updated_at"):
            kwargs["updated_at"] = datetime.now(timezone.utc)

        await self._session.execute(
            update(self.model)
            .where(self.model.id == entity_id)
            .where(self.model.tenant_id == self._tenant_id)
            .values(**kwargs)
        )
        await self._session.flush()
        return await self.get_by_id(entity_id)

    async def soft_delete(self, entity_id: str) -> bool:
        result = await self._session.execute(
            update(self.model)
            .where(self.model.id == entity_id)
            .where(self.model.tenant_id == self._tenant_id)
            .where(self.model.deleted_at.is_(None))
            .values(deleted_at=datetime.now(timezone.utc))
        )
        await self._session.flush()
        return result.rowcount > 0
