"""
Base repository with owner-scoped CRUD operations.

Every lookup folds the owning user's id into its WHERE clause; a record owned
by someone else is indistinguishable from a missing one. Repositories never
commit: they flush, and the calling service decides when the unit of work ends
(see `core.transaction.atomic`).
"""
import uuid
from typing import TypeVar, Generic, Type, Optional, List, Any, Iterable
from datetime import datetime

from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy import func

ModelType = TypeVar("ModelType", bound=SQLModel)

# Columns an update payload may never overwrite
PROTECTED_FIELDS = ("id", "user_id", "created_at")


class BaseRepository(Generic[ModelType]):
    """
    Generic repository for models carrying a `user_id` owner column.
    Subclasses pass their table model to __init__.
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    def _owned(self, query, user_id: uuid.UUID, filters: Optional[dict] = None):
        """Restrict a query to one owner plus optional equality filters (None values skipped)."""
        query = query.where(self.model.user_id == user_id)
        for field, value in (filters or {}).items():
            if value is not None and hasattr(self.model, field):
                query = query.where(getattr(self.model, field) == value)
        return query

    async def create(self, obj_in: dict) -> ModelType:
        """Stage a new record and flush it so defaults and ids are populated."""
        record = self.model(**obj_in)
        self.session.add(record)
        await self.session.flush()
        await self.session.refresh(record)
        return record

    async def get(self, id: uuid.UUID, user_id: uuid.UUID) -> Optional[ModelType]:
        query = self._owned(select(self.model), user_id).where(self.model.id == id)
        return (await self.session.exec(query)).first()

    async def get_many(self, ids: Iterable[uuid.UUID], user_id: uuid.UUID) -> List[ModelType]:
        """Records among `ids` that belong to user_id; unknown ids are simply absent."""
        ids = list(ids)
        if not ids:
            return []
        query = self._owned(select(self.model), user_id).where(self.model.id.in_(ids))
        return (await self.session.exec(query)).all()

    async def get_by_field(self, user_id: uuid.UUID, field: str, value: Any) -> Optional[ModelType]:
        query = self._owned(select(self.model), user_id, {field: value})
        return (await self.session.exec(query)).first()

    async def list(
        self,
        user_id: uuid.UUID,
        filters: Optional[dict] = None,
        order_by: str = "created_at",
        order_desc: bool = True
    ) -> List[ModelType]:
        """The owner's records, newest first by default."""
        query = self._owned(select(self.model), user_id, filters)
        column = getattr(self.model, order_by, None)
        if column is not None:
            query = query.order_by(column.desc() if order_desc else column.asc())
        return (await self.session.exec(query)).all()

    async def update(self, db_obj: ModelType, obj_in: dict) -> ModelType:
        """Apply a partial update; fields absent from obj_in keep their values."""
        changes = {
            field: value for field, value in obj_in.items()
            if field not in PROTECTED_FIELDS and hasattr(db_obj, field)
        }
        for field, value in changes.items():
            setattr(db_obj, field, value)
        if hasattr(db_obj, "updated_at"):
            db_obj.updated_at = datetime.utcnow()

        self.session.add(db_obj)
        await self.session.flush()
        await self.session.refresh(db_obj)
        return db_obj

    async def delete(self, db_obj: ModelType) -> None:
        """Hard delete; dependent rows go through ON DELETE CASCADE."""
        await self.session.delete(db_obj)
        await self.session.flush()

    async def count(self, user_id: uuid.UUID, filters: Optional[dict] = None) -> int:
        query = self._owned(select(func.count()).select_from(self.model), user_id, filters)
        return (await self.session.exec(query)).one()
