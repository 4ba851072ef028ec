"""Base repository pattern for database operations."""

from __future__ import annotations

from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """Base repository providing common CRUD operations.

    Write methods commit by default. Pass ``commit=False`` to only flush, so
    several writes can be committed together by the caller.
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    async def get(self, id: Any) -> Optional[ModelType]:
        """Get a record by primary key."""
        return await self.session.get(self.model, id)

    async def get_multi(self, *, skip: int = 0, limit: int = 100) -> List[ModelType]:
        """Get multiple records with pagination."""
        statement = select(self.model).offset(skip).limit(limit)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def create(self, obj_in: ModelType, *, commit: bool = True) -> ModelType:
        """Create a new record."""
        self.session.add(obj_in)
        await self._persist(obj_in, commit)
        return obj_in

    async def update(
        self, *, db_obj: ModelType, obj_in: dict[str, Any], commit: bool = True
    ) -> ModelType:
        """Update an existing record from a dictionary of fields."""
        for field, value in obj_in.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        self.session.add(db_obj)
        await self._persist(db_obj, commit)
        return db_obj

    async def delete(self, *, id: Any, commit: bool = True) -> bool:
        """Delete a record by primary key.

        Returns:
            True if deleted, False if not found
        """
        obj = await self.get(id)
        if obj is None:
            return False
        await self.session.delete(obj)
        if commit:
            await self.session.commit()
        else:
            await self.session.flush()
        return True

    async def _persist(self, obj: ModelType, commit: bool) -> None:
        if commit:
            await self.session.commit()
            await self.session.refresh(obj)
        else:
            await self.session.flush()
