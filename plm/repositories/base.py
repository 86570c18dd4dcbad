"""Generic async repository used by every entity in the store.

Repositories never open or commit transactions themselves: each method
takes the caller's ``AsyncSession``, so the same call works as a single
auto-committed step (see ``EntityStore.call``) or as one step of a larger
atomic unit of work.
"""

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import delete, exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from plm.core.errors import AlreadyExistsError, InUseError
from plm.infra.logging import get_logger
from plm.models.base import Base

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class Repository(Generic[ModelType]):
    """Basic create/read/update/delete for one model."""

    def __init__(self, model: type[ModelType]) -> None:
        self.model = model

    async def get(self, session: AsyncSession, id: Any) -> ModelType | None:
        """Fetch by primary key; ``None`` when absent."""
        return await session.get(self.model, id)

    async def get_multi(self, session: AsyncSession, *order_by: Any) -> list[ModelType]:
        query = select(self.model)
        if order_by:
            query = query.order_by(*order_by)
        result = await session.execute(query)
        return list(result.scalars().all())

    async def exists(self, session: AsyncSession, id: Any) -> bool:
        query = select(exists().where(self.model.id == id))
        return bool(await session.scalar(query))

    async def add(self, session: AsyncSession, obj: ModelType) -> ModelType:
        session.add(obj)
        await session.flush()
        await session.refresh(obj)
        return obj

    async def add_unique(self, session: AsyncSession, obj: ModelType, message: str) -> ModelType:
        """Insert a row guarded by a unique constraint.

        The insert runs in a savepoint so a duplicate leaves the caller's
        transaction usable.

        Raises:
            AlreadyExistsError: If the unique constraint rejects the row
        """
        try:
            async with session.begin_nested():
                session.add(obj)
                await session.flush()
        except IntegrityError:
            logger.info("Duplicate rejected", table=self.model.__tablename__, message=message)
            raise AlreadyExistsError(message) from None
        await session.refresh(obj)
        return obj

    async def update(
        self, session: AsyncSession, obj: ModelType, values: dict[str, Any]
    ) -> ModelType:
        """Apply only the supplied fields."""
        for field, value in values.items():
            setattr(obj, field, value)
        await session.flush()
        await session.refresh(obj)
        return obj

    async def delete(self, session: AsyncSession, id: Any) -> bool:
        """Delete by primary key; False when nothing matched."""
        result = await session.execute(delete(self.model).where(self.model.id == id))
        return result.rowcount > 0

    async def delete_unreferenced(
        self,
        session: AsyncSession,
        id: Any,
        *,
        referenced_by: Sequence[Any],
        message: str,
    ) -> bool:
        """Delete a row that other tables may still point at.

        ``referenced_by`` lists foreign-key columns that block the delete.
        The explicit check gives a readable error; the savepoint catches
        a reference inserted concurrently after the check.

        Raises:
            InUseError: If any referencing row exists
        """
        for column in referenced_by:
            if await session.scalar(select(exists().where(column == id))):
                raise InUseError(message, id=id)
        try:
            async with session.begin_nested():
                return await self.delete(session, id)
        except IntegrityError:
            raise InUseError(message, id=id) from None
