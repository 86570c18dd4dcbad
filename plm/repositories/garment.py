"""Garment rows and the variation (base design) relation."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from plm.models import Garment
from plm.repositories.base import Repository


class GarmentRepository(Repository[Garment]):
    def __init__(self) -> None:
        super().__init__(Garment)

    async def list_all(self, session: AsyncSession) -> list[Garment]:
        """Newest first."""
        return await self.get_multi(session, Garment.created_at.desc(), Garment.id.desc())

    async def get_for_update(self, session: AsyncSession, garment_id: int) -> Garment | None:
        """Fetch and row-lock a garment for the rest of the transaction.

        Every guarded mutation of a garment's materials, attributes or
        lifecycle state takes this lock first, which serializes them per
        garment.
        """
        query = (
            select(Garment)
            .where(Garment.id == garment_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await session.execute(query)
        return result.scalar_one_or_none()

    async def variations_of(self, session: AsyncSession, base_design_id: int) -> list[Garment]:
        query = (
            select(Garment)
            .where(Garment.base_design_id == base_design_id)
            .order_by(Garment.id)
        )
        result = await session.execute(query)
        return list(result.scalars().all())
