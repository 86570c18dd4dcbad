"""Material catalog and garment composition storage."""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from plm.models import GarmentMaterial, Material
from plm.repositories.base import Repository


class MaterialRepository(Repository[Material]):
    def __init__(self) -> None:
        super().__init__(Material)

    async def list_all(self, session: AsyncSession) -> list[Material]:
        return await self.get_multi(session, Material.name)

    async def create(self, session: AsyncSession, name: str) -> Material:
        return await self.add_unique(
            session,
            Material(name=name),
            f"Material with name '{name}' already exists",
        )

    async def remove(self, session: AsyncSession, material_id: int) -> bool:
        return await self.delete_unreferenced(
            session,
            material_id,
            referenced_by=[GarmentMaterial.material_id],
            message="Cannot delete material that is used by garments",
        )


class CompositionRepository:
    """Rows of ``garment_materials``: which share of a garment each material is."""

    async def total_for(
        self,
        session: AsyncSession,
        garment_id: int,
        *,
        excluding_material_id: int | None = None,
    ) -> Decimal:
        """Sum of percentages for a garment, optionally leaving one material out."""
        query = select(func.coalesce(func.sum(GarmentMaterial.percentage), 0)).where(
            GarmentMaterial.garment_id == garment_id
        )
        if excluding_material_id is not None:
            query = query.where(GarmentMaterial.material_id != excluding_material_id)
        total = await session.scalar(query)
        return Decimal(total).quantize(Decimal("0.01"))

    async def upsert(
        self,
        session: AsyncSession,
        garment_id: int,
        material_id: int,
        percentage: Decimal,
    ) -> GarmentMaterial:
        """Insert the share, or replace the percentage of an existing one.

        Callers hold the garment row lock, so no other transaction can
        insert the same pair between the lookup and the write.
        """
        row = await session.get(GarmentMaterial, (garment_id, material_id))
        if row is None:
            row = GarmentMaterial(
                garment_id=garment_id,
                material_id=material_id,
                percentage=percentage,
            )
            session.add(row)
        else:
            row.percentage = percentage
        await session.flush()
        return row

    async def materials_for(self, session: AsyncSession, garment_id: int) -> list[dict]:
        """Materials of a garment with their share, by material name."""
        query = (
            select(Material.id, Material.name, GarmentMaterial.percentage)
            .join(GarmentMaterial, GarmentMaterial.material_id == Material.id)
            .where(GarmentMaterial.garment_id == garment_id)
            .order_by(Material.name)
        )
        result = await session.execute(query)
        return [
            {"id": row.id, "name": row.name, "percentage": Decimal(row.percentage)}
            for row in result
        ]
