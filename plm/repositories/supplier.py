"""Supplier records, garment links, offers and sample sets."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from plm.models import GarmentSupplier, SampleSet, Supplier, SupplierOffer
from plm.repositories.base import Repository


class SupplierRepository(Repository[Supplier]):
    def __init__(self) -> None:
        super().__init__(Supplier)

    async def list_all(self, session: AsyncSession) -> list[Supplier]:
        return await self.get_multi(session, Supplier.name)

    async def create(self, session: AsyncSession, name: str, contact_email: str | None) -> Supplier:
        return await self.add_unique(
            session,
            Supplier(name=name, contact_email=contact_email),
            f"Supplier with name '{name}' already exists",
        )

    async def remove(self, session: AsyncSession, supplier_id: int) -> bool:
        return await self.delete_unreferenced(
            session,
            supplier_id,
            referenced_by=[GarmentSupplier.supplier_id],
            message="Cannot delete supplier that is linked to garments",
        )


class GarmentSupplierRepository(Repository[GarmentSupplier]):
    def __init__(self) -> None:
        super().__init__(GarmentSupplier)

    async def link(self, session: AsyncSession, link: GarmentSupplier) -> GarmentSupplier:
        return await self.add_unique(
            session,
            link,
            f"Supplier {link.supplier_id} is already linked to garment {link.garment_id}",
        )

    async def for_garment(self, session: AsyncSession, garment_id: int) -> list[dict]:
        """Links of a garment joined with supplier details, newest first."""
        query = (
            select(
                GarmentSupplier.id,
                GarmentSupplier.status,
                GarmentSupplier.created_at,
                GarmentSupplier.updated_at,
                Supplier.id.label("supplier_id"),
                Supplier.name.label("supplier_name"),
                Supplier.contact_email,
            )
            .join(Supplier, GarmentSupplier.supplier_id == Supplier.id)
            .where(GarmentSupplier.garment_id == garment_id)
            .order_by(GarmentSupplier.created_at.desc(), GarmentSupplier.id.desc())
        )
        result = await session.execute(query)
        return [dict(row._mapping) for row in result]


class SupplierOfferRepository(Repository[SupplierOffer]):
    def __init__(self) -> None:
        super().__init__(SupplierOffer)

    async def for_link(self, session: AsyncSession, garment_supplier_id: int) -> list[SupplierOffer]:
        query = (
            select(SupplierOffer)
            .where(SupplierOffer.garment_supplier_id == garment_supplier_id)
            .order_by(SupplierOffer.created_at.desc(), SupplierOffer.id.desc())
        )
        result = await session.execute(query)
        return list(result.scalars().all())


class SampleSetRepository(Repository[SampleSet]):
    def __init__(self) -> None:
        super().__init__(SampleSet)

    async def for_link(self, session: AsyncSession, garment_supplier_id: int) -> list[SampleSet]:
        query = (
            select(SampleSet)
            .where(SampleSet.garment_supplier_id == garment_supplier_id)
            .order_by(SampleSet.id.desc())
        )
        result = await session.execute(query)
        return list(result.scalars().all())
