"""Attribute catalog, incompatibility relation and garment assignments."""

from collections.abc import Collection

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from plm.models import Attribute, AttributeIncompatibility, GarmentAttribute
from plm.repositories.base import Repository


def canonical_pair(a: int, b: int) -> tuple[int, int]:
    """Order an unordered pair with the smaller id first."""
    return (a, b) if a < b else (b, a)


class AttributeRepository(Repository[Attribute]):
    def __init__(self) -> None:
        super().__init__(Attribute)

    async def list_all(self, session: AsyncSession) -> list[Attribute]:
        return await self.get_multi(session, Attribute.name)

    async def existing_ids(self, session: AsyncSession, ids: Collection[int]) -> set[int]:
        """Return the subset of ``ids`` that exist."""
        if not ids:
            return set()
        result = await session.execute(select(Attribute.id).where(Attribute.id.in_(ids)))
        return set(result.scalars().all())

    async def create(self, session: AsyncSession, name: str) -> Attribute:
        return await self.add_unique(
            session,
            Attribute(name=name),
            f"Attribute with name '{name}' already exists",
        )

    async def remove(self, session: AsyncSession, attribute_id: int) -> bool:
        return await self.delete_unreferenced(
            session,
            attribute_id,
            referenced_by=[GarmentAttribute.attribute_id],
            message="Cannot delete attribute that is assigned to garments",
        )


class IncompatibilityRepository:
    """Storage of the symmetric ``attribute_incompatibilities`` relation."""

    async def add(self, session: AsyncSession, a: int, b: int) -> bool:
        """Store the pair canonically; False when it was already there."""
        low, high = canonical_pair(a, b)
        if await session.get(AttributeIncompatibility, (low, high)) is not None:
            return False
        try:
            async with session.begin_nested():
                session.add(AttributeIncompatibility(attribute_id_a=low, attribute_id_b=high))
                await session.flush()
        except IntegrityError:
            # Recorded by a concurrent transaction after our lookup
            return False
        return True

    async def pairs_within(self, session: AsyncSession, ids: Collection[int]) -> list[tuple[str, str]]:
        """Names of every stored pair whose two endpoints are both in ``ids``."""
        if len(ids) < 2:
            return []
        first = aliased(Attribute)
        second = aliased(Attribute)
        query = (
            select(first.name, second.name)
            .select_from(AttributeIncompatibility)
            .join(first, AttributeIncompatibility.attribute_id_a == first.id)
            .join(second, AttributeIncompatibility.attribute_id_b == second.id)
            .where(
                AttributeIncompatibility.attribute_id_a.in_(ids),
                AttributeIncompatibility.attribute_id_b.in_(ids),
            )
            .order_by(AttributeIncompatibility.attribute_id_a, AttributeIncompatibility.attribute_id_b)
        )
        result = await session.execute(query)
        return [(row[0], row[1]) for row in result]


class GarmentAttributeRepository:
    """Rows of ``garment_attributes``."""

    async def attribute_ids_for(self, session: AsyncSession, garment_id: int) -> set[int]:
        result = await session.execute(
            select(GarmentAttribute.attribute_id).where(GarmentAttribute.garment_id == garment_id)
        )
        return set(result.scalars().all())

    async def attach(self, session: AsyncSession, garment_id: int, attribute_id: int) -> bool:
        """Assign an attribute; a repeated assignment is a no-op returning False."""
        if await session.get(GarmentAttribute, (garment_id, attribute_id)) is not None:
            return False
        session.add(GarmentAttribute(garment_id=garment_id, attribute_id=attribute_id))
        await session.flush()
        return True

    async def attributes_for(self, session: AsyncSession, garment_id: int) -> list[dict]:
        query = (
            select(Attribute.id, Attribute.name)
            .join(GarmentAttribute, GarmentAttribute.attribute_id == Attribute.id)
            .where(GarmentAttribute.garment_id == garment_id)
            .order_by(Attribute.name)
        )
        result = await session.execute(query)
        return [{"id": row.id, "name": row.name} for row in result]
