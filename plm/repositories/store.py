"""Entity Store facade: every repository plus the database handle."""

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from plm.infra.database import Database
from plm.repositories.attribute import (
    AttributeRepository,
    GarmentAttributeRepository,
    IncompatibilityRepository,
)
from plm.repositories.garment import GarmentRepository
from plm.repositories.material import CompositionRepository, MaterialRepository
from plm.repositories.supplier import (
    GarmentSupplierRepository,
    SampleSetRepository,
    SupplierOfferRepository,
    SupplierRepository,
)

T = TypeVar("T")


class EntityStore:
    """Persistent rows for garments, catalog entries and supplier workflow.

    Holds no business rules. Repository methods take a session; use
    ``call`` to run one of them as its own auto-committed transaction, ``read``
    for a lookup that writes nothing, or
    ``db.run`` to group several into one atomic unit.
    """

    def __init__(self, db: Database) -> None:
        self.db = db
        self.garments = GarmentRepository()
        self.materials = MaterialRepository()
        self.composition = CompositionRepository()
        self.attributes = AttributeRepository()
        self.incompatibilities = IncompatibilityRepository()
        self.garment_attributes = GarmentAttributeRepository()
        self.suppliers = SupplierRepository()
        self.garment_suppliers = GarmentSupplierRepository()
        self.offers = SupplierOfferRepository()
        self.samples = SampleSetRepository()

    async def call(
        self,
        method: Callable[..., Awaitable[T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """Run a single repository method in its own transaction.

        Example:
            material = await store.call(store.materials.create, "Cotton")
        """

        async def work(session: AsyncSession) -> T:
            return await method(session, *args, **kwargs)

        return await self.db.run(work)

    async def read(
        self,
        method: Callable[..., Awaitable[T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """Like ``call`` but in a read-only transaction that takes no write lock."""

        async def work(session: AsyncSession) -> T:
            return await method(session, *args, **kwargs)

        return await self.db.run(work, read_only=True)
