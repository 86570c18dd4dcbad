"""Material Composition Guard.

A garment's material percentages never sum above 100, and must sum to
exactly 100 before the garment may enter APPROVED or MASS_PRODUCTION.
"""

from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from plm.core.errors import CompositionExceededError, CompositionIncompleteError, NotFoundError
from plm.core.values import HUNDRED, Percentage
from plm.infra.logging import get_logger
from plm.models import LifecycleState
from plm.repositories import EntityStore

logger = get_logger(__name__)


class MaterialCompositionGuard:
    def __init__(self, store: EntityStore) -> None:
        self._store = store

    async def add_or_replace(
        self,
        session: AsyncSession,
        garment_id: int,
        material_id: int,
        percentage: Decimal | int | float | str,
    ) -> Decimal:
        """Set a material's share of a garment inside the caller's transaction.

        Locks the garment row, sums the other materials' shares (the
        material being replaced is left out so it is not counted twice)
        and writes only if the new total stays within 100.

        Returns:
            The garment's new total

        Raises:
            ValidationError: If the percentage is outside (0, 100]
            NotFoundError: If the garment or material does not exist
            CompositionExceededError: If the total would pass 100
        """
        share = Percentage.parse(percentage)

        if await self._store.garments.get_for_update(session, garment_id) is None:
            raise NotFoundError("Garment", garment_id)
        if await self._store.materials.get(session, material_id) is None:
            raise NotFoundError("Material", material_id)

        others = await self._store.composition.total_for(
            session, garment_id, excluding_material_id=material_id
        )
        if others + share > HUNDRED:
            logger.warning(
                "Material composition would exceed 100%",
                garment_id=garment_id,
                material_id=material_id,
                current_total=str(others),
                requested=str(share),
            )
            raise CompositionExceededError(others, share)

        await self._store.composition.upsert(session, garment_id, material_id, share)
        total = others + share
        logger.info(
            "Material share set",
            garment_id=garment_id,
            material_id=material_id,
            percentage=str(share),
            total=str(total),
        )
        return total

    async def total_for(self, session: AsyncSession, garment_id: int) -> Decimal:
        """Sum of all material percentages; 0 for a garment without materials."""
        return await self._store.composition.total_for(session, garment_id)

    async def total(self, garment_id: int) -> Decimal:
        """``total_for`` in its own transaction."""
        return await self._store.read(self._store.composition.total_for, garment_id)

    async def require_complete(
        self, session: AsyncSession, garment_id: int, target_state: LifecycleState
    ) -> None:
        """Gate for entering a state that needs a full composition.

        Raises:
            CompositionIncompleteError: Naming the current total
        """
        if not target_state.requires_full_composition:
            return
        current = await self.total_for(session, garment_id)
        if current != HUNDRED:
            logger.warning(
                "Lifecycle transition blocked by composition",
                garment_id=garment_id,
                target_state=target_state.value,
                current_total=str(current),
            )
            raise CompositionIncompleteError(current, target_state)
