"""Attribute Compatibility Engine.

Maintains the symmetric incompatibility relation between attributes and
validates candidate attribute sets against it.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from plm.core.errors import IncompatibleAttributesError, NotFoundError, SelfIncompatibilityError
from plm.infra.logging import get_logger
from plm.repositories import EntityStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class CompatibilityResult:
    """Outcome of checking an attribute set.

    Attributes:
        valid: True when no stored incompatible pair lies inside the set
        conflicts: (name, name) pairs that clash, smaller attribute id first
    """

    valid: bool
    conflicts: tuple[tuple[str, str], ...] = ()


class AttributeCompatibilityEngine:
    def __init__(self, store: EntityStore) -> None:
        self._store = store

    async def record_incompatibility(self, attribute_id_a: int, attribute_id_b: int) -> bool:
        """Declare two attributes incompatible.

        Order does not matter and re-recording a known pair is a no-op.

        Returns:
            True if the pair was new, False if it was already recorded

        Raises:
            SelfIncompatibilityError: If both ids are the same
            NotFoundError: If either attribute does not exist
        """
        if attribute_id_a == attribute_id_b:
            raise SelfIncompatibilityError(attribute_id_a)

        async def work(session: AsyncSession) -> bool:
            found = await self._store.attributes.existing_ids(session, {attribute_id_a, attribute_id_b})
            for attribute_id in (attribute_id_a, attribute_id_b):
                if attribute_id not in found:
                    raise NotFoundError("Attribute", attribute_id)
            return await self._store.incompatibilities.add(session, attribute_id_a, attribute_id_b)

        created = await self._store.db.run(work)
        logger.info(
            "Attribute incompatibility recorded",
            attribute_id_a=attribute_id_a,
            attribute_id_b=attribute_id_b,
            created=created,
        )
        return created

    async def check_set(self, attribute_ids: Iterable[int]) -> CompatibilityResult:
        """Check a candidate set in its own read transaction."""
        candidate = set(attribute_ids)
        if len(candidate) < 2:
            return CompatibilityResult(valid=True)

        async def work(session: AsyncSession) -> CompatibilityResult:
            return await self.check_set_in(session, candidate)

        return await self._store.db.run(work, read_only=True)

    async def check_set_in(self, session: AsyncSession, attribute_ids: Iterable[int]) -> CompatibilityResult:
        """Check a candidate set inside the caller's transaction.

        Sets with fewer than two members can never conflict. Otherwise
        every stored pair with both endpoints in the set is a conflict,
        whichever member was added last.
        """
        candidate = set(attribute_ids)
        if len(candidate) < 2:
            return CompatibilityResult(valid=True)

        conflicts = await self._store.incompatibilities.pairs_within(session, candidate)
        if conflicts:
            return CompatibilityResult(valid=False, conflicts=tuple(conflicts))
        return CompatibilityResult(valid=True)

    async def ensure_compatible(self, session: AsyncSession, attribute_ids: Iterable[int]) -> None:
        """Raise if the set contains an incompatible pair.

        Raises:
            IncompatibleAttributesError: With the conflicting name pairs
        """
        result = await self.check_set_in(session, attribute_ids)
        if not result.valid:
            logger.warning("Incompatible attribute set rejected", conflicts=list(result.conflicts))
            raise IncompatibleAttributesError(list(result.conflicts))
