"""Garment Lifecycle Controller.

Orchestrates garment create/read/update/delete, lifecycle transitions,
material and attribute assignment, and variation queries. Every
guarded mutation locks the garment row first and performs its check and
its write in that same transaction, so two concurrent requests for one
garment can never both pass a check that only one of them should.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from plm.core.errors import (
    CompositionIncompleteError,
    DeletionBlockedError,
    NotFoundError,
    ValidationError,
)
from plm.infra.logging import get_logger
from plm.models import Garment, LifecycleState
from plm.repositories import EntityStore
from plm.services.compatibility import AttributeCompatibilityEngine
from plm.services.composition import MaterialCompositionGuard

logger = get_logger(__name__)

# Field name -> maximum length for the free-text garment columns
_TEXT_LIMITS = {"name": 200, "category": 100, "change_note": 500}
_REQUIRED = ("name", "category")
UPDATABLE_FIELDS = frozenset({"name", "category", "lifecycle_state", "base_design_id", "change_note"})


@dataclass
class GarmentAggregate:
    """A garment with its composition, attributes and direct variations."""

    garment: Garment
    materials: list[dict] = field(default_factory=list)
    attributes: list[dict] = field(default_factory=list)
    variations: list[Garment] = field(default_factory=list)

    @property
    def material_total(self) -> Decimal:
        return sum((m["percentage"] for m in self.materials), Decimal("0.00"))


@dataclass(frozen=True)
class UpdateResult:
    """Outcome of a partial update.

    ``applied`` is False when the garment does not exist or when no
    fields were supplied; ``message`` says which.
    """

    applied: bool
    message: str | None = None


def _clean_text(name: str, value: Any, *, required: bool) -> str | None:
    if value is None:
        if required:
            raise ValidationError(f"Garment {name} is required", field=name)
        return None
    if not isinstance(value, str):
        raise ValidationError(f"Garment {name} must be a string", field=name)
    cleaned = value.strip()
    if required and not cleaned:
        raise ValidationError(f"Garment {name} cannot be empty", field=name)
    limit = _TEXT_LIMITS[name]
    if len(cleaned) > limit:
        raise ValidationError(f"Garment {name} cannot exceed {limit} characters", field=name)
    return cleaned or None


def parse_lifecycle_state(value: Any) -> LifecycleState:
    """Accept a ``LifecycleState`` or its string value."""
    if isinstance(value, LifecycleState):
        return value
    try:
        return LifecycleState(value)
    except ValueError:
        allowed = ", ".join(state.value for state in LifecycleState)
        raise ValidationError(
            f"Invalid lifecycle state '{value}'. Allowed: {allowed}",
            field="lifecycle_state",
        ) from None


def _clean_fields(values: Mapping[str, Any], *, partial: bool) -> dict[str, Any]:
    unknown = set(values) - UPDATABLE_FIELDS
    if unknown:
        raise ValidationError(
            "Unknown garment fields: " + ", ".join(sorted(unknown)),
            fields=sorted(unknown),
        )

    cleaned: dict[str, Any] = {}
    for name in ("name", "category", "change_note"):
        if name in values:
            cleaned[name] = _clean_text(name, values[name], required=name in _REQUIRED)
        elif not partial and name in _REQUIRED:
            raise ValidationError(f"Garment {name} is required", field=name)

    if "lifecycle_state" in values and values["lifecycle_state"] is not None:
        cleaned["lifecycle_state"] = parse_lifecycle_state(values["lifecycle_state"])
    elif "lifecycle_state" in values and partial:
        raise ValidationError("Lifecycle state cannot be null", field="lifecycle_state")

    if "base_design_id" in values:
        base = values["base_design_id"]
        if base is not None and (isinstance(base, bool) or not isinstance(base, int)):
            raise ValidationError("Base design id must be an integer", field="base_design_id")
        cleaned["base_design_id"] = base
    return cleaned


class GarmentLifecycleController:
    """Garment operations with their business rules.

    Example:
        store = EntityStore(db)
        controller = GarmentLifecycleController(store)
        garment_id = await controller.create(
            {"name": "Linen Shirt", "category": "Tops"}, attribute_ids=[1, 4]
        )
    """

    def __init__(
        self,
        store: EntityStore,
        compatibility: AttributeCompatibilityEngine | None = None,
        composition: MaterialCompositionGuard | None = None,
    ) -> None:
        self._store = store
        self.compatibility = compatibility or AttributeCompatibilityEngine(store)
        self.composition = composition or MaterialCompositionGuard(store)

    # =========================================================================
    # Create / read
    # =========================================================================

    async def create(
        self,
        values: Mapping[str, Any],
        attribute_ids: Iterable[int] | None = None,
    ) -> int:
        """Create a garment, optionally with an initial attribute set.

        The whole attribute set is validated against the incompatibility
        relation before the garment row is inserted, and the insert and
        the attribute assignments commit together or not at all.

        Raises:
            ValidationError: If a field is missing or malformed
            NotFoundError: If an attribute or the base design does not exist
            IncompatibleAttributesError: If the attribute set conflicts
            CompositionIncompleteError: If asked to start in APPROVED or later
        """
        fields = _clean_fields(values, partial=False)
        requested = list(dict.fromkeys(attribute_ids or ()))

        state = fields.get("lifecycle_state", LifecycleState.CONCEPT)
        if state.requires_full_composition:
            # A new garment has no materials yet
            raise CompositionIncompleteError(Decimal("0.00"), state)

        async def work(session: AsyncSession) -> int:
            if requested:
                found = await self._store.attributes.existing_ids(session, requested)
                missing = [attribute_id for attribute_id in requested if attribute_id not in found]
                if missing:
                    raise NotFoundError("Attribute", missing[0])
                await self.compatibility.ensure_compatible(session, requested)

            base_design_id = fields.get("base_design_id")
            if base_design_id is not None and not await self._store.garments.exists(session, base_design_id):
                raise NotFoundError("Garment", base_design_id)

            garment = await self._store.garments.add(session, Garment(**fields))
            for attribute_id in requested:
                await self._store.garment_attributes.attach(session, garment.id, attribute_id)
            return garment.id

        garment_id = await self._store.db.run(work)
        logger.info(
            "Garment created",
            garment_id=garment_id,
            category=fields["category"],
            attribute_count=len(requested),
        )
        return garment_id

    async def get_by_id(self, garment_id: int) -> GarmentAggregate | None:
        """Garment with materials, attributes and variations; None when absent."""

        async def work(session: AsyncSession) -> GarmentAggregate | None:
            garment = await self._store.garments.get(session, garment_id)
            if garment is None:
                return None
            return GarmentAggregate(
                garment=garment,
                materials=await self._store.composition.materials_for(session, garment_id),
                attributes=await self._store.garment_attributes.attributes_for(session, garment_id),
                variations=await self._store.garments.variations_of(session, garment_id),
            )

        return await self._store.db.run(work, read_only=True)

    async def list_all(self) -> list[Garment]:
        return await self._store.read(self._store.garments.list_all)

    async def list_variations(self, base_design_id: int) -> list[Garment]:
        """Garments whose base design is ``base_design_id`` (direct children only)."""
        return await self._store.read(self._store.garments.variations_of, base_design_id)

    async def materials(self, garment_id: int) -> list[dict]:
        return await self._store.read(self._store.composition.materials_for, garment_id)

    async def attributes(self, garment_id: int) -> list[dict]:
        return await self._store.read(self._store.garment_attributes.attributes_for, garment_id)

    # =========================================================================
    # Update / delete
    # =========================================================================

    async def update(self, garment_id: int, values: Mapping[str, Any]) -> UpdateResult:
        """Apply a partial update.

        Moving into APPROVED or MASS_PRODUCTION is checked against the
        material total under the garment's row lock, so no concurrent
        material change can slip between the check and the state write.

        Raises:
            ValidationError: If a field is malformed or the base design is self
            NotFoundError: If the new base design does not exist
            CompositionIncompleteError: If the target state needs 100% materials
        """
        fields = _clean_fields(values, partial=True)
        if not fields:
            return UpdateResult(applied=False, message="No fields to update")

        base_design_id = fields.get("base_design_id")
        if base_design_id is not None and base_design_id == garment_id:
            raise ValidationError("A garment cannot be its own base design", field="base_design_id")

        async def work(session: AsyncSession) -> UpdateResult:
            garment = await self._store.garments.get_for_update(session, garment_id)
            if garment is None:
                return UpdateResult(applied=False, message="Garment not found")

            if base_design_id is not None and not await self._store.garments.exists(session, base_design_id):
                raise NotFoundError("Garment", base_design_id)

            target = fields.get("lifecycle_state")
            if target is not None:
                await self.composition.require_complete(session, garment_id, target)

            previous = garment.lifecycle_state
            await self._store.garments.update(session, garment, fields)
            if target is not None and target is not previous:
                logger.info(
                    "Garment lifecycle changed",
                    garment_id=garment_id,
                    from_state=previous.value,
                    to_state=target.value,
                )
            return UpdateResult(applied=True)

        result = await self._store.db.run(work)
        if result.applied:
            logger.info("Garment updated", garment_id=garment_id, fields=sorted(fields))
        return result

    async def delete(self, garment_id: int) -> bool:
        """Delete a garment and its materials, attributes and supplier records.

        Returns:
            True if deleted, False if no such garment

        Raises:
            DeletionBlockedError: If the garment is in mass production
        """

        async def work(session: AsyncSession) -> bool:
            garment = await self._store.garments.get_for_update(session, garment_id)
            if garment is None:
                return False
            if garment.lifecycle_state is LifecycleState.MASS_PRODUCTION:
                raise DeletionBlockedError(
                    "Cannot delete garments in mass production",
                    garment_id=garment_id,
                    lifecycle_state=garment.lifecycle_state,
                )
            return await self._store.garments.delete(session, garment_id)

        deleted = await self._store.db.run(work)
        if deleted:
            logger.info("Garment deleted", garment_id=garment_id)
        return deleted

    # =========================================================================
    # Materials and attributes
    # =========================================================================

    async def add_material(
        self,
        garment_id: int,
        material_id: int,
        percentage: Decimal | int | float | str,
    ) -> list[dict]:
        """Add or replace a material share and return the garment's materials.

        Raises:
            ValidationError: If the percentage is outside (0, 100]
            NotFoundError: If the garment or material does not exist
            CompositionExceededError: If the total would pass 100
        """

        async def work(session: AsyncSession) -> list[dict]:
            await self.composition.add_or_replace(session, garment_id, material_id, percentage)
            return await self._store.composition.materials_for(session, garment_id)

        return await self._store.db.run(work)

    async def add_attribute(self, garment_id: int, attribute_id: int) -> list[dict]:
        """Assign one attribute and return the garment's attributes.

        The garment's current attributes plus the new one are checked as a
        single set under the row lock; assigning an attribute the garment
        already has is a no-op.

        Raises:
            NotFoundError: If the garment or attribute does not exist
            IncompatibleAttributesError: If it clashes with an existing attribute
        """

        async def work(session: AsyncSession) -> list[dict]:
            if await self._store.garments.get_for_update(session, garment_id) is None:
                raise NotFoundError("Garment", garment_id)
            if await self._store.attributes.get(session, attribute_id) is None:
                raise NotFoundError("Attribute", attribute_id)

            current = await self._store.garment_attributes.attribute_ids_for(session, garment_id)
            await self.compatibility.ensure_compatible(session, current | {attribute_id})
            if await self._store.garment_attributes.attach(session, garment_id, attribute_id):
                logger.info("Attribute assigned", garment_id=garment_id, attribute_id=attribute_id)
            return await self._store.garment_attributes.attributes_for(session, garment_id)

        return await self._store.db.run(work)
