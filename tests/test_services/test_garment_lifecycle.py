"""Tests for the garment lifecycle controller."""

import asyncio
from decimal import Decimal

import pytest

from plm.core.errors import (
    CompositionIncompleteError,
    DeletionBlockedError,
    IncompatibleAttributesError,
    NotFoundError,
    ValidationError,
)
from plm.models import LifecycleState
from plm.services import (
    AttributeCatalog,
    AttributeCompatibilityEngine,
    GarmentLifecycleController,
    MaterialCatalog,
)

SHIRT = {"name": "Oxford Shirt", "category": "Tops"}


async def _complete_composition(garments, materials, garment_id: int) -> None:
    cotton = await materials.create("Cotton")
    polyester = await materials.create("Polyester")
    await garments.add_material(garment_id, cotton.id, 60)
    await garments.add_material(garment_id, polyester.id, 40)


class TestCreate:
    @pytest.mark.asyncio
    async def test_defaults(self, garments: GarmentLifecycleController):
        garment_id = await garments.create(SHIRT)
        aggregate = await garments.get_by_id(garment_id)

        assert aggregate.garment.name == "Oxford Shirt"
        assert aggregate.garment.lifecycle_state is LifecycleState.CONCEPT
        assert aggregate.garment.base_design_id is None
        assert aggregate.materials == []
        assert aggregate.attributes == []
        assert aggregate.variations == []
        assert aggregate.material_total == Decimal("0")

    @pytest.mark.asyncio
    async def test_string_state_accepted(self, garments: GarmentLifecycleController):
        garment_id = await garments.create({**SHIRT, "lifecycle_state": "SAMPLE"})
        aggregate = await garments.get_by_id(garment_id)
        assert aggregate.garment.lifecycle_state is LifecycleState.SAMPLE

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "values",
        [
            {"category": "Tops"},
            {"name": "  ", "category": "Tops"},
            {"name": "x" * 201, "category": "Tops"},
            {**SHIRT, "change_note": "n" * 501},
            {**SHIRT, "lifecycle_state": "RETIRED"},
            {**SHIRT, "colour": "red"},
        ],
    )
    async def test_invalid_fields_rejected(self, garments: GarmentLifecycleController, values):
        with pytest.raises(ValidationError):
            await garments.create(values)
        assert await garments.list_all() == []

    @pytest.mark.asyncio
    async def test_cannot_start_in_approved(self, garments: GarmentLifecycleController):
        with pytest.raises(CompositionIncompleteError):
            await garments.create({**SHIRT, "lifecycle_state": LifecycleState.APPROVED})

    @pytest.mark.asyncio
    async def test_with_compatible_attributes(
        self, garments: GarmentLifecycleController, attributes: AttributeCatalog
    ):
        stretch = await attributes.create("Stretch")
        lined = await attributes.create("Lined")

        garment_id = await garments.create(SHIRT, attribute_ids=[stretch.id, lined.id])

        names = [a["name"] for a in await garments.attributes(garment_id)]
        assert names == ["Lined", "Stretch"]

    @pytest.mark.asyncio
    async def test_incompatible_attributes_abort_creation(
        self,
        garments: GarmentLifecycleController,
        attributes: AttributeCatalog,
        compatibility: AttributeCompatibilityEngine,
    ):
        waterproof = await attributes.create("waterproof")
        breathable = await attributes.create("breathable")
        await compatibility.record_incompatibility(waterproof.id, breathable.id)

        with pytest.raises(IncompatibleAttributesError) as exc_info:
            await garments.create(
                {"name": "Shell Jacket", "category": "Outerwear"},
                attribute_ids=[waterproof.id, breathable.id],
            )

        assert exc_info.value.conflicts == [("waterproof", "breathable")]
        assert await garments.list_all() == []

    @pytest.mark.asyncio
    async def test_unknown_attribute_aborts_creation(self, garments: GarmentLifecycleController):
        with pytest.raises(NotFoundError):
            await garments.create(SHIRT, attribute_ids=[123])
        assert await garments.list_all() == []

    @pytest.mark.asyncio
    async def test_base_design_must_exist(self, garments: GarmentLifecycleController):
        with pytest.raises(NotFoundError):
            await garments.create({**SHIRT, "base_design_id": 77})


class TestReads:
    @pytest.mark.asyncio
    async def test_missing_garment_is_none(self, garments: GarmentLifecycleController):
        assert await garments.get_by_id(999) is None

    @pytest.mark.asyncio
    async def test_variations(self, garments: GarmentLifecycleController):
        base_id = await garments.create(SHIRT)
        variant_id = await garments.create({**SHIRT, "name": "Short Sleeve", "base_design_id": base_id})

        variations = await garments.list_variations(base_id)
        assert [g.id for g in variations] == [variant_id]
        assert [g.id for g in (await garments.get_by_id(base_id)).variations] == [variant_id]
        assert await garments.list_variations(variant_id) == []

    @pytest.mark.asyncio
    async def test_list_all_newest_first(self, garments: GarmentLifecycleController):
        first = await garments.create(SHIRT)
        second = await garments.create({**SHIRT, "name": "Polo"})

        assert [g.id for g in await garments.list_all()] == [second, first]


class TestUpdate:
    @pytest.mark.asyncio
    async def test_partial_update(self, garments: GarmentLifecycleController):
        garment_id = await garments.create({**SHIRT, "change_note": "first cut"})

        result = await garments.update(garment_id, {"name": "  Oxford Shirt v2 "})

        aggregate = await garments.get_by_id(garment_id)
        assert result.applied is True
        assert aggregate.garment.name == "Oxford Shirt v2"
        assert aggregate.garment.category == "Tops"
        assert aggregate.garment.change_note == "first cut"

    @pytest.mark.asyncio
    async def test_no_fields_is_noop(self, garments: GarmentLifecycleController):
        garment_id = await garments.create(SHIRT)
        result = await garments.update(garment_id, {})
        assert result.applied is False
        assert result.message == "No fields to update"

    @pytest.mark.asyncio
    async def test_missing_garment_not_applied(self, garments: GarmentLifecycleController):
        result = await garments.update(999, {"name": "Ghost"})
        assert result.applied is False
        assert result.message == "Garment not found"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("state", [LifecycleState.APPROVED, LifecycleState.MASS_PRODUCTION])
    async def test_gated_state_needs_full_composition(
        self, garments: GarmentLifecycleController, materials: MaterialCatalog, state
    ):
        garment_id = await garments.create(SHIRT)
        cotton = await materials.create("Cotton")
        await garments.add_material(garment_id, cotton.id, 60)

        with pytest.raises(CompositionIncompleteError) as exc_info:
            await garments.update(garment_id, {"lifecycle_state": state})

        assert exc_info.value.details["current_total"] == Decimal("60.00")
        aggregate = await garments.get_by_id(garment_id)
        assert aggregate.garment.lifecycle_state is LifecycleState.CONCEPT

    @pytest.mark.asyncio
    async def test_approve_with_full_composition(
        self, garments: GarmentLifecycleController, materials: MaterialCatalog
    ):
        garment_id = await garments.create(SHIRT)
        await _complete_composition(garments, materials, garment_id)

        result = await garments.update(garment_id, {"lifecycle_state": "APPROVED"})

        assert result.applied is True
        aggregate = await garments.get_by_id(garment_id)
        assert aggregate.garment.lifecycle_state is LifecycleState.APPROVED
        assert aggregate.material_total == Decimal("100")

    @pytest.mark.asyncio
    async def test_any_state_may_follow_any_other(self, garments: GarmentLifecycleController):
        garment_id = await garments.create({**SHIRT, "lifecycle_state": "SAMPLE"})
        assert (await garments.update(garment_id, {"lifecycle_state": "CONCEPT"})).applied

    @pytest.mark.asyncio
    async def test_self_base_design_rejected(self, garments: GarmentLifecycleController):
        garment_id = await garments.create(SHIRT)
        with pytest.raises(ValidationError):
            await garments.update(garment_id, {"base_design_id": garment_id})

    @pytest.mark.asyncio
    async def test_null_state_rejected(self, garments: GarmentLifecycleController):
        garment_id = await garments.create(SHIRT)
        with pytest.raises(ValidationError):
            await garments.update(garment_id, {"lifecycle_state": None})

    @pytest.mark.asyncio
    async def test_base_design_cleared(self, garments: GarmentLifecycleController):
        base_id = await garments.create(SHIRT)
        variant_id = await garments.create({**SHIRT, "base_design_id": base_id})

        await garments.update(variant_id, {"base_design_id": None})
        assert (await garments.get_by_id(variant_id)).garment.base_design_id is None


class TestDelete:
    @pytest.mark.asyncio
    async def test_mass_production_blocks_delete(
        self, garments: GarmentLifecycleController, materials: MaterialCatalog
    ):
        garment_id = await garments.create(SHIRT)
        await _complete_composition(garments, materials, garment_id)
        await garments.update(garment_id, {"lifecycle_state": LifecycleState.MASS_PRODUCTION})

        with pytest.raises(DeletionBlockedError, match="mass production"):
            await garments.delete(garment_id)
        assert await garments.get_by_id(garment_id) is not None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("state", ["CONCEPT", "DESIGN", "SAMPLE"])
    async def test_other_states_deletable(self, garments: GarmentLifecycleController, state):
        garment_id = await garments.create({**SHIRT, "lifecycle_state": state})
        assert await garments.delete(garment_id) is True
        assert await garments.get_by_id(garment_id) is None

    @pytest.mark.asyncio
    async def test_approved_deletable(self, garments: GarmentLifecycleController, materials: MaterialCatalog):
        garment_id = await garments.create(SHIRT)
        await _complete_composition(garments, materials, garment_id)
        await garments.update(garment_id, {"lifecycle_state": "APPROVED"})

        assert await garments.delete(garment_id) is True

    @pytest.mark.asyncio
    async def test_missing_garment(self, garments: GarmentLifecycleController):
        assert await garments.delete(999) is False

    @pytest.mark.asyncio
    async def test_variations_detach_from_deleted_base(self, garments: GarmentLifecycleController):
        base_id = await garments.create(SHIRT)
        variant_id = await garments.create({**SHIRT, "base_design_id": base_id})

        await garments.delete(base_id)
        assert (await garments.get_by_id(variant_id)).garment.base_design_id is None


class TestAddAttribute:
    @pytest.mark.asyncio
    async def test_conflict_with_existing_attribute(
        self,
        garments: GarmentLifecycleController,
        attributes: AttributeCatalog,
        compatibility: AttributeCompatibilityEngine,
    ):
        waterproof = await attributes.create("waterproof")
        breathable = await attributes.create("breathable")
        await compatibility.record_incompatibility(breathable.id, waterproof.id)
        garment_id = await garments.create(SHIRT, attribute_ids=[waterproof.id])

        with pytest.raises(IncompatibleAttributesError) as exc_info:
            await garments.add_attribute(garment_id, breathable.id)

        assert exc_info.value.conflicts == [("waterproof", "breathable")]
        assert [a["name"] for a in await garments.attributes(garment_id)] == ["waterproof"]

    @pytest.mark.asyncio
    async def test_repeat_assignment_is_noop(
        self, garments: GarmentLifecycleController, attributes: AttributeCatalog
    ):
        stretch = await attributes.create("Stretch")
        garment_id = await garments.create(SHIRT)

        await garments.add_attribute(garment_id, stretch.id)
        rows = await garments.add_attribute(garment_id, stretch.id)
        assert rows == [{"id": stretch.id, "name": "Stretch"}]

    @pytest.mark.asyncio
    async def test_missing_garment_or_attribute(
        self, garments: GarmentLifecycleController, attributes: AttributeCatalog
    ):
        stretch = await attributes.create("Stretch")
        garment_id = await garments.create(SHIRT)

        with pytest.raises(NotFoundError):
            await garments.add_attribute(999, stretch.id)
        with pytest.raises(NotFoundError):
            await garments.add_attribute(garment_id, 999)

    @pytest.mark.asyncio
    async def test_concurrent_incompatible_additions(
        self,
        garments: GarmentLifecycleController,
        attributes: AttributeCatalog,
        compatibility: AttributeCompatibilityEngine,
    ):
        waterproof = await attributes.create("waterproof")
        breathable = await attributes.create("breathable")
        await compatibility.record_incompatibility(waterproof.id, breathable.id)
        garment_id = await garments.create(SHIRT)

        results = await asyncio.gather(
            garments.add_attribute(garment_id, waterproof.id),
            garments.add_attribute(garment_id, breathable.id),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 1
        assert isinstance(failures[0], IncompatibleAttributesError)
        assert len(await garments.attributes(garment_id)) == 1
