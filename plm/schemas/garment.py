"""Garment request and response schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from plm.models import LifecycleState


class GarmentCreate(BaseModel):
    """Request body for creating a garment."""

    name: str = Field(min_length=1, max_length=200)
    category: str = Field(min_length=1, max_length=100)
    lifecycle_state: LifecycleState = Field(default=LifecycleState.CONCEPT)
    base_design_id: int | None = Field(default=None, description="Garment this one is a variation of")
    change_note: str | None = Field(default=None, max_length=500)
    attribute_ids: list[int] = Field(
        default_factory=list,
        description="Initial attributes, validated together for incompatibilities",
    )

    model_config = {"extra": "forbid"}


class GarmentUpdate(BaseModel):
    """Partial update; only the fields present in the body are changed."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    category: str | None = Field(default=None, min_length=1, max_length=100)
    lifecycle_state: LifecycleState | None = None
    base_design_id: int | None = None
    change_note: str | None = Field(default=None, max_length=500)

    model_config = {"extra": "forbid"}


class MaterialAssignment(BaseModel):
    material_id: int
    percentage: Decimal = Field(gt=0, le=100, decimal_places=2)

    model_config = {"extra": "forbid"}


class AttributeAssignment(BaseModel):
    attribute_id: int

    model_config = {"extra": "forbid"}


class GarmentResponse(BaseModel):
    id: int
    name: str
    category: str
    lifecycle_state: LifecycleState
    base_design_id: int | None = None
    change_note: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class GarmentMaterialResponse(BaseModel):
    id: int
    name: str
    percentage: Decimal


class GarmentAttributeResponse(BaseModel):
    id: int
    name: str


class GarmentDetailResponse(GarmentResponse):
    """Garment with composition, attributes and direct variations."""

    materials: list[GarmentMaterialResponse] = Field(default_factory=list)
    attributes: list[GarmentAttributeResponse] = Field(default_factory=list)
    variations: list[GarmentResponse] = Field(default_factory=list)
    material_total: Decimal = Field(default=Decimal("0.00"), description="Sum of material percentages")


class GarmentCreatedResponse(BaseModel):
    id: int
    message: str = "Garment created successfully"
