"""Supplier workflow schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from plm.models import SampleStatus, SupplierStatus


class SupplierCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    contact_email: str | None = Field(default=None, max_length=255)

    model_config = {"extra": "forbid"}


class SupplierResponse(BaseModel):
    id: int
    name: str
    contact_email: str | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class SupplierLinkCreate(BaseModel):
    supplier_id: int
    status: SupplierStatus = SupplierStatus.OFFERED

    model_config = {"extra": "forbid"}


class SupplierStatusUpdate(BaseModel):
    status: SupplierStatus

    model_config = {"extra": "forbid"}


class SupplierLinkResponse(BaseModel):
    id: int
    garment_id: int
    supplier_id: int
    status: SupplierStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class GarmentSupplierResponse(BaseModel):
    """A garment's supplier link joined with supplier details."""

    id: int
    status: SupplierStatus
    supplier_id: int
    supplier_name: str
    contact_email: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OfferCreate(BaseModel):
    price: Decimal = Field(gt=0, decimal_places=2)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    lead_time_days: int = Field(ge=0)

    model_config = {"extra": "forbid"}


class OfferResponse(BaseModel):
    id: int
    garment_supplier_id: int
    price: Decimal
    currency: str
    lead_time_days: int
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class SampleSetCreate(BaseModel):
    notes: str | None = None

    model_config = {"extra": "forbid"}


class SampleStatusUpdate(BaseModel):
    status: SampleStatus
    notes: str | None = None

    model_config = {"extra": "forbid"}


class SampleSetResponse(BaseModel):
    id: int
    garment_supplier_id: int
    status: SampleStatus
    received_at: datetime | None = None
    notes: str | None = None

    model_config = {"from_attributes": True}
