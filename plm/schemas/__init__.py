"""Pydantic schemas for the HTTP API."""

from plm.schemas.catalog import (
    AttributeCreate,
    AttributeResponse,
    CompatibilityCheckRequest,
    CompatibilityCheckResponse,
    IncompatibilityCreate,
    IncompatibilityResponse,
    MaterialCreate,
    MaterialResponse,
)
from plm.schemas.common import DeleteResponse, ErrorResponse, HealthResponse
from plm.schemas.garment import (
    AttributeAssignment,
    GarmentAttributeResponse,
    GarmentCreate,
    GarmentCreatedResponse,
    GarmentDetailResponse,
    GarmentMaterialResponse,
    GarmentResponse,
    GarmentUpdate,
    MaterialAssignment,
)
from plm.schemas.supplier import (
    GarmentSupplierResponse,
    OfferCreate,
    OfferResponse,
    SampleSetCreate,
    SampleSetResponse,
    SampleStatusUpdate,
    SupplierCreate,
    SupplierLinkCreate,
    SupplierLinkResponse,
    SupplierResponse,
    SupplierStatusUpdate,
)

__all__ = [
    "AttributeAssignment",
    "AttributeCreate",
    "AttributeResponse",
    "CompatibilityCheckRequest",
    "CompatibilityCheckResponse",
    "DeleteResponse",
    "ErrorResponse",
    "GarmentAttributeResponse",
    "GarmentCreate",
    "GarmentCreatedResponse",
    "GarmentDetailResponse",
    "GarmentMaterialResponse",
    "GarmentResponse",
    "GarmentSupplierResponse",
    "GarmentUpdate",
    "HealthResponse",
    "IncompatibilityCreate",
    "IncompatibilityResponse",
    "MaterialAssignment",
    "MaterialCreate",
    "MaterialResponse",
    "OfferCreate",
    "OfferResponse",
    "SampleSetCreate",
    "SampleSetResponse",
    "SampleStatusUpdate",
    "SupplierCreate",
    "SupplierLinkCreate",
    "SupplierLinkResponse",
    "SupplierResponse",
    "SupplierStatusUpdate",
]
