"""Garment endpoints: CRUD, lifecycle, composition, attributes and suppliers."""

from fastapi import APIRouter, HTTPException, status

from plm.api.deps import Garments, Suppliers
from plm.infra.logging import get_logger
from plm.schemas import (
    AttributeAssignment,
    DeleteResponse,
    GarmentAttributeResponse,
    GarmentCreate,
    GarmentCreatedResponse,
    GarmentDetailResponse,
    GarmentMaterialResponse,
    GarmentResponse,
    GarmentSupplierResponse,
    GarmentUpdate,
    MaterialAssignment,
    SupplierLinkCreate,
    SupplierLinkResponse,
)
from plm.services import GarmentAggregate

router = APIRouter()
logger = get_logger(__name__)


def _detail(aggregate: GarmentAggregate) -> GarmentDetailResponse:
    base = GarmentResponse.model_validate(aggregate.garment)
    return GarmentDetailResponse(
        **base.model_dump(),
        materials=[GarmentMaterialResponse(**m) for m in aggregate.materials],
        attributes=[GarmentAttributeResponse(**a) for a in aggregate.attributes],
        variations=[GarmentResponse.model_validate(v) for v in aggregate.variations],
        material_total=aggregate.material_total,
    )


def _not_found(garment_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Garment {garment_id} not found",
    )


@router.get("", response_model=list[GarmentResponse])
async def list_garments(garments: Garments) -> list[GarmentResponse]:
    """All garments, newest first."""
    return [GarmentResponse.model_validate(g) for g in await garments.list_all()]


@router.post("", response_model=GarmentCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_garment(request: GarmentCreate, garments: Garments) -> GarmentCreatedResponse:
    """Create a garment; inline attributes are checked as one set first."""
    values = request.model_dump(exclude={"attribute_ids"})
    garment_id = await garments.create(values, attribute_ids=request.attribute_ids)
    return GarmentCreatedResponse(id=garment_id)


@router.get("/{garment_id}", response_model=GarmentDetailResponse)
async def get_garment(garment_id: int, garments: Garments) -> GarmentDetailResponse:
    aggregate = await garments.get_by_id(garment_id)
    if aggregate is None:
        raise _not_found(garment_id)
    return _detail(aggregate)


@router.patch("/{garment_id}", response_model=GarmentDetailResponse)
async def update_garment(
    garment_id: int,
    request: GarmentUpdate,
    garments: Garments,
) -> GarmentDetailResponse:
    """Partial update. An empty body changes nothing and returns the garment."""
    result = await garments.update(garment_id, request.model_dump(exclude_unset=True))
    if not result.applied:
        logger.debug("Garment update not applied", garment_id=garment_id, reason=result.message)

    aggregate = await garments.get_by_id(garment_id)
    if aggregate is None:
        raise _not_found(garment_id)
    return _detail(aggregate)


@router.delete("/{garment_id}", response_model=DeleteResponse)
async def delete_garment(garment_id: int, garments: Garments) -> DeleteResponse:
    """Delete a garment; refused while it is in mass production."""
    if not await garments.delete(garment_id):
        raise _not_found(garment_id)
    return DeleteResponse(message=f"Garment {garment_id} deleted")


@router.get("/{garment_id}/variations", response_model=list[GarmentResponse])
async def list_variations(garment_id: int, garments: Garments) -> list[GarmentResponse]:
    return [GarmentResponse.model_validate(g) for g in await garments.list_variations(garment_id)]


# =============================================================================
# Composition and attributes
# =============================================================================


@router.get("/{garment_id}/materials", response_model=list[GarmentMaterialResponse])
async def list_materials(garment_id: int, garments: Garments) -> list[GarmentMaterialResponse]:
    return [GarmentMaterialResponse(**m) for m in await garments.materials(garment_id)]


@router.post("/{garment_id}/materials", response_model=list[GarmentMaterialResponse])
async def add_material(
    garment_id: int,
    request: MaterialAssignment,
    garments: Garments,
) -> list[GarmentMaterialResponse]:
    """Add or replace a material share; the total may not exceed 100%."""
    materials = await garments.add_material(garment_id, request.material_id, request.percentage)
    return [GarmentMaterialResponse(**m) for m in materials]


@router.get("/{garment_id}/attributes", response_model=list[GarmentAttributeResponse])
async def list_attributes(garment_id: int, garments: Garments) -> list[GarmentAttributeResponse]:
    return [GarmentAttributeResponse(**a) for a in await garments.attributes(garment_id)]


@router.post("/{garment_id}/attributes", response_model=list[GarmentAttributeResponse])
async def add_attribute(
    garment_id: int,
    request: AttributeAssignment,
    garments: Garments,
) -> list[GarmentAttributeResponse]:
    attributes = await garments.add_attribute(garment_id, request.attribute_id)
    return [GarmentAttributeResponse(**a) for a in attributes]


# =============================================================================
# Suppliers
# =============================================================================


@router.get("/{garment_id}/suppliers", response_model=list[GarmentSupplierResponse])
async def list_suppliers(garment_id: int, suppliers: Suppliers) -> list[GarmentSupplierResponse]:
    return [GarmentSupplierResponse(**row) for row in await suppliers.garment_suppliers(garment_id)]


@router.post(
    "/{garment_id}/suppliers",
    response_model=SupplierLinkResponse,
    status_code=status.HTTP_201_CREATED,
)
async def link_supplier(
    garment_id: int,
    request: SupplierLinkCreate,
    suppliers: Suppliers,
) -> SupplierLinkResponse:
    link = await suppliers.link_supplier(garment_id, request.supplier_id, request.status)
    return SupplierLinkResponse.model_validate(link)
