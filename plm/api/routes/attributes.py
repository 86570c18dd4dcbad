"""Attribute catalog and incompatibility endpoints."""

from fastapi import APIRouter, HTTPException, status

from plm.api.deps import Attributes, Compatibility
from plm.schemas import (
    AttributeCreate,
    AttributeResponse,
    CompatibilityCheckRequest,
    CompatibilityCheckResponse,
    DeleteResponse,
    IncompatibilityCreate,
    IncompatibilityResponse,
)

router = APIRouter()


@router.get("", response_model=list[AttributeResponse])
async def list_attributes(attributes: Attributes) -> list[AttributeResponse]:
    return [AttributeResponse.model_validate(a) for a in await attributes.list_all()]


@router.get("/{attribute_id}", response_model=AttributeResponse)
async def get_attribute(attribute_id: int, attributes: Attributes) -> AttributeResponse:
    attribute = await attributes.get(attribute_id)
    if attribute is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Attribute {attribute_id} not found",
        )
    return AttributeResponse.model_validate(attribute)


@router.post("", response_model=AttributeResponse, status_code=status.HTTP_201_CREATED)
async def create_attribute(request: AttributeCreate, attributes: Attributes) -> AttributeResponse:
    return AttributeResponse.model_validate(await attributes.create(request.name))


@router.delete("/{attribute_id}", response_model=DeleteResponse)
async def delete_attribute(attribute_id: int, attributes: Attributes) -> DeleteResponse:
    if not await attributes.delete(attribute_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Attribute {attribute_id} not found",
        )
    return DeleteResponse(message=f"Attribute {attribute_id} deleted")


@router.post("/incompatibilities", response_model=IncompatibilityResponse)
async def record_incompatibility(
    request: IncompatibilityCreate,
    compatibility: Compatibility,
) -> IncompatibilityResponse:
    """Declare two attributes mutually exclusive (order does not matter)."""
    created = await compatibility.record_incompatibility(request.attribute_id_1, request.attribute_id_2)
    return IncompatibilityResponse(
        created=created,
        message="Incompatibility recorded" if created else "Incompatibility already recorded",
    )


@router.post("/check", response_model=CompatibilityCheckResponse)
async def check_compatibility(
    request: CompatibilityCheckRequest,
    compatibility: Compatibility,
) -> CompatibilityCheckResponse:
    result = await compatibility.check_set(request.attribute_ids)
    return CompatibilityCheckResponse(valid=result.valid, conflicts=list(result.conflicts))
