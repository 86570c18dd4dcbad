"""Material catalog endpoints."""

from fastapi import APIRouter, HTTPException, status

from plm.api.deps import Materials
from plm.schemas import DeleteResponse, MaterialCreate, MaterialResponse

router = APIRouter()


@router.get("", response_model=list[MaterialResponse])
async def list_materials(materials: Materials) -> list[MaterialResponse]:
    return [MaterialResponse.model_validate(m) for m in await materials.list_all()]


@router.get("/{material_id}", response_model=MaterialResponse)
async def get_material(material_id: int, materials: Materials) -> MaterialResponse:
    material = await materials.get(material_id)
    if material is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Material {material_id} not found",
        )
    return MaterialResponse.model_validate(material)


@router.post("", response_model=MaterialResponse, status_code=status.HTTP_201_CREATED)
async def create_material(request: MaterialCreate, materials: Materials) -> MaterialResponse:
    return MaterialResponse.model_validate(await materials.create(request.name))


@router.delete("/{material_id}", response_model=DeleteResponse)
async def delete_material(material_id: int, materials: Materials) -> DeleteResponse:
    """Delete a material no garment uses."""
    if not await materials.delete(material_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Material {material_id} not found",
        )
    return DeleteResponse(message=f"Material {material_id} deleted")
