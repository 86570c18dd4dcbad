"""Supplier endpoints: suppliers, link status, offers and sample sets."""

from fastapi import APIRouter, HTTPException, status

from plm.api.deps import Suppliers
from plm.schemas import (
    DeleteResponse,
    OfferCreate,
    OfferResponse,
    SampleSetCreate,
    SampleSetResponse,
    SampleStatusUpdate,
    SupplierCreate,
    SupplierLinkResponse,
    SupplierResponse,
    SupplierStatusUpdate,
)

router = APIRouter()


def _link_not_found(link_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Garment supplier {link_id} not found",
    )


@router.get("", response_model=list[SupplierResponse])
async def list_suppliers(suppliers: Suppliers) -> list[SupplierResponse]:
    return [SupplierResponse.model_validate(s) for s in await suppliers.list_suppliers()]


@router.post("", response_model=SupplierResponse, status_code=status.HTTP_201_CREATED)
async def create_supplier(request: SupplierCreate, suppliers: Suppliers) -> SupplierResponse:
    supplier = await suppliers.create_supplier(request.name, request.contact_email)
    return SupplierResponse.model_validate(supplier)


@router.get("/{supplier_id}", response_model=SupplierResponse)
async def get_supplier(supplier_id: int, suppliers: Suppliers) -> SupplierResponse:
    supplier = await suppliers.get_supplier(supplier_id)
    if supplier is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Supplier {supplier_id} not found",
        )
    return SupplierResponse.model_validate(supplier)


@router.delete("/{supplier_id}", response_model=DeleteResponse)
async def delete_supplier(supplier_id: int, suppliers: Suppliers) -> DeleteResponse:
    if not await suppliers.delete_supplier(supplier_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Supplier {supplier_id} not found",
        )
    return DeleteResponse(message=f"Supplier {supplier_id} deleted")


@router.get("/links/{link_id}", response_model=SupplierLinkResponse)
async def get_link(link_id: int, suppliers: Suppliers) -> SupplierLinkResponse:
    link = await suppliers.get_link(link_id)
    if link is None:
        raise _link_not_found(link_id)
    return SupplierLinkResponse.model_validate(link)


@router.patch("/links/{link_id}", response_model=SupplierLinkResponse)
async def update_link_status(
    link_id: int,
    request: SupplierStatusUpdate,
    suppliers: Suppliers,
) -> SupplierLinkResponse:
    link = await suppliers.update_supplier_status(link_id, request.status)
    if link is None:
        raise _link_not_found(link_id)
    return SupplierLinkResponse.model_validate(link)


@router.get("/links/{link_id}/offers", response_model=list[OfferResponse])
async def list_offers(link_id: int, suppliers: Suppliers) -> list[OfferResponse]:
    return [OfferResponse.model_validate(o) for o in await suppliers.offers(link_id)]


@router.post("/links/{link_id}/offers", response_model=OfferResponse, status_code=status.HTTP_201_CREATED)
async def add_offer(link_id: int, request: OfferCreate, suppliers: Suppliers) -> OfferResponse:
    offer = await suppliers.add_offer(
        link_id,
        price=request.price,
        lead_time_days=request.lead_time_days,
        currency=request.currency,
    )
    return OfferResponse.model_validate(offer)


@router.get("/links/{link_id}/samples", response_model=list[SampleSetResponse])
async def list_samples(link_id: int, suppliers: Suppliers) -> list[SampleSetResponse]:
    return [SampleSetResponse.model_validate(s) for s in await suppliers.samples(link_id)]


@router.post(
    "/links/{link_id}/samples",
    response_model=SampleSetResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_sample_set(link_id: int, request: SampleSetCreate, suppliers: Suppliers) -> SampleSetResponse:
    return SampleSetResponse.model_validate(await suppliers.add_sample_set(link_id, request.notes))


@router.patch("/samples/{sample_id}", response_model=SampleSetResponse)
async def update_sample_status(
    sample_id: int,
    request: SampleStatusUpdate,
    suppliers: Suppliers,
) -> SampleSetResponse:
    """Change a sample set's status; any outcome status stamps ``received_at``."""
    sample = await suppliers.update_sample_status(sample_id, request.status, request.notes)
    if sample is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Sample set {sample_id} not found",
        )
    return SampleSetResponse.model_validate(sample)
