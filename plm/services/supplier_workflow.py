"""Supplier Workflow Tracker.

Suppliers, their engagement per garment, price offers and sample sets.
Status transitions are not constrained: any status may follow any other.
"""

import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from plm.core.errors import NotFoundError, ValidationError
from plm.infra.logging import get_logger
from plm.models import GarmentSupplier, SampleSet, SampleStatus, Supplier, SupplierOffer, SupplierStatus
from plm.repositories import EntityStore

logger = get_logger(__name__)

_CURRENCY = re.compile(r"^[A-Z]{3}$")
_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_PRICE_QUANTUM = Decimal("0.01")
_SUPPLIER_NAME_MAX = 200
_EMAIL_MAX = 255


def _parse_status(enum_type: type, value: Any, field: str) -> Any:
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise ValidationError(f"Invalid {field} '{value}'. Allowed: {allowed}", field=field) from None


def _parse_price(raw: Decimal | int | float | str) -> Decimal:
    if isinstance(raw, bool):
        raise ValidationError("Price must be a number", field="price")
    try:
        price = raw if isinstance(raw, Decimal) else Decimal(str(raw))
    except (InvalidOperation, ValueError):
        raise ValidationError("Price must be a number", field="price") from None
    if not price.is_finite() or price <= 0:
        raise ValidationError("Price must be greater than 0", field="price")
    if price.quantize(_PRICE_QUANTUM) != price:
        raise ValidationError("Price supports at most two decimal places", field="price")
    return price.quantize(_PRICE_QUANTUM)


class SupplierWorkflowTracker:
    def __init__(self, store: EntityStore, default_currency: str = "USD") -> None:
        self._store = store
        self.default_currency = default_currency

    # =========================================================================
    # Suppliers
    # =========================================================================

    async def create_supplier(self, name: str, contact_email: str | None = None) -> Supplier:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError("Supplier name cannot be empty", field="name")
        if len(cleaned) > _SUPPLIER_NAME_MAX:
            raise ValidationError(
                f"Supplier name cannot exceed {_SUPPLIER_NAME_MAX} characters", field="name"
            )

        email = (contact_email or "").strip() or None
        if email is not None and (len(email) > _EMAIL_MAX or not _EMAIL.match(email)):
            raise ValidationError("Invalid contact email", field="contact_email")

        supplier = await self._store.call(self._store.suppliers.create, cleaned, email)
        logger.info("Supplier created", supplier_id=supplier.id, name=supplier.name)
        return supplier

    async def list_suppliers(self) -> list[Supplier]:
        return await self._store.read(self._store.suppliers.list_all)

    async def get_supplier(self, supplier_id: int) -> Supplier | None:
        return await self._store.read(self._store.suppliers.get, supplier_id)

    async def delete_supplier(self, supplier_id: int) -> bool:
        """Raises InUseError while the supplier is linked to any garment."""
        deleted = await self._store.call(self._store.suppliers.remove, supplier_id)
        if deleted:
            logger.info("Supplier deleted", supplier_id=supplier_id)
        return deleted

    # =========================================================================
    # Garment links
    # =========================================================================

    async def link_supplier(
        self,
        garment_id: int,
        supplier_id: int,
        status: SupplierStatus | str = SupplierStatus.OFFERED,
    ) -> GarmentSupplier:
        """Engage a supplier for a garment.

        Raises:
            NotFoundError: If the garment or supplier does not exist
            AlreadyExistsError: If the supplier is already linked to the garment
        """
        link_status = _parse_status(SupplierStatus, status, "status")

        async def work(session: AsyncSession) -> GarmentSupplier:
            if not await self._store.garments.exists(session, garment_id):
                raise NotFoundError("Garment", garment_id)
            if not await self._store.suppliers.exists(session, supplier_id):
                raise NotFoundError("Supplier", supplier_id)
            return await self._store.garment_suppliers.link(
                session,
                GarmentSupplier(garment_id=garment_id, supplier_id=supplier_id, status=link_status),
            )

        link = await self._store.db.run(work)
        logger.info(
            "Supplier linked",
            garment_supplier_id=link.id,
            garment_id=garment_id,
            supplier_id=supplier_id,
            status=link_status.value,
        )
        return link

    async def garment_suppliers(self, garment_id: int) -> list[dict]:
        return await self._store.read(self._store.garment_suppliers.for_garment, garment_id)

    async def get_link(self, garment_supplier_id: int) -> GarmentSupplier | None:
        return await self._store.read(self._store.garment_suppliers.get, garment_supplier_id)

    async def update_supplier_status(
        self, garment_supplier_id: int, status: SupplierStatus | str
    ) -> GarmentSupplier | None:
        """Set a link's status; None when the link does not exist."""
        new_status = _parse_status(SupplierStatus, status, "status")

        async def work(session: AsyncSession) -> GarmentSupplier | None:
            link = await self._store.garment_suppliers.get(session, garment_supplier_id)
            if link is None:
                return None
            return await self._store.garment_suppliers.update(session, link, {"status": new_status})

        link = await self._store.db.run(work)
        if link is not None:
            logger.info(
                "Supplier status changed",
                garment_supplier_id=garment_supplier_id,
                status=new_status.value,
            )
        return link

    # =========================================================================
    # Offers and samples
    # =========================================================================

    async def add_offer(
        self,
        garment_supplier_id: int,
        price: Decimal | int | float | str,
        lead_time_days: int,
        currency: str | None = None,
    ) -> SupplierOffer:
        """Record a quote; the currency defaults to the configured one.

        Raises:
            ValidationError: If price, lead time or currency is malformed
            NotFoundError: If the link does not exist
        """
        amount = _parse_price(price)
        if isinstance(lead_time_days, bool) or not isinstance(lead_time_days, int) or lead_time_days < 0:
            raise ValidationError("Lead time must be a non-negative number of days", field="lead_time_days")
        code = (currency or self.default_currency).strip().upper()
        if not _CURRENCY.match(code):
            raise ValidationError("Currency must be a three-letter code", field="currency")

        async def work(session: AsyncSession) -> SupplierOffer:
            if not await self._store.garment_suppliers.exists(session, garment_supplier_id):
                raise NotFoundError("Garment supplier", garment_supplier_id)
            return await self._store.offers.add(
                session,
                SupplierOffer(
                    garment_supplier_id=garment_supplier_id,
                    price=amount,
                    currency=code,
                    lead_time_days=lead_time_days,
                ),
            )

        offer = await self._store.db.run(work)
        logger.info(
            "Supplier offer recorded",
            offer_id=offer.id,
            garment_supplier_id=garment_supplier_id,
            price=str(amount),
            currency=code,
        )
        return offer

    async def offers(self, garment_supplier_id: int) -> list[SupplierOffer]:
        return await self._store.read(self._store.offers.for_link, garment_supplier_id)

    async def add_sample_set(self, garment_supplier_id: int, notes: str | None = None) -> SampleSet:
        """Request a sample set; it starts as REQUESTED."""

        async def work(session: AsyncSession) -> SampleSet:
            if not await self._store.garment_suppliers.exists(session, garment_supplier_id):
                raise NotFoundError("Garment supplier", garment_supplier_id)
            return await self._store.samples.add(
                session,
                SampleSet(
                    garment_supplier_id=garment_supplier_id,
                    status=SampleStatus.REQUESTED,
                    notes=notes,
                ),
            )

        sample = await self._store.db.run(work)
        logger.info("Sample set requested", sample_set_id=sample.id, garment_supplier_id=garment_supplier_id)
        return sample

    async def samples(self, garment_supplier_id: int) -> list[SampleSet]:
        return await self._store.read(self._store.samples.for_link, garment_supplier_id)

    async def update_sample_status(
        self,
        sample_set_id: int,
        status: SampleStatus | str,
        notes: str | None = None,
    ) -> SampleSet | None:
        """Move a sample set to a new status.

        Entering RECEIVED, PASSED or FAILED stamps ``received_at`` with the
        current time. ``notes`` replaces the stored notes when given.
        Returns None when the sample set does not exist.
        """
        new_status = _parse_status(SampleStatus, status, "status")

        async def work(session: AsyncSession) -> SampleSet | None:
            sample = await self._store.samples.get(session, sample_set_id)
            if sample is None:
                return None
            values: dict[str, Any] = {"status": new_status}
            if new_status.marks_receipt:
                values["received_at"] = datetime.now(timezone.utc)
            if notes is not None:
                values["notes"] = notes
            return await self._store.samples.update(session, sample, values)

        sample = await self._store.db.run(work)
        if sample is not None:
            logger.info("Sample status changed", sample_set_id=sample_set_id, status=new_status.value)
        return sample
