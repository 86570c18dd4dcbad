"""Supplier records and the per-garment sourcing workflow."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from plm.models.base import Base, CreatedAtMixin, TimestampMixin
from plm.models.enums import SampleStatus, SupplierStatus


class Supplier(Base, CreatedAtMixin):
    """Manufacturer or mill that can produce garments."""

    __tablename__ = "suppliers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False, index=True)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<Supplier(id={self.id}, name='{self.name}')>"


class GarmentSupplier(Base, TimestampMixin):
    """Engagement of one supplier for one garment."""

    __tablename__ = "garment_suppliers"
    __table_args__ = (
        UniqueConstraint("garment_id", "supplier_id", name="uq_garment_suppliers_pair"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    garment_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("garments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    supplier_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("suppliers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    status: Mapped[SupplierStatus] = mapped_column(
        Enum(SupplierStatus, native_enum=False, length=20, validate_strings=True),
        nullable=False,
        default=SupplierStatus.OFFERED,
    )

    def __repr__(self) -> str:
        return f"<GarmentSupplier(id={self.id}, status={self.status.value})>"


class SupplierOffer(Base, CreatedAtMixin):
    """Price and lead-time quote made under a garment-supplier link."""

    __tablename__ = "supplier_offers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    garment_supplier_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("garment_suppliers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    lead_time_days: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self) -> str:
        return f"<SupplierOffer(id={self.id}, price={self.price} {self.currency})>"


class SampleSet(Base):
    """Sample batch requested from a supplier and its approval outcome."""

    __tablename__ = "sample_sets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    garment_supplier_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("garment_suppliers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status: Mapped[SampleStatus] = mapped_column(
        Enum(SampleStatus, native_enum=False, length=20, validate_strings=True),
        nullable=False,
        default=SampleStatus.REQUESTED,
    )
    received_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<SampleSet(id={self.id}, status={self.status.value})>"
