"""Material catalog and garment composition rows."""

from decimal import Decimal

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from plm.models.base import Base


class Material(Base):
    """Fabric or component material (cotton, polyester, elastane, ...)."""

    __tablename__ = "materials"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Material(id={self.id}, name='{self.name}')>"


class GarmentMaterial(Base):
    """Share of one material in one garment.

    Percentages are fixed-point (two decimals) so sums compare exactly
    against 100.
    """

    __tablename__ = "garment_materials"
    __table_args__ = (
        CheckConstraint(
            "percentage > 0 AND percentage <= 100",
            name="ck_garment_materials_percentage_range",
        ),
    )

    garment_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("garments.id", ondelete="CASCADE"),
        primary_key=True,
    )
    material_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("materials.id", ondelete="RESTRICT"),
        primary_key=True,
        index=True,
    )
    percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)

    def __repr__(self) -> str:
        return (
            f"<GarmentMaterial(garment_id={self.garment_id}, "
            f"material_id={self.material_id}, percentage={self.percentage})>"
        )
