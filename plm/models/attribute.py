"""Design attributes, their incompatibilities and garment assignments."""

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from plm.models.base import Base


class Attribute(Base):
    """Design attribute (waterproof, breathable, reversible, ...)."""

    __tablename__ = "attributes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Attribute(id={self.id}, name='{self.name}')>"


class AttributeIncompatibility(Base):
    """Unordered pair of attributes that may never share a garment.

    Stored with the smaller id in ``attribute_id_a``.
    """

    __tablename__ = "attribute_incompatibilities"
    __table_args__ = (
        CheckConstraint(
            "attribute_id_a < attribute_id_b",
            name="ck_attribute_incompatibilities_canonical_order",
        ),
    )

    attribute_id_a: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("attributes.id", ondelete="CASCADE"),
        primary_key=True,
    )
    attribute_id_b: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("attributes.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<AttributeIncompatibility({self.attribute_id_a}, {self.attribute_id_b})>"


class GarmentAttribute(Base):
    """Attribute assigned to a garment."""

    __tablename__ = "garment_attributes"

    garment_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("garments.id", ondelete="CASCADE"),
        primary_key=True,
    )
    attribute_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("attributes.id", ondelete="RESTRICT"),
        primary_key=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<GarmentAttribute(garment_id={self.garment_id}, attribute_id={self.attribute_id})>"
