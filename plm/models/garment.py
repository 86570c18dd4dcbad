"""Garment model - the design whose lifecycle the core protects."""

from sqlalchemy import Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from plm.models.base import Base, TimestampMixin
from plm.models.enums import LifecycleState


class Garment(Base, TimestampMixin):
    """A garment design.

    ``base_design_id`` points at the garment this one is a variation of.
    The relation is a plain directed edge; cycles are not prevented here.
    """

    __tablename__ = "garments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    lifecycle_state: Mapped[LifecycleState] = mapped_column(
        Enum(LifecycleState, native_enum=False, length=20, validate_strings=True),
        nullable=False,
        default=LifecycleState.CONCEPT,
        index=True,
    )
    base_design_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("garments.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    change_note: Mapped[str | None] = mapped_column(String(500), nullable=True)

    def __repr__(self) -> str:
        return f"<Garment(id={self.id}, name='{self.name}', state={self.lifecycle_state.value})>"
