"""SQLAlchemy models for the PLM store.

Importing this package registers every table on ``Base.metadata``.
"""

from plm.models.attribute import Attribute, AttributeIncompatibility, GarmentAttribute
from plm.models.base import Base, CreatedAtMixin, TimestampMixin
from plm.models.enums import LifecycleState, SampleStatus, SupplierStatus
from plm.models.garment import Garment
from plm.models.material import GarmentMaterial, Material
from plm.models.supplier import GarmentSupplier, SampleSet, Supplier, SupplierOffer

__all__ = [
    "Base",
    "CreatedAtMixin",
    "TimestampMixin",
    "LifecycleState",
    "SampleStatus",
    "SupplierStatus",
    "Attribute",
    "AttributeIncompatibility",
    "Garment",
    "GarmentAttribute",
    "GarmentMaterial",
    "GarmentSupplier",
    "Material",
    "SampleSet",
    "Supplier",
    "SupplierOffer",
]
