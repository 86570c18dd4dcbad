"""Entity Store - typed storage per entity, no business rules."""

from plm.repositories.attribute import (
    AttributeRepository,
    GarmentAttributeRepository,
    IncompatibilityRepository,
    canonical_pair,
)
from plm.repositories.base import Repository
from plm.repositories.garment import GarmentRepository
from plm.repositories.material import CompositionRepository, MaterialRepository
from plm.repositories.store import EntityStore
from plm.repositories.supplier import (
    GarmentSupplierRepository,
    SampleSetRepository,
    SupplierOfferRepository,
    SupplierRepository,
)

__all__ = [
    "AttributeRepository",
    "CompositionRepository",
    "EntityStore",
    "GarmentAttributeRepository",
    "GarmentRepository",
    "GarmentSupplierRepository",
    "IncompatibilityRepository",
    "MaterialRepository",
    "Repository",
    "SampleSetRepository",
    "SupplierOfferRepository",
    "SupplierRepository",
    "canonical_pair",
]
