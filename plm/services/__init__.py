"""Business services of the PLM core."""

from plm.services.catalog import AttributeCatalog, MaterialCatalog
from plm.services.compatibility import AttributeCompatibilityEngine, CompatibilityResult
from plm.services.composition import MaterialCompositionGuard
from plm.services.lifecycle import GarmentAggregate, GarmentLifecycleController, UpdateResult
from plm.services.supplier_workflow import SupplierWorkflowTracker

__all__ = [
    "AttributeCatalog",
    "AttributeCompatibilityEngine",
    "CompatibilityResult",
    "GarmentAggregate",
    "GarmentLifecycleController",
    "MaterialCatalog",
    "MaterialCompositionGuard",
    "SupplierWorkflowTracker",
    "UpdateResult",
]
