"""FastAPI dependencies for dependency injection.

Provides:
- The process-wide ``Database`` handle created in the lifespan
- Entity Store and the services built on it, one set per request
"""

from typing import Annotated

from fastapi import Depends, Request

from plm.config import settings
from plm.infra.database import Database
from plm.repositories import EntityStore
from plm.services import (
    AttributeCatalog,
    AttributeCompatibilityEngine,
    GarmentLifecycleController,
    MaterialCatalog,
    SupplierWorkflowTracker,
)


def get_database(request: Request) -> Database:
    """Database handle stored on ``app.state`` at startup."""
    return request.app.state.db


def get_store(db: Annotated[Database, Depends(get_database)]) -> EntityStore:
    return EntityStore(db)


Store = Annotated[EntityStore, Depends(get_store)]


def get_garment_controller(store: Store) -> GarmentLifecycleController:
    return GarmentLifecycleController(store)


def get_compatibility_engine(store: Store) -> AttributeCompatibilityEngine:
    return AttributeCompatibilityEngine(store)


def get_material_catalog(store: Store) -> MaterialCatalog:
    return MaterialCatalog(store)


def get_attribute_catalog(store: Store) -> AttributeCatalog:
    return AttributeCatalog(store)


def get_supplier_tracker(store: Store) -> SupplierWorkflowTracker:
    return SupplierWorkflowTracker(store, default_currency=settings.default_currency)


# Type aliases for cleaner annotations
DB = Annotated[Database, Depends(get_database)]
Garments = Annotated[GarmentLifecycleController, Depends(get_garment_controller)]
Compatibility = Annotated[AttributeCompatibilityEngine, Depends(get_compatibility_engine)]
Materials = Annotated[MaterialCatalog, Depends(get_material_catalog)]
Attributes = Annotated[AttributeCatalog, Depends(get_attribute_catalog)]
Suppliers = Annotated[SupplierWorkflowTracker, Depends(get_supplier_tracker)]
