"""API routes module."""

from plm.api.routes.attributes import router as attributes_router
from plm.api.routes.garments import router as garments_router
from plm.api.routes.health import router as health_router
from plm.api.routes.materials import router as materials_router
from plm.api.routes.suppliers import router as suppliers_router

__all__ = [
    "attributes_router",
    "garments_router",
    "health_router",
    "materials_router",
    "suppliers_router",
]
