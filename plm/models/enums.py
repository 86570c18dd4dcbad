"""Status vocabularies shared by models, services and schemas."""

from enum import Enum


class LifecycleState(str, Enum):
    """Maturity of a garment design."""

    CONCEPT = "CONCEPT"
    DESIGN = "DESIGN"
    SAMPLE = "SAMPLE"
    APPROVED = "APPROVED"
    MASS_PRODUCTION = "MASS_PRODUCTION"

    @property
    def requires_full_composition(self) -> bool:
        """States that can only be entered with materials totalling 100%."""
        return self in (LifecycleState.APPROVED, LifecycleState.MASS_PRODUCTION)


class SupplierStatus(str, Enum):
    """Engagement status of a supplier for one garment."""

    OFFERED = "OFFERED"
    SAMPLING = "SAMPLING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    IN_STORE = "IN_STORE"


class SampleStatus(str, Enum):
    """Progress of a requested sample set."""

    REQUESTED = "REQUESTED"
    RECEIVED = "RECEIVED"
    PASSED = "PASSED"
    FAILED = "FAILED"

    @property
    def marks_receipt(self) -> bool:
        """Moving to this status stamps the received timestamp."""
        return self is not SampleStatus.REQUESTED
