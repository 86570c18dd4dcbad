"""Core module - error taxonomy and value objects."""

from plm.core.errors import (
    AlreadyExistsError,
    CompositionExceededError,
    CompositionIncompleteError,
    DeletionBlockedError,
    DomainRuleError,
    ErrorKind,
    IncompatibleAttributesError,
    InUseError,
    NotFoundError,
    PLMError,
    SelfIncompatibilityError,
    ValidationError,
)
from plm.core.values import AttributeName, MaterialName, Percentage

__all__ = [
    "AlreadyExistsError",
    "AttributeName",
    "CompositionExceededError",
    "CompositionIncompleteError",
    "DeletionBlockedError",
    "DomainRuleError",
    "ErrorKind",
    "IncompatibleAttributesError",
    "InUseError",
    "MaterialName",
    "NotFoundError",
    "PLMError",
    "Percentage",
    "SelfIncompatibilityError",
    "ValidationError",
]
