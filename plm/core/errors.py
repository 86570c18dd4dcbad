"""Typed failures raised by the PLM core.

Every error carries an ``ErrorKind`` so callers can branch on the kind of
failure without string matching, and a ``details`` mapping with the
offending quantity (current total, conflicting attribute names, ...).

Raising any of these inside ``Database.transaction()`` rolls the
transaction back. Driver and SQLAlchemy errors are never wrapped.
"""

from decimal import Decimal
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    DOMAIN_RULE = "domain_rule"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    IN_USE = "in_use"


class PLMError(Exception):
    """Base class for recoverable PLM failures."""

    kind: ErrorKind = ErrorKind.DOMAIN_RULE

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly view used by the API layer."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            **{key: _jsonable(value) for key, value in self.details.items()},
        }


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    return value


class ValidationError(PLMError):
    """Malformed or out-of-range input, rejected before touching the store."""

    kind = ErrorKind.VALIDATION


class NotFoundError(PLMError):
    """A mutating operation addressed an id that does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, entity_id: Any) -> None:
        super().__init__(f"{entity} {entity_id} not found", entity=entity, id=entity_id)


class AlreadyExistsError(PLMError):
    """A uniquely named record (or unique link) already exists."""

    kind = ErrorKind.ALREADY_EXISTS


class InUseError(PLMError):
    """A record cannot be removed while other records reference it."""

    kind = ErrorKind.IN_USE


class DomainRuleError(PLMError):
    """A business invariant would be violated."""

    kind = ErrorKind.DOMAIN_RULE


class CompositionExceededError(DomainRuleError):
    def __init__(self, current_total: Decimal, requested: Decimal) -> None:
        would_be = current_total + requested
        super().__init__(
            f"Total material percentage would be {would_be}%, exceeding 100% "
            f"(other materials already total {current_total}%)",
            current_total=current_total,
            requested=requested,
            would_be=would_be,
        )


class CompositionIncompleteError(DomainRuleError):
    def __init__(self, current_total: Decimal, target_state: Any) -> None:
        state = getattr(target_state, "value", target_state)
        super().__init__(
            f"Cannot move garment to {state}: materials total {current_total}%, must be exactly 100%",
            current_total=current_total,
            target_state=state,
        )


class IncompatibleAttributesError(DomainRuleError):
    def __init__(self, conflicts: list[tuple[str, str]]) -> None:
        pairs = ", ".join(f"{a} / {b}" for a, b in conflicts)
        super().__init__(
            f"Incompatible attributes: {pairs}",
            conflicts=[list(pair) for pair in conflicts],
        )
        self.conflicts = conflicts


class SelfIncompatibilityError(DomainRuleError):
    def __init__(self, attribute_id: int) -> None:
        super().__init__(
            "An attribute cannot be incompatible with itself",
            attribute_id=attribute_id,
        )


class DeletionBlockedError(DomainRuleError):
    def __init__(self, reason: str, **details: Any) -> None:
        super().__init__(reason, reason=reason, **details)
