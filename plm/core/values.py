"""Value objects validated before anything reaches the store."""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import ClassVar

from plm.core.errors import ValidationError

_WHITESPACE = re.compile(r"\s+")

HUNDRED = Decimal("100")
PERCENT_QUANTUM = Decimal("0.01")


@dataclass(frozen=True)
class AttributeName:
    """Sanitized attribute name.

    Trimmed, inner whitespace collapsed, 1-100 characters, none of the
    characters ``< > & " '``.
    """

    MIN_LENGTH: ClassVar[int] = 1
    MAX_LENGTH: ClassVar[int] = 100
    FORBIDDEN_CHARACTERS: ClassVar[tuple[str, ...]] = ("<", ">", "&", '"', "'")

    value: str

    @classmethod
    def create(cls, raw: str | None) -> "AttributeName":
        if raw is None or len(raw.strip()) < cls.MIN_LENGTH:
            raise ValidationError("Attribute name cannot be empty", field="name")

        sanitized = _WHITESPACE.sub(" ", raw.strip())
        if len(sanitized) > cls.MAX_LENGTH:
            raise ValidationError(
                f"Attribute name cannot exceed {cls.MAX_LENGTH} characters",
                field="name",
            )

        found = [c for c in cls.FORBIDDEN_CHARACTERS if c in sanitized]
        if found:
            raise ValidationError(
                "Attribute name contains forbidden characters: "
                + ", ".join(cls.FORBIDDEN_CHARACTERS),
                field="name",
                forbidden=found,
            )
        return cls(sanitized)

    def equals(self, other: "AttributeName") -> bool:
        """Case-insensitive comparison."""
        return self.value.lower() == other.value.lower()

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class MaterialName:
    """Trimmed material name, 1-100 characters."""

    MAX_LENGTH: ClassVar[int] = 100

    value: str

    @classmethod
    def create(cls, raw: str | None) -> "MaterialName":
        trimmed = (raw or "").strip()
        if not trimmed:
            raise ValidationError("Material name cannot be empty", field="name")
        if len(trimmed) > cls.MAX_LENGTH:
            raise ValidationError(
                f"Material name cannot exceed {cls.MAX_LENGTH} characters",
                field="name",
            )
        return cls(trimmed)

    def __str__(self) -> str:
        return self.value


class Percentage:
    """Fixed-point material share: ``0 < p <= 100`` with at most two decimals."""

    @staticmethod
    def parse(raw: Decimal | int | float | str) -> Decimal:
        """Convert input to an exact two-decimal ``Decimal``.

        Floats go through ``str`` so ``60.1`` becomes ``Decimal("60.1")``
        rather than its binary expansion.

        Raises:
            ValidationError: If not a number, out of range, or too precise
        """
        if isinstance(raw, bool):
            raise ValidationError("Percentage must be a number", field="percentage")
        try:
            value = raw if isinstance(raw, Decimal) else Decimal(str(raw))
        except (InvalidOperation, ValueError):
            raise ValidationError("Percentage must be a number", field="percentage") from None

        if not value.is_finite():
            raise ValidationError("Percentage must be a number", field="percentage")
        if value <= 0 or value > HUNDRED:
            raise ValidationError(
                "Percentage must be greater than 0 and at most 100",
                field="percentage",
                value=str(value),
            )
        quantized = value.quantize(PERCENT_QUANTUM)
        if quantized != value:
            raise ValidationError(
                "Percentage supports at most two decimal places",
                field="percentage",
                value=str(value),
            )
        return quantized
