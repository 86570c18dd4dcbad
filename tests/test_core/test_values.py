"""Tests for validated value objects."""

from decimal import Decimal

import pytest

from plm.core.errors import ErrorKind, ValidationError
from plm.core.values import AttributeName, MaterialName, Percentage


class TestAttributeName:
    """Tests for AttributeName sanitizing and limits."""

    def test_trims_and_collapses_whitespace(self):
        name = AttributeName.create("  water   proof \t finish ")
        assert name.value == "water proof finish"
        assert str(name) == "water proof finish"

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_empty_rejected(self, raw):
        with pytest.raises(ValidationError, match="cannot be empty"):
            AttributeName.create(raw)

    def test_too_long_rejected(self):
        with pytest.raises(ValidationError, match="100"):
            AttributeName.create("x" * 101)

    def test_exactly_max_length_accepted(self):
        assert len(AttributeName.create("x" * 100).value) == 100

    @pytest.mark.parametrize("char", ["<", ">", "&", '"', "'"])
    def test_forbidden_characters_rejected(self, char):
        with pytest.raises(ValidationError) as exc_info:
            AttributeName.create(f"bad{char}name")
        assert exc_info.value.kind is ErrorKind.VALIDATION
        assert exc_info.value.details["forbidden"] == [char]

    def test_equals_is_case_insensitive(self):
        assert AttributeName.create("Waterproof").equals(AttributeName.create("WATERPROOF"))
        assert not AttributeName.create("Waterproof").equals(AttributeName.create("Breathable"))

    def test_immutable(self):
        name = AttributeName.create("Stretch")
        with pytest.raises(AttributeError):
            name.value = "Other"  # type: ignore[misc]


class TestMaterialName:
    def test_trimmed(self):
        assert MaterialName.create("  Cotton ").value == "Cotton"

    def test_empty_rejected(self):
        with pytest.raises(ValidationError):
            MaterialName.create("  ")

    def test_too_long_rejected(self):
        with pytest.raises(ValidationError):
            MaterialName.create("m" * 101)


class TestPercentage:
    """Tests for fixed-point percentage parsing."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (60, Decimal("60.00")),
            ("33.33", Decimal("33.33")),
            (60.1, Decimal("60.10")),
            (Decimal("100"), Decimal("100.00")),
            (0.01, Decimal("0.01")),
        ],
    )
    def test_valid_values(self, raw, expected):
        assert Percentage.parse(raw) == expected

    @pytest.mark.parametrize("raw", [0, -5, "100.01", 150, Decimal("0")])
    def test_out_of_range_rejected(self, raw):
        with pytest.raises(ValidationError, match="greater than 0 and at most 100"):
            Percentage.parse(raw)

    @pytest.mark.parametrize("raw", ["abc", "NaN", "Infinity", True, None])
    def test_not_a_number_rejected(self, raw):
        with pytest.raises(ValidationError, match="must be a number"):
            Percentage.parse(raw)

    def test_more_than_two_decimals_rejected(self):
        with pytest.raises(ValidationError, match="two decimal places"):
            Percentage.parse("33.333")

    def test_float_sum_reaches_exactly_hundred(self):
        parts = [Percentage.parse(v) for v in (33.33, 33.33, 33.34)]
        assert sum(parts) == Decimal("100")
