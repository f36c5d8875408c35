"""Tests for amount parsing and formatting (sales_kernel/domain/values.py)."""

from decimal import Decimal

import pytest

from sales_kernel.domain.values import (
    format_amount,
    leading_amount,
    parse_amount,
    parse_strict_amount,
    quantize_amount,
)


class TestParseAmount:
    """Lenient parse: leading number or zero, never raises."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("1000", Decimal("1000")),
            ("  250.5 ", Decimal("250.5")),
            ("300abc", Decimal("300")),
            ("12.5.7", Decimal("12.5")),
            ("-40", Decimal("-40")),
            (".75", Decimal(".75")),
            (1200, Decimal("1200")),
            (99.5, Decimal("99.5")),
            (Decimal("7.25"), Decimal("7.25")),
        ],
    )
    def test_numeric_prefix(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "abc", None, "NaN", "$100", True])
    def test_non_numeric_is_zero(self, raw):
        assert parse_amount(raw) == 0

    def test_infinite_decimal_is_zero(self):
        assert parse_amount(Decimal("Infinity")) == 0


class TestParseStrictAmount:
    """Strict parse used by validation."""

    def test_accepts_plain_number(self):
        assert parse_strict_amount(" 150.25 ") == Decimal("150.25")

    @pytest.mark.parametrize("raw", [None, "", "  ", "12abc", "abc", "Infinity", "NaN"])
    def test_rejects_blank_and_malformed(self, raw):
        with pytest.raises(ValueError):
            parse_strict_amount(raw)

    @pytest.mark.parametrize("raw", ["1e30", "1E+3", "2e-1", "0x10", "1_000"])
    def test_rejects_non_decimal_notation(self, raw):
        with pytest.raises(ValueError):
            parse_strict_amount(raw)

    def test_rejects_amount_too_large_to_quantize(self):
        with pytest.raises(ValueError, match="too large"):
            parse_strict_amount("1" + "0" * 29)

    def test_accepted_amounts_quantize(self):
        largest = parse_strict_amount("999999999999999.99")
        assert quantize_amount(largest + largest) == Decimal("1999999999999999.98")


class TestLeadingAmount:
    """Leading-number read that reports absence instead of zero."""

    def test_reads_leading_number(self):
        assert leading_amount("1000 USD") == Decimal("1000")

    @pytest.mark.parametrize("raw", [None, "", "tbd", "$5", Decimal("NaN")])
    def test_none_without_leading_number(self, raw):
        assert leading_amount(raw) is None


class TestFormatting:

    def test_quantize_rounds_half_up(self):
        assert quantize_amount(Decimal("1.005")) == Decimal("1.01")
        assert quantize_amount(Decimal("2.344")) == Decimal("2.34")

    def test_format_two_places(self):
        assert format_amount(Decimal("700")) == "700.00"
        assert format_amount(Decimal("0")) == "0.00"
        assert format_amount(Decimal("33.333")) == "33.33"
