"""Tests for display formatting."""
import pytest

from tourney_bank.utils.formatting import (
    format_currency,
    format_percent,
    format_signed_currency,
    ordinal_suffix,
)


class TestCurrency:
    """Test money formatting."""

    def test_format_currency(self):
        assert format_currency(1234.5) == "$1,234.50"
        assert format_currency(0) == "$0.00"
        assert format_currency(-3) == "-$3.00"

    def test_signed(self):
        assert format_signed_currency(12.5) == "+$12.50"
        assert format_signed_currency(0) == "+$0.00"
        assert format_signed_currency(-3) == "-$3.00"


class TestPercent:
    """Test percentage formatting."""

    @pytest.mark.parametrize("value,expected", [
        (50.0, "50%"),
        (33.3333, "33.33%"),
        (12.5, "12.5%"),
        (0.0, "0%"),
        (100.0, "100%"),
    ])
    def test_format_percent(self, value, expected):
        assert format_percent(value) == expected


class TestOrdinalSuffix:
    """Test placement suffixes."""

    @pytest.mark.parametrize("position,suffix", [
        (1, "st"), (2, "nd"), (3, "rd"), (4, "th"),
        (11, "th"), (12, "th"), (13, "th"),
        (21, "st"), (22, "nd"), (101, "st"), (111, "th"),
    ])
    def test_suffix(self, position, suffix):
        assert ordinal_suffix(position) == suffix
