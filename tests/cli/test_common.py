"""Tests for CLI argument helpers."""

import argparse
from decimal import Decimal
from types import SimpleNamespace

import pytest

from cli.carts import parse_item
from cli.common import describe_split, format_currency, parse_month, resolve_filter
from models.settings import ReportFilter


class TestParsers:
    """Tests for argparse type helpers."""

    def test_format_currency(self):
        """Test whole-forint formatting with space separators."""
        assert format_currency(Decimal("1234567.6")) == "1 234 568 Ft"
        assert format_currency(Decimal("0")) == "0 Ft"

    def test_parse_month(self):
        """Test parsing a YYYY-MM month."""
        assert parse_month("2024-02") == ReportFilter.for_month(2024, 2)

    @pytest.mark.parametrize("value", ["2024", "2024-13", "feb"])
    def test_parse_month_invalid(self, value):
        """Test that malformed months are rejected."""
        with pytest.raises(argparse.ArgumentTypeError):
            parse_month(value)

    def test_parse_item(self):
        """Test parsing NAME:PRICE, splitting on the last colon."""
        assert parse_item("Cable 2:1 adapter:1990") == {
            "name": "Cable 2:1 adapter",
            "price": "1990",
        }

    def test_parse_item_invalid(self):
        """Test that items without a price are rejected."""
        with pytest.raises(argparse.ArgumentTypeError):
            parse_item("milk")


class TestResolveFilter:
    """Tests for resolve_filter function."""

    def test_saved_filter_by_default(self, ledger):
        """Test that without options the saved filter is used."""
        ledger.settings.report_filter = ReportFilter.for_month(2024, 1)
        args = SimpleNamespace(all=False, month=None, period=None)

        assert resolve_filter(args, ledger) == ReportFilter.for_month(2024, 1)

    def test_overrides(self, ledger):
        """Test the --all, --month and --period overrides."""
        ledger.settings.report_filter = ReportFilter.for_month(2024, 1)

        assert resolve_filter(
            SimpleNamespace(all=True, month=None, period=None), ledger
        ) == ReportFilter()
        assert resolve_filter(
            SimpleNamespace(all=False, month=ReportFilter.for_month(2024, 5), period=None),
            ledger,
        ) == ReportFilter.for_month(2024, 5)
        assert resolve_filter(
            SimpleNamespace(all=False, month=None, period="p1"), ledger
        ) == ReportFilter.for_period("p1")


class TestDescribeSplit:
    """Tests for describe_split function."""

    def test_variants(self, make_expense):
        """Test unsorted, full, partial and split descriptions."""
        assert describe_split(make_expense(primary="")) == "unsorted"
        assert describe_split(make_expense()) == "Essential Maintenance"
        assert describe_split(make_expense(match=80)) == "Essential Maintenance 80%"
        assert (
            describe_split(make_expense(match=70, secondary="Planned Social"))
            == "Essential Maintenance 70% / Planned Social 30%"
        )
