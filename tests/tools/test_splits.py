"""Tests for category split arithmetic."""

from decimal import Decimal

import pytest

from tools.splits import primary_split, secondary_percent, secondary_split, split_price


class TestSplitPrice:
    """Tests for split_price and secondary_percent."""

    def test_full_match(self):
        """Test that a 100% match attributes the whole price."""
        assert split_price(Decimal("20000"), 100) == Decimal("20000")

    def test_partial_match(self):
        """Test a 70% share of the price."""
        assert split_price(Decimal("1000"), 70) == Decimal("700")

    def test_no_rounding(self):
        """Test that fractional shares are kept exactly."""
        assert split_price(Decimal("999"), 33) == Decimal("329.67")

    def test_secondary_percent(self):
        """Test that the secondary share is the remainder to 100."""
        assert secondary_percent(70) == 30
        assert secondary_percent(100) == 0
        assert secondary_percent(0) == 100

    @pytest.mark.parametrize("price", ["0", "1", "999", "12345.67", "500000"])
    @pytest.mark.parametrize("match", [0, 1, 33, 50, 70, 99, 100])
    def test_shares_add_up_to_price(self, price, match):
        """Test that primary and secondary shares always sum to the price."""
        full_price = Decimal(price)
        primary = split_price(full_price, match)
        secondary = split_price(full_price, secondary_percent(match))

        assert primary + secondary == pytest.approx(full_price)


class TestExpenseSplits:
    """Tests for primary_split and secondary_split."""

    def test_split_with_secondary(self, make_expense):
        """Test both shares of a split expense."""
        expense = make_expense(
            full_price="1000", match=70, secondary="Impulse/Comfort"
        )

        assert primary_split(expense) == Decimal("700")
        assert secondary_split(expense) == Decimal("300")

    def test_secondary_split_without_secondary(self, make_expense):
        """Test that the secondary share is zero when no secondary is set."""
        expense = make_expense(full_price="1000", match=70)

        assert primary_split(expense) == Decimal("700")
        assert secondary_split(expense) == Decimal("0")

    def test_secondary_follows_match_edits(self, make_expense):
        """Test that changing the match changes the secondary share."""
        expense = make_expense(full_price="1000", match=70, secondary="Planned Social")
        expense.category_match = 40

        assert expense.secondary_percentage == 60
        assert secondary_split(expense) == Decimal("600")
