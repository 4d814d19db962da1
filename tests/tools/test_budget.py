"""Tests for budget aggregation tools."""

from datetime import date
from decimal import Decimal

import pytest

from models.category import CATEGORIES
from models.ledger import Ledger
from models.salary_period import SalaryPeriod
from models.settings import ReportFilter, UserSettings
from tools.budget import (
    SpendBasis,
    category_items,
    category_total,
    category_totals,
    effective_monthly_budget,
    monthly_total,
    recurring_total,
    remaining_after_recurring,
    remaining_budget,
    summarize,
)


def _ledger(expenses=(), unsorted=(), periods=(), budget="500000", report_filter=None):
    return Ledger(
        owner_id="user-1",
        settings=UserSettings(
            owner_id="user-1",
            monthly_budget=Decimal(budget),
            report_filter=report_filter or ReportFilter(),
        ),
        expenses=list(expenses),
        unsorted=list(unsorted),
        periods=list(periods),
    )


class TestCategoryTotals:
    """Tests for category_items, category_total and category_totals."""

    def test_primary_and_secondary_shares(self, make_expense):
        """Test that each category gets its share of a split expense."""
        expenses = [
            make_expense(full_price="1000", primary="Essential Maintenance"),
            make_expense(
                full_price="2000",
                primary="Planned Social",
                match=70,
                secondary="Essential Maintenance",
            ),
        ]

        assert category_total(expenses, "Essential Maintenance") == Decimal("1600")
        assert category_total(expenses, "Planned Social") == Decimal("1400")
        assert category_total(expenses, "Impulse/Comfort") == Decimal("0")

    def test_items_include_secondary_matches(self, make_expense):
        """Test that category_items matches primary or secondary category."""
        primary = make_expense(primary="Impulse/Comfort")
        secondary = make_expense(
            primary="Planned Social", match=60, secondary="Impulse/Comfort"
        )
        other = make_expense(primary="Growth / Investment")

        assert category_items([primary, secondary, other], "Impulse/Comfort") == [
            primary,
            secondary,
        ]

    def test_totals_cover_every_category(self, make_expense):
        """Test that category_totals has an entry for each category."""
        totals = category_totals([make_expense(full_price="500")])

        assert list(totals) == list(CATEGORIES)
        assert totals["Essential Maintenance"] == Decimal("500")

    def test_unsplit_totals_match_monthly_total(self, make_expense):
        """Test that category totals of unsplit expenses sum to the monthly total."""
        expenses = [
            make_expense(full_price="1200", primary="Essential Maintenance"),
            make_expense(full_price="800", primary="Growth / Investment", match=80),
            make_expense(full_price="455.50", primary="Planned Social"),
            make_expense(full_price="99.99", primary="Impulse/Comfort"),
        ]
        full_matches = [e for e in expenses if e.category_match == 100]

        total = sum(category_totals(full_matches).values(), Decimal("0"))

        assert total == monthly_total(full_matches)


class TestMonthlyTotal:
    """Tests for monthly_total and recurring_total."""

    def test_counts_unsorted_by_default(self, make_expense):
        """Test that unsorted expenses count toward the total."""
        sorted_expenses = [make_expense(full_price="10000")]
        unsorted = [make_expense(full_price="2500", primary="")]

        assert monthly_total(sorted_expenses, unsorted) == Decimal("12500")

    def test_sorted_basis_ignores_unsorted(self, make_expense):
        """Test that the sorted basis counts categorised expenses only."""
        sorted_expenses = [make_expense(full_price="10000")]
        unsorted = [make_expense(full_price="2500", primary="")]

        total = monthly_total(sorted_expenses, unsorted, SpendBasis.SORTED)

        assert total == Decimal("10000")

    def test_spend_basis_accepts_config_string(self, make_expense):
        """Test that the config value can be passed as a plain string."""
        unsorted = [make_expense(full_price="2500", primary="")]

        assert monthly_total([], unsorted, "sorted") == Decimal("0")

    def test_recurring_total(self, make_expense):
        """Test that only recurring expenses are summed."""
        expenses = [
            make_expense(full_price="20000", recurring=True),
            make_expense(full_price="10000"),
        ]

        assert recurring_total(expenses) == Decimal("20000")

    def test_empty(self):
        """Test totals of empty lists."""
        assert monthly_total([]) == Decimal("0")
        assert recurring_total([]) == Decimal("0")


class TestBudgetArithmetic:
    """Tests for remaining budget calculations."""

    def test_dashboard_scenario(self, make_expense):
        """Test the dashboard numbers for one recurring and one regular expense."""
        expenses = [
            make_expense(full_price="20000", recurring=True),
            make_expense(full_price="10000"),
        ]
        budget = Decimal("500000")

        spent = monthly_total(expenses)
        recurring = recurring_total(expenses)

        assert spent == Decimal("30000")
        assert recurring == Decimal("20000")
        assert remaining_budget(budget, spent) == Decimal("470000")
        assert remaining_after_recurring(budget, spent, recurring) == Decimal("450000")

    def test_over_budget_goes_negative(self):
        """Test that overspending gives a negative remainder."""
        assert remaining_budget(Decimal("1000"), Decimal("1500")) == Decimal("-500")


class TestEffectiveMonthlyBudget:
    """Tests for effective_monthly_budget function."""

    def test_default_without_period(self):
        """Test that the month view uses the default budget."""
        budget = effective_monthly_budget(Decimal("500000"), ReportFilter(), [])

        assert budget == Decimal("500000")

    def test_period_override(self):
        """Test that a selected period's budget wins."""
        period = SalaryPeriod(
            id="p1",
            owner_id="user-1",
            name="P1",
            start_date=date(2024, 1, 1),
            monthly_budget=Decimal("420000"),
        )

        budget = effective_monthly_budget(
            Decimal("500000"), ReportFilter.for_period("p1"), [period]
        )

        assert budget == Decimal("420000")

    def test_period_without_budget_uses_default(self):
        """Test that a period with no override falls back to the default."""
        period = SalaryPeriod(
            id="p1", owner_id="user-1", name="P1", start_date=date(2024, 1, 1)
        )

        budget = effective_monthly_budget(
            Decimal("500000"), ReportFilter.for_period("p1"), [period]
        )

        assert budget == Decimal("500000")

    def test_unknown_period_uses_default(self):
        """Test that a missing period falls back to the default."""
        budget = effective_monthly_budget(
            Decimal("500000"), ReportFilter.for_period("gone"), []
        )

        assert budget == Decimal("500000")


class TestSummarize:
    """Tests for summarize function."""

    def test_summary_scenario(self, make_expense):
        """Test the summary of the dashboard scenario."""
        ledger = _ledger(
            expenses=[
                make_expense(full_price="20000", recurring=True),
                make_expense(full_price="10000", primary="Planned Social"),
            ]
        )

        summary = summarize(ledger)

        assert summary.budget == Decimal("500000")
        assert summary.monthly_total == Decimal("30000")
        assert summary.recurring_total == Decimal("20000")
        assert summary.remaining_budget == Decimal("470000")
        assert summary.remaining_after_recurring == Decimal("450000")
        assert summary.category_totals["Essential Maintenance"] == Decimal("20000")
        assert summary.category_totals["Planned Social"] == Decimal("10000")
        assert summary.expense_count == 2
        assert summary.unsorted_count == 0

    def test_recurring_ignores_filter(self, make_expense):
        """Test that recurring totals use all expenses, not the filtered ones."""
        ledger = _ledger(
            expenses=[
                make_expense(full_price="20000", recurring=True, day=date(2023, 12, 1)),
                make_expense(full_price="10000", day=date(2024, 1, 10)),
            ],
            report_filter=ReportFilter.for_month(2024, 1),
        )

        summary = summarize(ledger)

        assert summary.monthly_total == Decimal("10000")
        assert summary.recurring_total == Decimal("20000")
        assert summary.remaining_after_recurring == Decimal("470000")

    def test_period_filter_and_budget(self, make_expense):
        """Test that a selected period narrows the expenses and sets the budget."""
        periods = [
            SalaryPeriod(
                id="p1",
                owner_id="user-1",
                name="P1",
                start_date=date(2024, 1, 1),
                end_date=date(2024, 1, 31),
            ),
            SalaryPeriod(
                id="p2",
                owner_id="user-1",
                name="P2",
                start_date=date(2024, 2, 1),
                monthly_budget=Decimal("300000"),
            ),
        ]
        ledger = _ledger(
            expenses=[
                make_expense(full_price="5000", day=date(2024, 1, 20)),
                make_expense(full_price="7000", day=date(2024, 2, 15)),
            ],
            unsorted=[make_expense(full_price="1000", primary="", day=date(2024, 2, 16))],
            periods=periods,
            report_filter=ReportFilter.for_period("p2"),
        )

        summary = summarize(ledger, today=date(2024, 2, 20))

        assert summary.budget == Decimal("300000")
        assert summary.monthly_total == Decimal("8000")
        assert summary.expense_count == 1
        assert summary.unsorted_count == 1

    @pytest.mark.parametrize(
        "basis, expected", [(SpendBasis.ALL, "11000"), (SpendBasis.SORTED, "10000")]
    )
    def test_spend_basis(self, make_expense, basis, expected):
        """Test that the spend basis decides whether unsorted counts."""
        ledger = _ledger(
            expenses=[make_expense(full_price="10000")],
            unsorted=[make_expense(full_price="1000", primary="")],
        )

        assert summarize(ledger, basis).monthly_total == Decimal(expected)

    def test_explicit_filter_overrides_saved(self, make_expense):
        """Test that a passed filter is used instead of the saved one."""
        ledger = _ledger(
            expenses=[
                make_expense(full_price="100", day=date(2024, 1, 1)),
                make_expense(full_price="200", day=date(2024, 2, 1)),
            ],
            report_filter=ReportFilter.for_month(2024, 1),
        )

        summary = summarize(ledger, report_filter=ReportFilter.for_month(2024, 2))

        assert summary.monthly_total == Decimal("200")
