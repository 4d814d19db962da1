"""Tests for the interactive triage command."""

from types import SimpleNamespace

import pytest

from cli.expenses import cmd_triage


@pytest.fixture
def answer(monkeypatch):
    """Feed the given answers to input() one after another."""

    def _answer(*replies):
        remaining = iter(replies)
        monkeypatch.setattr("builtins.input", lambda prompt="": next(remaining))

    return _answer


class TestTriage:
    """Tests for cmd_triage."""

    def test_sorts_unsorted_expense(self, services, ledger, expense_form, answer):
        """Test sorting the only unsorted expense."""
        services.expenses.add(ledger, expense_form(primary_category=""))
        answer("3", "")

        cmd_triage(SimpleNamespace(), services)

        reloaded = services.load_ledger()
        assert reloaded.unsorted == []
        assert reloaded.expenses[0].primary_category == "Planned Social"
        assert reloaded.expenses[0].category_match == 100

    @pytest.mark.parametrize(
        "bad_answers",
        [
            ("1", "abc"),
            ("1", "150"),
            ("1", "80", "1"),
        ],
    )
    def test_invalid_split_asks_again(
        self, services, ledger, expense_form, answer, bad_answers
    ):
        """Test that an invalid split re-prompts instead of exiting."""
        services.expenses.add(ledger, expense_form(primary_category=""))
        answer(*bad_answers, "2", "60", "4")

        cmd_triage(SimpleNamespace(), services)

        expense = services.load_ledger().expenses[0]
        assert expense.primary_category == "Growth / Investment"
        assert expense.category_match == 60
        assert expense.secondary_category == "Impulse/Comfort"

    def test_quit_leaves_expense_unsorted(self, services, ledger, expense_form, answer):
        """Test that 'q' stops without sorting."""
        services.expenses.add(ledger, expense_form(primary_category=""))
        answer("q")

        cmd_triage(SimpleNamespace(), services)

        assert len(services.load_ledger().unsorted) == 1
