"""Tests for the balance mutator and statement reconstruction."""

import random
from datetime import date, datetime, timedelta

import pytest

from conftest import make_transaction
from ledger_engine.ledger import (
    apply_all,
    apply_transaction,
    detect_drift,
    for_display,
    reconstruct,
    reconstructed_balance,
    repair_balance,
    sort_chronologically,
    statement_totals,
)
from ledger_engine.models.ledger import Account, Direction


def random_entries(account_id: str, seed: int, count: int = 200):
    rng = random.Random(seed)
    base = datetime(2024, 1, 1)
    return [
        make_transaction(
            account_id,
            rng.randint(1, 10_000_000),
            direction=rng.choice(list(Direction)),
            # Few distinct timestamps, so ties are common
            timestamp=base + timedelta(days=rng.randint(0, 20)),
            sequence=i + 1,
        )
        for i in range(count)
    ]


class TestBalanceMutator:
    """Tests for apply_transaction() and friends."""

    def test_debit_raises_credit_lowers(self):
        """Test the single-sided sign convention."""
        account = Account(name="Ahmad")
        after_debit = apply_transaction(account, make_transaction(account.id, 500))
        after_credit = apply_transaction(
            after_debit, make_transaction(account.id, 200, Direction.CREDIT)
        )
        assert after_debit.balance == 500
        assert after_credit.balance == 300

    def test_input_account_untouched(self):
        """Test that a new account snapshot is returned."""
        account = Account(name="Ahmad")
        updated = apply_transaction(account, make_transaction(account.id, 500))
        assert account.balance == 0
        assert updated is not account
        assert updated.id == account.id

    def test_records_last_transaction_time(self):
        """Test that the entry timestamp is kept for recency sorting."""
        account = Account(name="Ahmad")
        ts = datetime(2024, 5, 1, 9, 15)
        updated = apply_transaction(account, make_transaction(account.id, 1, timestamp=ts))
        assert updated.last_transaction_at == ts

    def test_wrong_account_is_programming_error(self):
        """Test that a mismatched entry raises."""
        account = Account(name="Ahmad")
        with pytest.raises(ValueError):
            apply_transaction(account, make_transaction("someone-else", 1))

    def test_repair_from_entries(self):
        """Test that repair replaces a drifted balance."""
        account = Account(name="Ahmad", balance=999)
        entries = [
            make_transaction(account.id, 500, timestamp=datetime(2024, 1, 1)),
            make_transaction(account.id, 200, Direction.CREDIT, timestamp=datetime(2024, 1, 2)),
        ]
        repaired = repair_balance(account, entries)
        assert repaired.balance == 300
        assert repaired.last_transaction_at == datetime(2024, 1, 2)

    def test_repair_without_entries(self):
        """Test that an account with no entries repairs to zero."""
        account = Account(name="Ahmad", balance=50, last_transaction_at=datetime(2024, 1, 1))
        repaired = repair_balance(account, [])
        assert repaired.balance == 0
        assert repaired.last_transaction_at is None


class TestStatementReconstruction:
    """Tests for reconstruct() and the display helpers."""

    def test_rent_and_refund(self):
        """Test debit 500 then credit 200 gives 500, 300."""
        account = Account(name="Ahmad")
        rent = make_transaction(account.id, 500, timestamp=datetime(2024, 3, 1))
        refund = make_transaction(
            account.id, 200, Direction.CREDIT, timestamp=datetime(2024, 3, 2)
        )

        account = apply_all(account, [rent, refund])
        lines = reconstruct(account.id, [refund, rent])

        assert account.balance == 300
        assert [(l.transaction.id, l.running_balance) for l in lines] == [
            (rent.id, 500),
            (refund.id, 300),
        ]
        assert [l.index for l in lines] == [1, 2]

    def test_only_own_entries(self):
        """Test that other accounts' entries are ignored."""
        entries = [make_transaction("a", 100), make_transaction("b", 7)]
        assert reconstructed_balance("a", entries) == 100
        assert reconstructed_balance("c", entries) == 0
        assert reconstruct("c", entries) == []

    def test_tie_break_by_sequence_then_input_order(self):
        """Test the ordering contract for equal timestamps."""
        ts = datetime(2024, 3, 1, 10, 0)
        later_seq = make_transaction("a", 1, timestamp=ts, sequence=5)
        earlier_seq = make_transaction("a", 2, timestamp=ts, sequence=3)
        first_unsequenced = make_transaction("a", 3, timestamp=ts)
        second_unsequenced = make_transaction("a", 4, timestamp=ts)

        ordered = sort_chronologically(
            [later_seq, first_unsequenced, earlier_seq, second_unsequenced]
        )
        assert [t.amount for t in ordered] == [3, 4, 2, 1]

    @pytest.mark.parametrize("seed", [1, 7, 42, 2024])
    def test_stored_balance_matches_reconstruction(self, seed):
        """Test that mutator and reconstruction agree on random sequences."""
        account = Account(name="Random")
        entries = random_entries(account.id, seed)

        account = apply_all(account, sort_chronologically(entries))

        assert account.balance == reconstructed_balance(account.id, entries)
        assert detect_drift(account, entries) is None

    @pytest.mark.parametrize("seed", [3, 11, 99])
    def test_application_order_does_not_matter(self, seed):
        """Test that the final balance is the same in any order."""
        account = Account(name="Random")
        entries = random_entries(account.id, seed)
        shuffled = list(entries)
        random.Random(seed + 1).shuffle(shuffled)

        assert apply_all(account, entries).balance == apply_all(account, shuffled).balance

    @pytest.mark.parametrize("seed", [5, 13])
    def test_reconstruction_ignores_input_order(self, seed):
        """Test that shuffling the input never changes the statement."""
        entries = random_entries("acc", seed)
        shuffled = list(entries)
        random.Random(seed).shuffle(shuffled)

        expected = [(l.transaction.id, l.running_balance) for l in reconstruct("acc", entries)]
        actual = [(l.transaction.id, l.running_balance) for l in reconstruct("acc", shuffled)]
        assert actual == expected

    def test_large_sequences_stay_exact(self):
        """Test that integer money accumulates without drift."""
        entries = [
            make_transaction("acc", 1, timestamp=datetime(2024, 1, 1), sequence=i)
            for i in range(1, 10_001)
        ]
        assert reconstructed_balance("acc", entries) == 10_000


class TestStatementDisplay:
    """Tests for for_display() and statement_totals()."""

    def _lines(self):
        entries = [
            make_transaction("a", 100, timestamp=datetime(2024, 1, 10, 9, 0), sequence=1),
            make_transaction("a", 40, Direction.CREDIT, timestamp=datetime(2024, 2, 5), sequence=2),
            make_transaction("a", 10, timestamp=datetime(2024, 2, 29, 23, 59, 59), sequence=3),
            make_transaction("a", 5, timestamp=datetime(2024, 3, 1), sequence=4),
        ]
        return reconstruct("a", entries)

    def test_most_recent_first(self):
        """Test display order with running balances preserved."""
        shown = for_display(self._lines())
        assert [l.index for l in shown] == [4, 3, 2, 1]
        assert [l.running_balance for l in shown] == [75, 70, 60, 100]

    def test_window_covers_whole_end_day(self):
        """Test that the end date includes entries up to midnight."""
        shown = for_display(self._lines(), date(2024, 2, 1), date(2024, 2, 29))
        assert [l.index for l in shown] == [3, 2]
        # Running balances still come from the full fold
        assert [l.running_balance for l in shown] == [70, 60]

    def test_datetime_start_kept_as_given(self):
        """Test that a datetime start cuts inside its day, like period_bounds()."""
        shown = for_display(self._lines(), datetime(2024, 1, 10, 12, 0), date(2024, 3, 1))
        assert [l.index for l in shown] == [4, 3, 2]

        same_day = for_display(self._lines(), datetime(2024, 1, 10, 8, 0), date(2024, 1, 10))
        assert [l.index for l in same_day] == [1]

    def test_equal_timestamps_newest_first(self):
        """Test that ties are shown in reverse fold order."""
        ts = datetime(2024, 1, 1, 8, 0)
        lines = reconstruct("a", [
            make_transaction("a", 1, timestamp=ts, sequence=1),
            make_transaction("a", 2, timestamp=ts, sequence=2),
        ])
        assert [l.transaction.amount for l in for_display(lines)] == [2, 1]

    def test_totals(self):
        """Test debit and credit totals of a statement."""
        assert statement_totals(self._lines()) == (115, 40)


class TestDriftDetection:
    """Tests for detect_drift()."""

    def test_drift_reported(self):
        """Test that a tampered balance is flagged."""
        account = Account(name="Ahmad", balance=300)
        entries = [make_transaction(account.id, 250)]
        drift = detect_drift(account, entries)
        assert drift is not None
        assert drift.stored_balance == 300
        assert drift.reconstructed_balance == 250

    def test_no_drift_when_consistent(self):
        """Test that a consistent account reports nothing."""
        account = Account(name="Ahmad", balance=250)
        assert detect_drift(account, [make_transaction(account.id, 250)]) is None
