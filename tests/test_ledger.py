import pytest

from rental_registry.clock import Clock, ManualClock, SystemClock
from rental_registry.errors import TransferFailedError
from rental_registry.ledger import InMemoryLedger, Ledger


class TestInMemoryLedger:
    """Tests for InMemoryLedger."""

    def test_satisfies_protocol(self) -> None:
        assert isinstance(InMemoryLedger(), Ledger)

    def test_receive_then_transfer(self) -> None:
        ledger = InMemoryLedger()
        ledger.receive("tenant", 800)
        ledger.transfer("owner", 300)

        assert ledger.balance() == 500
        assert ledger.account("tenant") == -800
        assert ledger.account("owner") == 300

    def test_transfer_more_than_custody(self) -> None:
        """Test an overdraft fails and moves nothing."""
        ledger = InMemoryLedger(initial_balance=100)

        with pytest.raises(TransferFailedError):
            ledger.transfer("owner", 101)

        assert ledger.balance() == 100
        assert ledger.account("owner") == 0
        assert ledger.entries() == []

    def test_rejecting_recipient(self) -> None:
        ledger = InMemoryLedger(initial_balance=100)
        ledger.reject_transfers_to("owner")

        with pytest.raises(TransferFailedError):
            ledger.transfer("owner", 10)

        ledger.accept_transfers_to("owner")
        ledger.transfer("owner", 10)
        assert ledger.account("owner") == 10

    def test_revert_receipt(self) -> None:
        ledger = InMemoryLedger()
        ledger.receive("tenant", 800)
        ledger.revert_receipt("tenant", 800)

        assert ledger.balance() == 0
        assert ledger.account("tenant") == 0

    def test_negative_amounts_rejected(self) -> None:
        ledger = InMemoryLedger()
        with pytest.raises(ValueError):
            ledger.receive("tenant", -1)
        with pytest.raises(ValueError):
            ledger.transfer("owner", -1)
        with pytest.raises(ValueError):
            InMemoryLedger(initial_balance=-1)


class TestClocks:
    """Tests for the clock collaborators."""

    def test_manual_clock(self) -> None:
        clock = ManualClock(10)
        assert isinstance(clock, Clock)
        assert clock.now() == 10
        assert clock.advance(5) == 15
        clock.set(100)
        assert clock.now() == 100

    def test_manual_clock_cannot_go_backwards(self) -> None:
        with pytest.raises(ValueError):
            ManualClock(10).advance(-1)

    def test_system_clock(self) -> None:
        clock = SystemClock()
        assert isinstance(clock, Clock)
        assert clock.now() > 1_600_000_000
