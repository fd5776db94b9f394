"""Ledger collaborators: the registry's custody of funds.

The registry never holds money itself. Payments are received into the
ledger's custody, rent is forwarded to owners, deposits go back to tenants,
and the admin may sweep the whole balance. A ledger must apply each call
atomically: either the debit and credit both happen or neither does.

Any Ledger implementation can be plugged into the Registry. Only
``InMemoryLedger`` ships here.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Protocol, runtime_checkable

from rental_registry.errors import TransferFailedError

logger = logging.getLogger(__name__)


@runtime_checkable
class Ledger(Protocol):
    """Transfer capability the registry depends on."""

    def balance(self) -> int:
        """Funds currently in the registry's custody."""
        ...

    def receive(self, sender: str, amount: int) -> None:
        """Take a payment from ``sender`` into custody."""
        ...

    def revert_receipt(self, sender: str, amount: int) -> None:
        """Undo a ``receive`` whose operation rolled back, returning the payment."""
        ...

    def transfer(self, recipient: str, amount: int) -> None:
        """Move ``amount`` out of custody to ``recipient``.

        Raises:
            TransferFailedError: If custody is short or the recipient rejects
                the funds. Nothing has moved when this is raised.
        """
        ...


@dataclass(frozen=True)
class LedgerEntry:
    """One movement of funds as seen by the in-memory ledger."""

    kind: str  # "receive", "revert", "transfer"
    party: str
    amount: int


class InMemoryLedger:
    """Ledger holding custody and per-party balances in process memory.

    Recipients can be made to reject transfers, which lets callers exercise
    the registry's rollback paths.

    Usage:
        ledger = InMemoryLedger()
        ledger.receive("tenant_1", 800)
        ledger.transfer("owner_1", 300)
        ledger.balance()  # 500
    """

    def __init__(self, initial_balance: int = 0) -> None:
        if initial_balance < 0:
            raise ValueError("Initial custody balance cannot be negative")
        self._custody = initial_balance
        self._accounts: Dict[str, int] = {}
        self._entries: List[LedgerEntry] = []
        self._rejecting: set[str] = set()
        self._lock = threading.Lock()

    def balance(self) -> int:
        with self._lock:
            return self._custody

    def receive(self, sender: str, amount: int) -> None:
        if amount < 0:
            raise ValueError("Cannot receive a negative amount")
        with self._lock:
            self._custody += amount
            self._accounts[sender] = self._accounts.get(sender, 0) - amount
            self._entries.append(LedgerEntry("receive", sender, amount))

    def revert_receipt(self, sender: str, amount: int) -> None:
        with self._lock:
            if amount > self._custody:
                raise TransferFailedError(
                    f"Cannot revert receipt of {amount} from {sender}: custody holds {self._custody}"
                )
            self._custody -= amount
            self._accounts[sender] = self._accounts.get(sender, 0) + amount
            self._entries.append(LedgerEntry("revert", sender, amount))

    def transfer(self, recipient: str, amount: int) -> None:
        if amount < 0:
            raise ValueError("Cannot transfer a negative amount")
        with self._lock:
            if recipient in self._rejecting:
                raise TransferFailedError(f"Recipient {recipient} rejected transfer of {amount}")
            if amount > self._custody:
                raise TransferFailedError(
                    f"Insufficient custodied balance: {amount} requested, {self._custody} held"
                )
            self._custody -= amount
            self._accounts[recipient] = self._accounts.get(recipient, 0) + amount
            self._entries.append(LedgerEntry("transfer", recipient, amount))
        logger.debug("Transferred %s to %s", amount, recipient)

    def account(self, party: str) -> int:
        """Net amount a party has gained (positive) or paid in (negative)."""
        with self._lock:
            return self._accounts.get(party, 0)

    def entries(self) -> List[LedgerEntry]:
        with self._lock:
            return list(self._entries)

    def reject_transfers_to(self, recipient: str) -> None:
        with self._lock:
            self._rejecting.add(recipient)

    def accept_transfers_to(self, recipient: str) -> None:
        with self._lock:
            self._rejecting.discard(recipient)
