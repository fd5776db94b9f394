"""Transaction wrapper making each registry operation all-or-nothing.

A unit of work owns one database session. Ledger calls made through it are
recorded with a compensating action, and events are held back until the
session commits. On any exception the session is rolled back, the
compensations run newest first, and the buffered events are dropped.

Ledger transfers out of custody cannot be compensated, so services make
them the last fallible step before commit.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from sqlalchemy.orm import Session, sessionmaker

from rental_registry.errors import TransferFailedError
from rental_registry.events import EventDispatcher
from rental_registry.ledger import Ledger
from rental_registry.schemas.events import Event

logger = logging.getLogger(__name__)


class UnitOfWork:
    """Usage:
        with UnitOfWork(session_factory, ledger, dispatcher) as uow:
            uow.receive("tenant_1", 800)
            ...  # uow.db writes
            uow.transfer("owner_1", 300)
            uow.emit(event)
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        ledger: Ledger,
        dispatcher: Optional[EventDispatcher] = None,
    ) -> None:
        self._session_factory = session_factory
        self.ledger = ledger
        self._dispatcher = dispatcher
        self._compensations: List[Callable[[], None]] = []
        self._events: List[Event] = []
        self.db: Session | None = None

    def __enter__(self) -> UnitOfWork:
        self.db = self._session_factory()
        self._compensations = []
        self._events = []
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            if exc_type is None:
                try:
                    self.db.commit()
                except Exception:
                    self._rollback()
                    raise
            else:
                self._rollback()
        finally:
            self.db.close()

        if exc_type is None and self._dispatcher is not None:
            for event in self._events:
                self._dispatcher.publish(event)
        return False

    def receive(self, sender: str, amount: int) -> None:
        """Take a payment into custody, to be returned if the operation fails."""
        self._call_ledger("receive", self.ledger.receive, sender, amount)
        self._compensations.append(lambda: self.ledger.revert_receipt(sender, amount))

    def transfer(self, recipient: str, amount: int) -> None:
        """Move funds out of custody. Must be the last fallible step of an operation."""
        self._call_ledger("transfer", self.ledger.transfer, recipient, amount)

    def emit(self, event: Event) -> None:
        self._events.append(event)

    def _call_ledger(self, action: str, fn: Callable[[str, int], None], party: str, amount: int) -> None:
        try:
            fn(party, amount)
        except TransferFailedError as e:
            logger.error("Ledger %s of %s for %s failed: %s", action, amount, party, e)
            raise
        except Exception as e:
            logger.error("Ledger %s of %s for %s failed: %s", action, amount, party, e)
            raise TransferFailedError(f"Ledger {action} of {amount} for {party} failed: {e}") from e

    def _rollback(self) -> None:
        self.db.rollback()
        while self._compensations:
            compensation = self._compensations.pop()
            try:
                compensation()
            except Exception:
                # The original error is already propagating
                logger.exception("Compensating ledger action failed during rollback")
        self._events = []
