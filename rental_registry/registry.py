"""Public operation set of the rental registry.

The Registry is the only caller-facing surface. It checks caller identity,
serializes every operation behind one lock, samples the clock once per
operation, and runs each mutation in its own unit of work.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

import rental_registry.services.custody as custody_service
import rental_registry.services.property as property_service
import rental_registry.services.rental_agreement as agreement_service
from rental_registry.clock import Clock, SystemClock
from rental_registry.core.config import Settings
from rental_registry.core.config import settings as default_settings
from rental_registry.db.base import create_db_engine, create_session_factory, init_db
from rental_registry.domain import RentalTermPolicy
from rental_registry.errors import DomainError, DomainValidationError
from rental_registry.events import EventDispatcher, EventHandler
from rental_registry.ledger import InMemoryLedger, Ledger
from rental_registry.schemas.property import AvailabilityUpdate, Property, PropertyCreate
from rental_registry.schemas.rental_agreement import RentalAgreement, RentalAgreementCreate
from rental_registry.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class Registry:
    """Rental property registry with escrowed security deposits.

    Usage:
        registry = Registry(admin="admin", ledger=InMemoryLedger(), clock=ManualClock(0))
        property_id = registry.register_property("owner_1", "Loft", "", "Centre", 100, 500)
        agreement_id = registry.create_rental_agreement(
            "tenant_1", property_id, start_date=86400, end_date=4 * 86400, paid_amount=800
        )

    The admin identity is fixed at construction. It may return any deposit
    and may sweep the whole custodied balance with ``recover_funds``; that
    power is not limited by any invariant and must be trusted.
    """

    def __init__(
        self,
        admin: Optional[str] = None,
        ledger: Optional[Ledger] = None,
        clock: Optional[Clock] = None,
        engine: Optional[Engine] = None,
        settings: Optional[Settings] = None,
        dispatcher: Optional[EventDispatcher] = None,
    ) -> None:
        self._settings = settings if settings is not None else default_settings
        self.admin = admin if admin is not None else self._settings.admin_identity
        if not self.admin:
            raise ValueError("Registry admin identity must not be empty")

        self.ledger: Ledger = ledger if ledger is not None else InMemoryLedger()
        self.clock: Clock = clock if clock is not None else SystemClock()
        self.dispatcher = dispatcher if dispatcher is not None else EventDispatcher()
        self.policy = RentalTermPolicy(day_unit=self._settings.seconds_per_day)

        if engine is None:
            engine = create_db_engine(
                self._settings.database_url, echo=self._settings.sql_echo
            )
        # Creates the schema and zeroed id sequences on first use only
        init_db(engine)
        self._engine = engine
        self._session_factory = create_session_factory(engine)
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    def register_property(
        self,
        caller: str,
        title: str,
        description: str,
        location: str,
        price_per_day: int,
        security_deposit: int,
    ) -> int:
        """Register a property owned by the caller. Returns the new property id."""
        data = self._build(
            PropertyCreate,
            title=title,
            description=description,
            location=location,
            price_per_day=price_per_day,
            security_deposit=security_deposit,
        )
        with self._mutation("register_property") as (uow, now):
            db_property = property_service.register_property(uow, caller, data, now)
            return db_property.id

    def update_property_availability(
        self, caller: str, property_id: int, is_available: bool
    ) -> None:
        """Open or close a property for rental. Owner only; idempotent."""
        data = self._build(AvailabilityUpdate, is_available=is_available)
        with self._mutation("update_property_availability") as (uow, now):
            property_service.set_availability(
                uow, caller, property_id, data.is_available, now
            )

    def get_all_properties(self) -> list[int]:
        with self._query() as db:
            return property_service.list_all(db)

    def get_properties_by_owner(self, owner: str) -> list[int]:
        with self._query() as db:
            return property_service.list_by_owner(db, owner)

    def get_property_details(self, property_id: int) -> Property:
        with self._query() as db:
            return Property.model_validate(property_service.get_property(db, property_id))

    # ------------------------------------------------------------------
    # Rental agreements
    # ------------------------------------------------------------------

    def create_rental_agreement(
        self,
        caller: str,
        property_id: int,
        start_date: int,
        end_date: int,
        paid_amount: int,
    ) -> int:
        """Rent a property for the caller against an exact payment.

        The rent portion goes to the owner immediately; the deposit is held
        in custody. Returns the new agreement id.
        """
        data = self._build(
            RentalAgreementCreate,
            property_id=property_id,
            start_date=start_date,
            end_date=end_date,
            paid_amount=paid_amount,
        )
        with self._mutation("create_rental_agreement") as (uow, now):
            db_agreement = agreement_service.create_agreement(
                uow, caller, data, now, self.policy
            )
            return db_agreement.id

    def return_security_deposit(self, caller: str, agreement_id: int) -> None:
        """Pay an ended agreement's deposit back to its tenant. Owner or admin only."""
        with self._mutation("return_security_deposit") as (uow, now):
            agreement_service.return_security_deposit(
                uow, caller, agreement_id, now, self.admin, self.policy
            )

    def get_rentals_by_tenant(self, tenant: str) -> list[int]:
        with self._query() as db:
            return agreement_service.list_by_tenant(db, tenant)

    def get_rental_agreement_details(self, agreement_id: int) -> RentalAgreement:
        with self._query() as db:
            return RentalAgreement.model_validate(
                agreement_service.get_agreement(db, agreement_id)
            )

    # ------------------------------------------------------------------
    # Custody
    # ------------------------------------------------------------------

    def recover_funds(self, caller: str) -> int:
        """Transfer the entire custodied balance to the admin. Admin only.

        Returns the amount recovered.
        """
        with self._mutation("recover_funds") as (uow, now):
            return custody_service.recover_funds(uow, caller, self.admin, now)

    def custodied_balance(self) -> int:
        with self._lock:
            return self.ledger.balance()

    def escrowed_total(self) -> int:
        """Sum of deposits held for agreements that are still active."""
        with self._query() as db:
            return agreement_service.escrowed_total(db)

    def subscribe(self, handler: EventHandler):
        """Register an event handler. Returns a callable that unsubscribes it."""
        return self.dispatcher.subscribe(handler)

    def close(self) -> None:
        """Release the database connections held by this registry."""
        with self._lock:
            self._engine.dispose()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @contextmanager
    def _mutation(self, operation: str) -> Iterator[Tuple[UnitOfWork, int]]:
        with self._lock:
            now = self.clock.now()
            try:
                with UnitOfWork(self._session_factory, self.ledger, self.dispatcher) as uow:
                    yield uow, now
            except DomainError as e:
                logger.warning("%s rejected [%s]: %s", operation, e.code, e)
                raise

    @contextmanager
    def _query(self) -> Iterator[Session]:
        with self._lock:
            db = self._session_factory()
            try:
                yield db
            finally:
                db.close()

    @staticmethod
    def _build(schema: Type[SchemaT], **fields) -> SchemaT:
        try:
            return schema(**fields)
        except ValidationError as e:
            raise DomainValidationError(str(e)) from e
