"""Escrow lifecycle of rental agreements.

An agreement is created when the tenant pays exactly rent + deposit. The
rent is forwarded to the owner at once; the deposit stays in custody until
the owner or the admin returns it after the rental has ended.

    CREATED (active, deposit held) -> CLOSED (deposit returned)

There is no other transition. Every step below runs inside one unit of
work, so a rejected or failed call leaves records, availability and
custody exactly as they were.
"""

import logging

from sqlalchemy.orm import Session

import rental_registry.repositories.property as property_repo
import rental_registry.repositories.rental_agreement as agreement_repo
from rental_registry.db.models.rental_agreement import RentalAgreement as RentalAgreementModel
from rental_registry.domain import MAX_AMOUNT, RentalTermPolicy
from rental_registry.errors import (
    AlreadyReturnedError,
    InvalidDateRangeError,
    NotActiveError,
    NotAvailableError,
    NotFoundError,
    PaymentMismatchError,
    RentalTooShortError,
    StartInPastError,
    TooEarlyError,
    UnauthorizedError,
)
from rental_registry.schemas.events import (
    PaymentProcessed,
    RentalAgreementCreated,
    SecurityDepositReturned,
)
from rental_registry.schemas.rental_agreement import RentalAgreementCreate
from rental_registry.services.property import get_property
from rental_registry.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


def create_agreement(
    uow: UnitOfWork,
    tenant: str,
    data: RentalAgreementCreate,
    now: int,
    policy: RentalTermPolicy,
) -> RentalAgreementModel:
    """
    Create a rental agreement against an exact payment.

    - Validates the property exists and is available
    - Validates start_date < end_date and start_date > now
    - Validates the rental covers at least one whole day
    - Validates rent + deposit fits the stored amount range
    - Validates paid_amount equals rent + deposit exactly
    - Takes the payment into custody, stores the agreement, closes the
      property's availability gate, then forwards the rent to the owner
    """
    db_property = get_property(uow.db, data.property_id)

    if not db_property.is_available:
        raise NotAvailableError(f"Property {data.property_id} is not available")

    if not data.start_date < data.end_date:
        raise InvalidDateRangeError(
            f"End date ({data.end_date}) must be after start date ({data.start_date})"
        )

    if not data.start_date > now:
        raise StartInPastError(
            f"Start date ({data.start_date}) must be in the future (now is {now})"
        )

    terms = policy.price(
        start_date=data.start_date,
        end_date=data.end_date,
        price_per_day=db_property.price_per_day,
        security_deposit=db_property.security_deposit,
    )
    if terms.rental_days < 1:
        raise RentalTooShortError(
            f"Rental must last at least one day of {policy.day_unit} time units"
        )

    if terms.total_amount > MAX_AMOUNT:
        raise PaymentMismatchError(
            f"Required total {terms.total_amount} exceeds the maximum amount {MAX_AMOUNT}"
        )

    if data.paid_amount != terms.total_amount:
        raise PaymentMismatchError(
            f"Payment of {data.paid_amount} does not match required total {terms.total_amount} "
            f"({terms.rental_days} days x {db_property.price_per_day} + deposit {terms.security_deposit})"
        )

    uow.receive(tenant, data.paid_amount)

    db_agreement = agreement_repo.create_agreement(
        uow.db,
        property_id=db_property.id,
        tenant=tenant,
        start_date=data.start_date,
        end_date=data.end_date,
        total_amount=terms.total_amount,
        security_deposit=terms.security_deposit,
        created_at=now,
    )

    # Gate closes before any funds leave custody
    property_repo.mark_unavailable(uow.db, db_property.id)

    uow.transfer(db_property.owner, terms.total_rent)

    uow.emit(
        RentalAgreementCreated(
            occurred_at=now,
            agreement_id=db_agreement.id,
            property_id=db_property.id,
            tenant=tenant,
            start_date=data.start_date,
            end_date=data.end_date,
            total_amount=terms.total_amount,
        )
    )
    uow.emit(
        PaymentProcessed(
            occurred_at=now,
            agreement_id=db_agreement.id,
            payer=tenant,
            payee=db_property.owner,
            amount=terms.total_rent,
        )
    )
    logger.info(
        "Agreement %s created for property %s by %s: %s days, rent %s, deposit %s held",
        db_agreement.id,
        db_property.id,
        tenant,
        terms.rental_days,
        terms.total_rent,
        terms.security_deposit,
    )
    return db_agreement


def return_security_deposit(
    uow: UnitOfWork,
    caller: str,
    agreement_id: int,
    now: int,
    admin: str,
    policy: RentalTermPolicy,
) -> RentalAgreementModel:
    """
    Release an agreement's deposit to its tenant and close the agreement.

    Business access rules:
    - Property owner and admin: may return the deposit
    - Anyone else: UnauthorizedError

    The agreement is closed and the property reopened before the transfer;
    a failed transfer rolls both back, so the deposit stays returnable.
    """
    db_agreement = get_agreement(uow.db, agreement_id)
    db_property = get_property(uow.db, db_agreement.property_id)

    if caller != db_property.owner and caller != admin:
        raise UnauthorizedError(
            f"Only the property owner or admin can return the deposit of agreement {agreement_id}"
        )

    # security_deposit_returned implies not is_active
    if db_agreement.security_deposit_returned:
        raise AlreadyReturnedError(
            f"Security deposit of agreement {agreement_id} was already returned"
        )

    # Only an inactive agreement still holding its deposit gets here; no
    # operation closes an agreement without returning the deposit.
    if not db_agreement.is_active:
        raise NotActiveError(f"Agreement {agreement_id} is not active")

    if not policy.has_elapsed(end_date=db_agreement.end_date, now=now):
        raise TooEarlyError(
            f"Agreement {agreement_id} ends at {db_agreement.end_date}; deposit cannot be returned at {now}"
        )

    agreement_repo.close_agreement(uow.db, db_agreement, closed_at=now)
    property_repo.mark_available(uow.db, db_property.id)

    uow.transfer(db_agreement.tenant, db_agreement.security_deposit)

    uow.emit(
        SecurityDepositReturned(
            occurred_at=now,
            agreement_id=agreement_id,
            tenant=db_agreement.tenant,
            amount=db_agreement.security_deposit,
        )
    )
    logger.info(
        "Deposit %s of agreement %s returned to %s by %s",
        db_agreement.security_deposit,
        agreement_id,
        db_agreement.tenant,
        caller,
    )
    return db_agreement


def get_agreement(db: Session, agreement_id: int) -> RentalAgreementModel:
    """Get a rental agreement or raise NotFoundError."""
    db_agreement = agreement_repo.get_agreement_by_id(db, agreement_id)
    if not db_agreement:
        raise NotFoundError(f"Rental agreement with id {agreement_id} not found")
    return db_agreement


def list_by_tenant(db: Session, tenant: str) -> list[int]:
    return agreement_repo.get_agreement_ids_by_tenant(db, tenant)


def escrowed_total(db: Session) -> int:
    """Deposits the custodian must hold for agreements still active."""
    return agreement_repo.get_escrowed_total(db)
