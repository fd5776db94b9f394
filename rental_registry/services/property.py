import logging

from sqlalchemy.orm import Session

import rental_registry.repositories.property as property_repo
import rental_registry.repositories.rental_agreement as agreement_repo
from rental_registry.db.models.property import Property as PropertyModel
from rental_registry.domain import MAX_AMOUNT
from rental_registry.errors import (
    InvalidPriceError,
    NotAvailableError,
    NotFoundError,
    UnauthorizedError,
)
from rental_registry.schemas.events import PropertyAvailabilityUpdated, PropertyRegistered
from rental_registry.schemas.property import PropertyCreate
from rental_registry.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


def register_property(
    uow: UnitOfWork,
    owner: str,
    data: PropertyCreate,
    now: int,
) -> PropertyModel:
    """
    Register a new property with business logic validation.

    - Validates price_per_day is positive
    - Validates security_deposit is not negative
    - Validates both fit the stored amount range
    - Stores the property as available under the next sequential id
    """
    if data.price_per_day <= 0:
        raise InvalidPriceError(
            f"Price per day must be greater than 0, got {data.price_per_day}"
        )
    if data.security_deposit < 0:
        raise InvalidPriceError(
            f"Security deposit cannot be negative, got {data.security_deposit}"
        )
    if data.price_per_day > MAX_AMOUNT or data.security_deposit > MAX_AMOUNT:
        raise InvalidPriceError(f"Amounts cannot exceed {MAX_AMOUNT}")

    db_property = property_repo.create_property(
        uow.db,
        owner=owner,
        title=data.title,
        description=data.description,
        location=data.location,
        price_per_day=data.price_per_day,
        security_deposit=data.security_deposit,
    )
    uow.emit(
        PropertyRegistered(
            occurred_at=now,
            property_id=db_property.id,
            owner=owner,
            title=db_property.title,
            price_per_day=db_property.price_per_day,
            security_deposit=db_property.security_deposit,
        )
    )
    logger.info("Property %s registered by %s", db_property.id, owner)
    return db_property


def set_availability(
    uow: UnitOfWork,
    caller: str,
    property_id: int,
    is_available: bool,
    now: int,
) -> PropertyModel:
    """
    Set a property's availability on behalf of its owner.

    Setting the current value again succeeds without changing anything.
    A property with an active agreement can be closed but not reopened;
    only the deposit return reopens it.

    Raises:
        NotFoundError: If the property does not exist.
        UnauthorizedError: If the caller is not the property owner.
        NotAvailableError: If reopening a property that is currently rented.
    """
    db_property = get_property(uow.db, property_id)
    if db_property.owner != caller:
        raise UnauthorizedError(
            f"Only the owner can change availability of property {property_id}"
        )

    if is_available and agreement_repo.has_active_agreement(uow.db, property_id):
        raise NotAvailableError(
            f"Property {property_id} has an active rental agreement and cannot be reopened"
        )

    db_property = property_repo.set_property_availability(
        uow.db, property_id, is_available
    )
    uow.emit(
        PropertyAvailabilityUpdated(
            occurred_at=now,
            property_id=property_id,
            is_available=is_available,
        )
    )
    logger.info(
        "Property %s availability set to %s by %s", property_id, is_available, caller
    )
    return db_property


def get_property(db: Session, property_id: int) -> PropertyModel:
    """Get a property or raise NotFoundError."""
    db_property = property_repo.get_property_by_id(db, property_id)
    if not db_property:
        raise NotFoundError(f"Property with id {property_id} not found")
    return db_property


def list_by_owner(db: Session, owner: str) -> list[int]:
    return property_repo.get_property_ids_by_owner(db, owner)


def list_all(db: Session) -> list[int]:
    return property_repo.get_all_property_ids(db)
