from sqlalchemy.orm import Session

from rental_registry.db.models.id_sequence import PROPERTY_SEQUENCE
from rental_registry.db.models.property import Property as PropertyModel
from rental_registry.errors import NotFoundError
from rental_registry.repositories.id_sequence import next_id


def get_property_by_id(db: Session, property_id: int) -> PropertyModel | None:
    """Get a property by ID."""
    return db.query(PropertyModel).filter(PropertyModel.id == property_id).first()


def get_all_property_ids(db: Session) -> list[int]:
    """Get the IDs of every property ever registered, in registration order."""
    rows = db.query(PropertyModel.id).order_by(PropertyModel.id).all()
    return [row.id for row in rows]


def get_property_ids_by_owner(db: Session, owner: str) -> list[int]:
    """Get the IDs of an owner's properties, in registration order."""
    rows = (
        db.query(PropertyModel.id)
        .filter(PropertyModel.owner == owner)
        .order_by(PropertyModel.id)
        .all()
    )
    return [row.id for row in rows]


def create_property(
    db: Session,
    owner: str,
    title: str,
    description: str,
    location: str,
    price_per_day: int,
    security_deposit: int,
) -> PropertyModel:
    """Insert a new available property under the next sequential id. Pure data access - no business logic."""
    db_property = PropertyModel(
        id=next_id(db, PROPERTY_SEQUENCE),
        owner=owner,
        title=title,
        description=description,
        location=location,
        price_per_day=price_per_day,
        security_deposit=security_deposit,
        is_available=True,
    )
    db.add(db_property)
    db.flush()
    return db_property


def set_property_availability(
    db: Session, property_id: int, is_available: bool
) -> PropertyModel:
    """Set the availability flag of a property."""
    db_property = get_property_by_id(db, property_id)
    if not db_property:
        raise NotFoundError(f"Property with id {property_id} not found")

    db_property.is_available = is_available
    db.flush()
    return db_property


def mark_unavailable(db: Session, property_id: int) -> PropertyModel:
    """Close the availability gate when an agreement opens on the property."""
    return set_property_availability(db, property_id, False)


def mark_available(db: Session, property_id: int) -> PropertyModel:
    """Reopen the availability gate when the property's agreement closes."""
    return set_property_availability(db, property_id, True)
