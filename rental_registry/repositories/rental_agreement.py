from sqlalchemy import func
from sqlalchemy.orm import Session

from rental_registry.db.models.id_sequence import RENTAL_AGREEMENT_SEQUENCE
from rental_registry.db.models.rental_agreement import RentalAgreement as RentalAgreementModel
from rental_registry.repositories.id_sequence import next_id


def get_agreement_by_id(db: Session, agreement_id: int) -> RentalAgreementModel | None:
    """Get a rental agreement by ID."""
    return (
        db.query(RentalAgreementModel)
        .filter(RentalAgreementModel.id == agreement_id)
        .first()
    )


def get_agreement_ids_by_tenant(db: Session, tenant: str) -> list[int]:
    """Get the IDs of a tenant's rental agreements, in creation order."""
    rows = (
        db.query(RentalAgreementModel.id)
        .filter(RentalAgreementModel.tenant == tenant)
        .order_by(RentalAgreementModel.id)
        .all()
    )
    return [row.id for row in rows]


def has_active_agreement(db: Session, property_id: int) -> bool:
    """Check whether any agreement on the property is still active."""
    return (
        db.query(RentalAgreementModel.id)
        .filter(
            RentalAgreementModel.property_id == property_id,
            RentalAgreementModel.is_active.is_(True),
        )
        .first()
        is not None
    )


def get_escrowed_total(db: Session) -> int:
    """Sum the security deposits of every active agreement."""
    total = (
        db.query(func.coalesce(func.sum(RentalAgreementModel.security_deposit), 0))
        .filter(RentalAgreementModel.is_active.is_(True))
        .scalar()
    )
    return int(total)


def create_agreement(
    db: Session,
    property_id: int,
    tenant: str,
    start_date: int,
    end_date: int,
    total_amount: int,
    security_deposit: int,
    created_at: int,
) -> RentalAgreementModel:
    """Insert a new active agreement under the next sequential id. Pure data access - no business logic."""
    db_agreement = RentalAgreementModel(
        id=next_id(db, RENTAL_AGREEMENT_SEQUENCE),
        property_id=property_id,
        tenant=tenant,
        start_date=start_date,
        end_date=end_date,
        total_amount=total_amount,
        security_deposit=security_deposit,
        is_active=True,
        security_deposit_returned=False,
        created_at=created_at,
    )
    db.add(db_agreement)
    db.flush()
    return db_agreement


def close_agreement(
    db: Session, agreement: RentalAgreementModel, closed_at: int
) -> RentalAgreementModel:
    """Mark the deposit returned and the agreement inactive."""
    agreement.security_deposit_returned = True
    agreement.is_active = False
    agreement.closed_at = closed_at
    db.flush()
    return agreement
