from sqlalchemy import BigInteger, Boolean, CheckConstraint, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from rental_registry.db.base import Base


class RentalAgreement(Base):
    __tablename__ = "rental_agreements"

    # Assigned from the "rental_agreement" id sequence, never autoincremented
    id = Column(Integer, primary_key=True, autoincrement=False)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
    tenant = Column(String, nullable=False, index=True)
    start_date = Column(BigInteger, nullable=False)
    end_date = Column(BigInteger, nullable=False)
    total_amount = Column(BigInteger, nullable=False)
    security_deposit = Column(BigInteger, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    security_deposit_returned = Column(Boolean, nullable=False, default=False)
    created_at = Column(BigInteger, nullable=False)
    closed_at = Column(BigInteger, nullable=True)

    # Relationships
    property = relationship("Property", backref="rental_agreements")

    __table_args__ = (
        CheckConstraint("start_date < end_date", name="ck_rental_agreements_date_range"),
        # A returned deposit always closes the agreement
        CheckConstraint(
            "NOT (security_deposit_returned AND is_active)",
            name="ck_rental_agreements_returned_closed",
        ),
    )
