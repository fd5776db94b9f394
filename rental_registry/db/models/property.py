from sqlalchemy import BigInteger, Boolean, CheckConstraint, Column, Integer, String, Text

from rental_registry.db.base import Base


class Property(Base):
    __tablename__ = "properties"

    # Assigned from the "property" id sequence, never autoincremented
    id = Column(Integer, primary_key=True, autoincrement=False)
    owner = Column(String, nullable=False, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    location = Column(Text, nullable=False)
    price_per_day = Column(BigInteger, nullable=False)
    security_deposit = Column(BigInteger, nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint("price_per_day > 0", name="ck_properties_price_per_day_positive"),
        CheckConstraint(
            "security_deposit >= 0", name="ck_properties_security_deposit_non_negative"
        ),
    )
