from sqlalchemy import BigInteger, Column, String

from rental_registry.db.base import Base

PROPERTY_SEQUENCE = "property"
RENTAL_AGREEMENT_SEQUENCE = "rental_agreement"
SEQUENCE_NAMES = (PROPERTY_SEQUENCE, RENTAL_AGREEMENT_SEQUENCE)


class IdSequence(Base):
    """Last id issued for one kind of record. Starts at 0, only ever incremented."""

    __tablename__ = "id_sequences"

    name = Column(String(64), primary_key=True)
    value = Column(BigInteger, nullable=False, default=0)
