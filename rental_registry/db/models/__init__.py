from rental_registry.db.models.property import Property
from rental_registry.db.models.rental_agreement import RentalAgreement
from rental_registry.db.models.id_sequence import IdSequence

__all__ = ["Property", "RentalAgreement", "IdSequence"]
