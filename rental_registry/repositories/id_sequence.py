from sqlalchemy.orm import Session

from rental_registry.db.models.id_sequence import IdSequence as IdSequenceModel


def next_id(db: Session, name: str) -> int:
    """Increment the named sequence and return the new value.

    Runs inside the caller's transaction, so a rollback gives the id back.
    """
    sequence = (
        db.query(IdSequenceModel)
        .filter(IdSequenceModel.name == name)
        .with_for_update()
        .one()
    )
    sequence.value = sequence.value + 1
    db.flush()
    return sequence.value
