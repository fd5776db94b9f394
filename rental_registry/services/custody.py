import logging

from rental_registry.errors import UnauthorizedError
from rental_registry.schemas.events import FundsRecovered
from rental_registry.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


def recover_funds(uow: UnitOfWork, caller: str, admin: str, now: int) -> int:
    """
    Sweep the entire custodied balance to the admin.

    Emergency escape hatch: deposits still held for active agreements are
    swept too, and nothing afterwards guarantees they can be returned.

    Raises:
        UnauthorizedError: If the caller is not the admin.
    """
    if caller != admin:
        raise UnauthorizedError("Only the admin can recover funds")

    amount = uow.ledger.balance()
    uow.transfer(admin, amount)
    uow.emit(FundsRecovered(occurred_at=now, admin=admin, amount=amount))
    logger.warning("Admin %s recovered %s from custody", admin, amount)
    return amount
