"""Custom domain exceptions for the registry."""

# Stable, machine-readable error codes for registry callers.
NOT_FOUND = "NOT_FOUND"
UNAUTHORIZED = "UNAUTHORIZED"
VALIDATION_ERROR = "VALIDATION_ERROR"
INVALID_PRICE = "INVALID_PRICE"
INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
START_IN_PAST = "START_IN_PAST"
RENTAL_TOO_SHORT = "RENTAL_TOO_SHORT"
PAYMENT_MISMATCH = "PAYMENT_MISMATCH"
INVALID_STATE = "INVALID_STATE"
NOT_AVAILABLE = "NOT_AVAILABLE"
NOT_ACTIVE = "NOT_ACTIVE"
TOO_EARLY = "TOO_EARLY"
ALREADY_RETURNED = "ALREADY_RETURNED"
TRANSFER_FAILED = "TRANSFER_FAILED"


class DomainError(Exception):
    """Base exception for domain/business logic errors."""

    code = "DOMAIN_ERROR"


class NotFoundError(DomainError):
    """Raised when a requested property or agreement does not exist."""

    code = NOT_FOUND


class UnauthorizedError(DomainError):
    """Raised when the caller identity is not allowed to perform the operation."""

    code = UNAUTHORIZED


class DomainValidationError(DomainError):
    """Raised when caller-supplied input breaks a business rule."""

    code = VALIDATION_ERROR


class InvalidPriceError(DomainValidationError):
    """Raised when a property is registered with a non-positive price or a negative deposit."""

    code = INVALID_PRICE


class InvalidDateRangeError(DomainValidationError):
    """Raised when a rental does not end strictly after it starts."""

    code = INVALID_DATE_RANGE


class StartInPastError(DomainValidationError):
    """Raised when a rental does not start strictly in the future."""

    code = START_IN_PAST


class RentalTooShortError(DomainValidationError):
    """Raised when a rental covers less than one full day."""

    code = RENTAL_TOO_SHORT


class PaymentMismatchError(DomainValidationError):
    """Raised when the paid amount differs from the agreement total."""

    code = PAYMENT_MISMATCH


class StateError(DomainError):
    """Raised when a record is not in a state that allows the operation."""

    code = INVALID_STATE


class NotAvailableError(StateError):
    """Raised when renting a property that is not available."""

    code = NOT_AVAILABLE


class NotActiveError(StateError):
    """Raised when closing an agreement that is no longer active."""

    code = NOT_ACTIVE


class TooEarlyError(StateError):
    """Raised when a deposit is returned before the rental period has elapsed."""

    code = TOO_EARLY


class AlreadyReturnedError(StateError):
    """Raised when a security deposit has already been returned."""

    code = ALREADY_RETURNED


class TransferFailedError(DomainError):
    """Raised when the ledger cannot move funds out of custody."""

    code = TRANSFER_FAILED
