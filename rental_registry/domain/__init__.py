"""Domain-level policies and business rules.

This package contains logic that defines *what* the business rules are,
independent from *where* they are applied (services, repositories, etc.).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

# Amounts and timestamps are stored as signed 64-bit integers
MAX_AMOUNT = 2**63 - 1
MIN_TIMESTAMP = -(2**63)
MAX_TIMESTAMP = 2**63 - 1


class AgreementStatus(str, enum.Enum):
    """Lifecycle of a rental agreement. CREATED is active with the deposit outstanding."""

    CREATED = "created"
    CLOSED = "closed"

    @classmethod
    def from_flags(cls, *, is_active: bool, security_deposit_returned: bool) -> AgreementStatus:
        if is_active and not security_deposit_returned:
            return cls.CREATED
        return cls.CLOSED


@dataclass(frozen=True, slots=True)
class RentalTerms:
    """Pricing of one rental, computed once at agreement creation."""

    rental_days: int
    total_rent: int
    security_deposit: int

    @property
    def total_amount(self) -> int:
        return self.total_rent + self.security_deposit


@dataclass(frozen=True, slots=True)
class RentalTermPolicy:
    """Defines how a date range is turned into billable rental days.

    Semantics (intentionally centralized):
    - Dates are logical timestamps in clock units.
    - A rental day is ``day_unit`` clock units; partial days are not billed.
    - A rental must start strictly after ``now`` and end strictly after it starts.
    - A deposit may be returned only once ``now`` is strictly past ``end_date``.
    """

    day_unit: int

    def rental_days(self, *, start_date: int, end_date: int) -> int:
        return (end_date - start_date) // self.day_unit

    def price(self, *, start_date: int, end_date: int, price_per_day: int, security_deposit: int) -> RentalTerms:
        days = self.rental_days(start_date=start_date, end_date=end_date)
        return RentalTerms(
            rental_days=days,
            total_rent=days * price_per_day,
            security_deposit=security_deposit,
        )

    def has_elapsed(self, *, end_date: int, now: int) -> bool:
        # Strict: the final instant of the rental still belongs to the tenant.
        return now > end_date
