from pydantic import BaseModel, ConfigDict, Field, computed_field

from rental_registry.domain import MAX_TIMESTAMP, MIN_TIMESTAMP, AgreementStatus


class RentalAgreement(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    property_id: int
    tenant: str
    start_date: int
    end_date: int
    total_amount: int
    security_deposit: int
    is_active: bool
    security_deposit_returned: bool
    created_at: int
    closed_at: int | None = None

    @computed_field
    @property
    def status(self) -> AgreementStatus:
        return AgreementStatus.from_flags(
            is_active=self.is_active,
            security_deposit_returned=self.security_deposit_returned,
        )

    @computed_field
    @property
    def total_rent(self) -> int:
        return self.total_amount - self.security_deposit


class RentalAgreementCreate(BaseModel):
    property_id: int
    start_date: int = Field(ge=MIN_TIMESTAMP, le=MAX_TIMESTAMP)
    end_date: int = Field(ge=MIN_TIMESTAMP, le=MAX_TIMESTAMP)
    paid_amount: int
