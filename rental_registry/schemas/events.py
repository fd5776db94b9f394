"""Notifications published to external observers after a committed operation."""

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict


class Event(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    occurred_at: int


class PropertyRegistered(Event):
    name: Literal["PropertyRegistered"] = "PropertyRegistered"
    property_id: int
    owner: str
    title: str
    price_per_day: int
    security_deposit: int


class PropertyAvailabilityUpdated(Event):
    name: Literal["PropertyAvailabilityUpdated"] = "PropertyAvailabilityUpdated"
    property_id: int
    is_available: bool


class RentalAgreementCreated(Event):
    name: Literal["RentalAgreementCreated"] = "RentalAgreementCreated"
    agreement_id: int
    property_id: int
    tenant: str
    start_date: int
    end_date: int
    total_amount: int


class PaymentProcessed(Event):
    name: Literal["PaymentProcessed"] = "PaymentProcessed"
    agreement_id: int
    payer: str
    payee: str
    amount: int


class SecurityDepositReturned(Event):
    name: Literal["SecurityDepositReturned"] = "SecurityDepositReturned"
    agreement_id: int
    tenant: str
    amount: int


class FundsRecovered(Event):
    name: Literal["FundsRecovered"] = "FundsRecovered"
    admin: str
    amount: int


RegistryEvent = Union[
    PropertyRegistered,
    PropertyAvailabilityUpdated,
    RentalAgreementCreated,
    PaymentProcessed,
    SecurityDepositReturned,
    FundsRecovered,
]
