from pydantic import BaseModel, ConfigDict, StrictBool


class Property(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    owner: str
    title: str
    description: str
    location: str
    price_per_day: int
    security_deposit: int
    is_available: bool


class PropertyCreate(BaseModel):
    # Text fields are opaque; empty strings are accepted
    title: str
    description: str
    location: str
    price_per_day: int
    security_deposit: int = 0


class AvailabilityUpdate(BaseModel):
    is_available: StrictBool
