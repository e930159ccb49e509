from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AvailabilityRequestSchema(BaseModel):
    date: str
    duration_minutes: int = Field(
        default=60,
        gt=0,
        validation_alias=AliasChoices("durationMinutes", "duration", "duration_minutes"),
    )


class SlotSchema(CamelSchema):
    start_time: str
    end_time: str


class AvailabilityResponseSchema(CamelSchema):
    success: bool = True
    available_slots: list[SlotSchema] = Field(default_factory=list)


class BookingRequestSchema(BaseModel):
    name: str
    email: str
    phone: str
    date: str
    time: str
    services: list[str] = Field(default_factory=list)
    notes: str | None = None
    agreed_to_terms: bool = Field(
        default=False,
        validation_alias=AliasChoices("agreedToTerms", "agreed", "agreed_to_terms"),
    )


class BookingResponseSchema(CamelSchema):
    success: bool = True
    message: str
    booking_id: str
    event_id: str | None = None


class ErrorResponseSchema(BaseModel):
    success: bool = False
    error: str
