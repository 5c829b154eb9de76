from datetime import date, datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from booking.core.errors import FieldValidationError
from booking.models.appointment import AppointmentKind
from booking.services.ports import AppointmentRecord

APPOINTMENT_KINDS = tuple(kind.value for kind in AppointmentKind)
INSTANT_ERROR = '{field} must be a valid ISO 8601 date string'
DAY_ERROR = 'day must be a valid ISO 8601 date string'
MAX_ID = 2**63 - 1
MIN_ID = -(2**63)


def parse_instant(value: Any) -> datetime | None:
    """Parse an ISO-8601 value into a naive UTC datetime, or None when it is not one."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text[-1] in 'Zz':
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        except (OverflowError, ValueError):
            return None
    return parsed


def parse_day(value: Any) -> date:
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        parsed = parse_instant(text)
        if parsed is not None:
            return parsed.date()
    raise FieldValidationError([DAY_ERROR])


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_non_empty_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _field_errors(payload: dict, partial: bool) -> list[str]:
    errors: list[str] = []

    def checked(name: str) -> bool:
        return not partial or name in payload

    if checked('title') and not _is_non_empty_text(payload.get('title')):
        errors.append('title should not be empty')

    for name in ('hostId', 'buyerId'):
        if not checked(name):
            continue
        value = payload.get(name)
        if not _is_integer(value):
            errors.append(f'{name} must be an integer number')
        elif not MIN_ID <= value <= MAX_ID:
            errors.append(f'{name} must fit in a 64-bit integer')

    kind = payload.get('type')
    if checked('type') and kind not in APPOINTMENT_KINDS:
        errors.append('type must be a valid enum value')

    for name, required_kind in (('location', AppointmentKind.PHYSICAL), ('link', AppointmentKind.VIRTUAL)):
        value = payload.get(name)
        required = kind == required_kind.value or (partial and name in payload)
        if required and not _is_non_empty_text(value):
            errors.append(f'{name} should not be empty')
        elif value is not None and not isinstance(value, str):
            errors.append(f'{name} must be a string')

    for name in ('startTime', 'endTime'):
        if checked(name) and parse_instant(payload.get(name)) is None:
            errors.append(INSTANT_ERROR.format(field=name))

    return errors


def validate_create_appointment(payload: Any) -> list[str]:
    """Every field rule a create body violates, in declaration order."""
    if not isinstance(payload, dict):
        return ['body must be a JSON object']
    return _field_errors(payload, partial=False)


def validate_update_appointment(payload: Any) -> list[str]:
    """Same rules as create, applied only to the fields present in the body."""
    if not isinstance(payload, dict):
        return ['body must be a JSON object']
    return _field_errors(payload, partial=True)


class CreateAppointmentRequest(BaseModel):
    title: str
    host_id: int
    buyer_id: int
    kind: AppointmentKind = Field(alias='type')
    location: str | None = None
    link: str | None = None
    start_time: datetime
    end_time: datetime

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = 'ignore'

    @field_validator('title', 'location', 'link')
    @classmethod
    def strip_text(cls, value: str | None) -> str | None:
        return value.strip() if value is not None else None

    @field_validator('start_time', 'end_time', mode='before')
    @classmethod
    def normalize_instant(cls, value: Any) -> Any:
        parsed = parse_instant(value)
        return parsed if parsed is not None else value


class UpdateAppointmentRequest(BaseModel):
    title: str | None = None
    host_id: int | None = None
    buyer_id: int | None = None
    kind: AppointmentKind | None = Field(default=None, alias='type')
    location: str | None = None
    link: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = 'ignore'

    @field_validator('title', 'location', 'link')
    @classmethod
    def strip_text(cls, value: str | None) -> str | None:
        return value.strip() if value is not None else None

    @field_validator('start_time', 'end_time', mode='before')
    @classmethod
    def normalize_instant(cls, value: Any) -> Any:
        parsed = parse_instant(value)
        return parsed if parsed is not None else value

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class AppointmentResponse(BaseModel):
    id: int
    title: str
    kind: AppointmentKind = Field(alias='type')
    location: str | None = None
    link: str | None = None
    host_id: int
    buyer_id: int
    start_time: datetime
    end_time: datetime

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

    @field_serializer('start_time', 'end_time', when_used='json')
    def serialize_instant(self, value: datetime) -> str:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat().replace('+00:00', 'Z')

    @classmethod
    def from_record(cls, record: AppointmentRecord) -> 'AppointmentResponse':
        return cls(
            id=record.id,
            title=record.title,
            kind=record.kind,
            location=record.location,
            link=record.link,
            host_id=record.host_id,
            buyer_id=record.buyer_id,
            start_time=record.start_time,
            end_time=record.end_time,
        )
