import datetime as dt

from pydantic import BaseModel, field_validator

from backend.models.appointment import AppointmentStatus
from backend.services.lesson_hours import normalize_clock_time

MAX_APPOINTMENT_NOTES_LENGTH = 1000


def _parse_date_input(value):
    # The dashboard sends either a plain date or a full ISO timestamp.
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, str) and 'T' in value:
        return value.strip().split('T', 1)[0]
    return value


def _normalize_notes(value: str | None) -> str:
    if value is None:
        return ''

    normalized = value.strip()
    if len(normalized) > MAX_APPOINTMENT_NOTES_LENGTH:
        raise ValueError(f'Notes must be {MAX_APPOINTMENT_NOTES_LENGTH} characters or fewer.')

    return normalized


class CreateAppointmentRequest(BaseModel):
    instructor_id: int
    candidate_id: int
    car_id: int | None = None
    date: dt.date
    start_time: str
    end_time: str
    hours: float | None = None
    notes: str | None = None
    status: AppointmentStatus = AppointmentStatus.SCHEDULED

    @field_validator('date', mode='before')
    @classmethod
    def parse_date(cls, value):
        return _parse_date_input(value)

    @field_validator('start_time', 'end_time')
    @classmethod
    def validate_clock_time(cls, value: str) -> str:
        return normalize_clock_time(value)

    @field_validator('notes')
    @classmethod
    def validate_notes(cls, value: str | None) -> str:
        return _normalize_notes(value)


class UpdateAppointmentRequest(BaseModel):
    instructor_id: int | None = None
    candidate_id: int | None = None
    car_id: int | None = None
    date: dt.date | None = None
    start_time: str | None = None
    end_time: str | None = None
    hours: float | None = None
    notes: str | None = None
    status: AppointmentStatus | None = None

    @field_validator('instructor_id', 'candidate_id', 'date', 'start_time', 'end_time', 'status', mode='before')
    @classmethod
    def reject_null(cls, value, info):
        if value is None:
            raise ValueError(f'{info.field_name} is required.')
        return value

    @field_validator('date', mode='before')
    @classmethod
    def parse_date(cls, value):
        return _parse_date_input(value)

    @field_validator('start_time', 'end_time')
    @classmethod
    def validate_clock_time(cls, value: str) -> str:
        return normalize_clock_time(value)

    @field_validator('notes')
    @classmethod
    def validate_notes(cls, value: str | None) -> str:
        return _normalize_notes(value)

    def supplied_fields(self) -> dict:
        return self.model_dump(exclude_unset=True)


class InstructorSummary(BaseModel):
    id: int
    first_name: str = ''
    last_name: str = ''
    email: str | None = None
    instructor_type: str

    class Config:
        from_attributes = True


class CandidateSummary(BaseModel):
    id: int
    first_name: str
    last_name: str

    class Config:
        from_attributes = True


class CarSummary(BaseModel):
    id: int
    model: str
    license_plate: str

    class Config:
        from_attributes = True


class AppointmentResponse(BaseModel):
    id: int
    instructor_id: int
    candidate_id: int
    car_id: int | None = None
    instructor: InstructorSummary
    candidate: CandidateSummary
    car: CarSummary | None = None
    date: dt.date
    start_time: str
    end_time: str
    hours: float
    status: AppointmentStatus
    notes: str = ''
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str
