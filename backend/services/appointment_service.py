"""Appointment lifecycle: validation, status transitions and accrual hand-off."""

import logging

from sqlalchemy.orm import Session, joinedload

from backend.auth.access import (
    Caller,
    authorize_create,
    authorize_instructor_listing,
    authorize_read,
    authorize_write,
    require_admin,
)
from backend.core.errors import AppointmentValidationError, NotFoundError
from backend.models.appointment import Appointment, AppointmentStatus
from backend.models.candidate import Candidate
from backend.models.car import Car
from backend.models.instructor import Instructor
from backend.schemas.appointment import CreateAppointmentRequest, UpdateAppointmentRequest
from backend.services.accrual import apply_completion_accrual
from backend.services.lesson_hours import (
    MAX_APPOINTMENT_HOURS,
    calculate_lesson_hours,
    is_valid_lesson_hours,
)

logger = logging.getLogger(__name__)

ALLOWED_STATUS_TRANSITIONS = {
    AppointmentStatus.SCHEDULED.value: {
        AppointmentStatus.COMPLETED.value,
        AppointmentStatus.CANCELLED.value,
    },
    AppointmentStatus.COMPLETED.value: set(),
    AppointmentStatus.CANCELLED.value: set(),
}

REFERENCE_MODELS = {
    'instructor_id': (Instructor, 'Instructor not found.'),
    'candidate_id': (Candidate, 'Candidate not found.'),
    'car_id': (Car, 'Car not found.'),
}


def _appointment_query(db: Session):
    return db.query(Appointment).options(
        joinedload(Appointment.instructor),
        joinedload(Appointment.candidate),
        joinedload(Appointment.car),
    )


def _ordered(query):
    return query.order_by(Appointment.date.desc(), Appointment.start_time.desc())


def _load_appointment(db: Session, appointment_id: int) -> Appointment:
    appointment = _appointment_query(db).filter(Appointment.id == appointment_id).first()
    if appointment is None:
        raise NotFoundError('Appointment not found.')
    return appointment


def _ensure_references_exist(db: Session, references: dict) -> None:
    for field_name, reference_id in references.items():
        if reference_id is None:
            continue
        model, detail = REFERENCE_MODELS[field_name]
        if db.get(model, reference_id) is None:
            raise NotFoundError(detail)


def _validate_hours(hours: float) -> None:
    if not is_valid_lesson_hours(hours):
        raise AppointmentValidationError(f'Hours must be greater than 0 and at most {MAX_APPOINTMENT_HOURS}.')


def _validate_transition(previous_status: str, new_status: str) -> None:
    if new_status == previous_status:
        return
    if new_status not in ALLOWED_STATUS_TRANSITIONS.get(previous_status, set()):
        raise AppointmentValidationError(f'Cannot change status from {previous_status} to {new_status}.')


def is_completion_transition(previous_status: str | None, new_status: str) -> bool:
    completed = AppointmentStatus.COMPLETED.value
    return previous_status != completed and new_status == completed


def create_appointment(db: Session, caller: Caller, data: CreateAppointmentRequest) -> Appointment:
    authorize_create(caller, data.instructor_id)
    _ensure_references_exist(
        db,
        {
            'instructor_id': data.instructor_id,
            'candidate_id': data.candidate_id,
            'car_id': data.car_id,
        },
    )

    hours = data.hours if data.hours else calculate_lesson_hours(data.start_time, data.end_time)
    _validate_hours(hours)

    appointment = Appointment(
        instructor_id=data.instructor_id,
        candidate_id=data.candidate_id,
        car_id=data.car_id,
        date=data.date,
        start_time=data.start_time,
        end_time=data.end_time,
        hours=hours,
        notes=data.notes or '',
        status=data.status.value,
    )
    db.add(appointment)
    db.commit()
    db.refresh(appointment)

    if is_completion_transition(None, appointment.status):
        apply_completion_accrual(db, appointment)

    return appointment


def update_appointment(
    db: Session,
    caller: Caller,
    appointment_id: int,
    data: UpdateAppointmentRequest,
) -> Appointment:
    appointment = _load_appointment(db, appointment_id)
    changes = data.supplied_fields()
    authorize_write(caller, appointment, changes)

    hours_supplied = 'hours' in changes
    explicit_hours = changes.pop('hours', None)
    if 'status' in changes:
        changes['status'] = AppointmentStatus(changes['status']).value

    start_time = changes.get('start_time', appointment.start_time)
    end_time = changes.get('end_time', appointment.end_time)
    times_changed = start_time != appointment.start_time or end_time != appointment.end_time

    if explicit_hours:
        hours = explicit_hours
    elif times_changed or hours_supplied:
        hours = calculate_lesson_hours(start_time, end_time)
    else:
        hours = appointment.hours
    _validate_hours(hours)

    previous_status = appointment.status
    new_status = changes.get('status', previous_status)
    _validate_transition(previous_status, new_status)

    _ensure_references_exist(
        db,
        {
            field_name: changes[field_name]
            for field_name in REFERENCE_MODELS
            if field_name in changes and changes[field_name] != getattr(appointment, field_name)
        },
    )

    for field_name, value in changes.items():
        setattr(appointment, field_name, value)
    appointment.hours = hours

    db.commit()
    db.refresh(appointment)

    if is_completion_transition(previous_status, appointment.status):
        logger.info('Appointment %s completed', appointment.id)
        apply_completion_accrual(db, appointment)

    return appointment


def delete_appointment(db: Session, caller: Caller, appointment_id: int) -> None:
    # Accrued instructor totals are kept even when a completed lesson is deleted.
    require_admin(caller)
    appointment = _load_appointment(db, appointment_id)
    db.delete(appointment)
    db.commit()
    logger.info('Appointment %s deleted by user %s', appointment_id, caller.user_id)


def get_appointment(db: Session, caller: Caller, appointment_id: int) -> Appointment:
    appointment = _load_appointment(db, appointment_id)
    authorize_read(caller, appointment)
    return appointment


def list_appointments(
    db: Session,
    caller: Caller,
    *,
    instructor_id: int | None = None,
    candidate_id: int | None = None,
) -> list[Appointment]:
    if instructor_id is not None:
        authorize_instructor_listing(caller, instructor_id)
    else:
        require_admin(caller)

    query = _appointment_query(db)
    if instructor_id is not None:
        query = query.filter(Appointment.instructor_id == instructor_id)
    if candidate_id is not None:
        query = query.filter(Appointment.candidate_id == candidate_id)

    return _ordered(query).all()


def list_my_appointments(db: Session, caller: Caller) -> list[Appointment]:
    if caller.instructor_id is None:
        return []

    return _ordered(
        _appointment_query(db).filter(Appointment.instructor_id == caller.instructor_id)
    ).all()
