from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth.access import Caller
from backend.auth.dependencies import get_current_caller
from backend.database import ensure_appointment_schema, ensure_instructor_schema, get_db
from backend.schemas.appointment import (
    AppointmentResponse,
    CreateAppointmentRequest,
    MessageResponse,
    UpdateAppointmentRequest,
)
from backend.services import appointment_service

router = APIRouter(tags=['appointments'])

DATABASE_UNAVAILABLE_DETAIL = 'Database unavailable. Verify DATABASE_URL and database credentials.'


def ensure_database_ready() -> None:
    try:
        ensure_instructor_schema()
        ensure_appointment_schema()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


def _database_unavailable(db: Session) -> HTTPException:
    db.rollback()
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=DATABASE_UNAVAILABLE_DETAIL,
    )


@router.get('/', response_model=list[AppointmentResponse])
def list_appointments(
    caller: Caller = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return appointment_service.list_appointments(db, caller)
    except SQLAlchemyError as exc:
        raise _database_unavailable(db) from exc


@router.get('/mine', response_model=list[AppointmentResponse])
def list_my_appointments(
    caller: Caller = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return appointment_service.list_my_appointments(db, caller)
    except SQLAlchemyError as exc:
        raise _database_unavailable(db) from exc


@router.get('/instructor/{instructor_id}', response_model=list[AppointmentResponse])
def list_instructor_appointments(
    instructor_id: int,
    caller: Caller = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return appointment_service.list_appointments(db, caller, instructor_id=instructor_id)
    except SQLAlchemyError as exc:
        raise _database_unavailable(db) from exc


@router.get('/candidate/{candidate_id}', response_model=list[AppointmentResponse])
def list_candidate_appointments(
    candidate_id: int,
    caller: Caller = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return appointment_service.list_appointments(db, caller, candidate_id=candidate_id)
    except SQLAlchemyError as exc:
        raise _database_unavailable(db) from exc


@router.get('/{appointment_id}', response_model=AppointmentResponse)
def get_appointment(
    appointment_id: int,
    caller: Caller = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return appointment_service.get_appointment(db, caller, appointment_id)
    except SQLAlchemyError as exc:
        raise _database_unavailable(db) from exc


@router.post('/', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(
    data: CreateAppointmentRequest,
    caller: Caller = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return appointment_service.create_appointment(db, caller, data)
    except SQLAlchemyError as exc:
        raise _database_unavailable(db) from exc


@router.put('/{appointment_id}', response_model=AppointmentResponse)
def update_appointment(
    appointment_id: int,
    data: UpdateAppointmentRequest,
    caller: Caller = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return appointment_service.update_appointment(db, caller, appointment_id, data)
    except SQLAlchemyError as exc:
        raise _database_unavailable(db) from exc


@router.delete('/{appointment_id}', response_model=MessageResponse)
def delete_appointment(
    appointment_id: int,
    caller: Caller = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        appointment_service.delete_appointment(db, caller, appointment_id)
    except SQLAlchemyError as exc:
        raise _database_unavailable(db) from exc

    return MessageResponse(message='Appointment deleted')
