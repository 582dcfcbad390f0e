"""Instructor hour and pay accrual for completed lessons."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.core.errors import AccrualError
from backend.models.appointment import Appointment
from backend.models.instructor import Instructor, InstructorType

logger = logging.getLogger(__name__)


def accrue_instructor_hours(db: Session, instructor_id: int, hours: float) -> Instructor:
    """Add a completed lesson to the instructor's running totals.

    Not idempotent: every call adds ``hours`` again, so callers must invoke it
    once per completion. Outsider instructors also earn ``rate_per_hour *
    hours`` credits; a missing rate counts as zero.
    """
    try:
        instructor = db.get(Instructor, instructor_id)
        if instructor is None:
            raise AccrualError(f'Instructor {instructor_id} not found.')

        instructor.total_hours = round((instructor.total_hours or 0) + hours, 2)
        if instructor.instructor_type == InstructorType.OUTSIDER.value:
            earned = (instructor.rate_per_hour or 0) * hours
            instructor.total_credits = (instructor.total_credits or 0) + earned

        db.commit()
        db.refresh(instructor)
    except SQLAlchemyError as exc:
        raise AccrualError(f'Could not save totals for instructor {instructor_id}.') from exc

    logger.info('Accrued %s lesson hours to instructor %s', hours, instructor_id)
    return instructor


def apply_completion_accrual(db: Session, appointment: Appointment) -> bool:
    """Accrue a freshly completed appointment, logging instead of raising.

    The appointment itself is already committed; a failure here leaves the
    instructor totals behind and is not retried.
    """
    appointment_id = appointment.id
    instructor_id = appointment.instructor_id
    try:
        accrue_instructor_hours(db, instructor_id, appointment.hours)
    except AccrualError:
        db.rollback()
        logger.exception(
            'Instructor accrual failed for appointment %s (instructor %s)',
            appointment_id,
            instructor_id,
        )
        return False

    return True
