"""Role and ownership checks for appointment access.

The caller is resolved once per request (see ``get_current_caller``) and then
handed to these checks explicitly.
"""

from dataclasses import dataclass

from backend.core.errors import ForbiddenError
from backend.models.appointment import Appointment
from backend.models.user import UserRole

# References only an admin may move an appointment to.
ADMIN_ONLY_REFERENCES = ('instructor_id', 'candidate_id')


@dataclass(frozen=True)
class Caller:
    user_id: int
    email: str
    role: UserRole
    instructor_id: int | None = None

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN

    def owns(self, appointment: Appointment) -> bool:
        return self.instructor_id is not None and appointment.instructor_id == self.instructor_id


def require_admin(caller: Caller) -> None:
    if not caller.is_admin:
        raise ForbiddenError('Only admins can perform this action.')


def authorize_create(caller: Caller, instructor_id: int) -> None:
    if caller.is_admin:
        return
    if caller.instructor_id is None or caller.instructor_id != instructor_id:
        raise ForbiddenError('Instructors can only create their own appointments.')


def authorize_read(caller: Caller, appointment: Appointment) -> None:
    if caller.is_admin:
        return
    if not caller.owns(appointment):
        raise ForbiddenError()


def authorize_write(caller: Caller, appointment: Appointment, changes: dict) -> None:
    if caller.is_admin:
        return
    if not caller.owns(appointment):
        raise ForbiddenError()

    for field_name in ADMIN_ONLY_REFERENCES:
        if field_name in changes and changes[field_name] != getattr(appointment, field_name):
            raise ForbiddenError(f'Instructors cannot change {field_name} on an appointment.')


def authorize_instructor_listing(caller: Caller, instructor_id: int) -> None:
    if caller.is_admin:
        return
    if caller.instructor_id != instructor_id:
        raise ForbiddenError('Instructors can only view their own appointments.')
