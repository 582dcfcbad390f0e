import pytest

from backend.auth.access import (
    Caller,
    authorize_create,
    authorize_instructor_listing,
    authorize_read,
    authorize_write,
    require_admin,
)
from backend.core.errors import ForbiddenError
from backend.models.appointment import Appointment
from backend.models.user import UserRole

ADMIN = Caller(user_id=1, email='admin@school.test', role=UserRole.ADMIN)
INSTRUCTOR_A = Caller(user_id=2, email='a@school.test', role=UserRole.INSTRUCTOR, instructor_id=10)
INSTRUCTOR_B = Caller(user_id=3, email='b@school.test', role=UserRole.INSTRUCTOR, instructor_id=20)
NO_PROFILE = Caller(user_id=4, email='c@school.test', role=UserRole.INSTRUCTOR)


def _appointment(instructor_id: int = 10, candidate_id: int = 5) -> Appointment:
    return Appointment(id=99, instructor_id=instructor_id, candidate_id=candidate_id)


def test_require_admin_rejects_instructors() -> None:
    require_admin(ADMIN)

    with pytest.raises(ForbiddenError) as exception_info:
        require_admin(INSTRUCTOR_A)

    assert exception_info.value.status_code == 403


def test_authorize_create_limits_instructors_to_their_own_profile() -> None:
    authorize_create(ADMIN, 20)
    authorize_create(INSTRUCTOR_A, 10)

    with pytest.raises(ForbiddenError) as exception_info:
        authorize_create(INSTRUCTOR_A, 20)

    assert exception_info.value.detail == 'Instructors can only create their own appointments.'

    with pytest.raises(ForbiddenError):
        authorize_create(NO_PROFILE, 10)


def test_authorize_read_requires_ownership_for_instructors() -> None:
    appointment = _appointment(instructor_id=10)

    authorize_read(ADMIN, appointment)
    authorize_read(INSTRUCTOR_A, appointment)

    with pytest.raises(ForbiddenError):
        authorize_read(INSTRUCTOR_B, appointment)

    with pytest.raises(ForbiddenError):
        authorize_read(NO_PROFILE, appointment)


def test_authorize_write_rejects_reassigning_instructor() -> None:
    appointment = _appointment(instructor_id=10)

    with pytest.raises(ForbiddenError) as exception_info:
        authorize_write(INSTRUCTOR_A, appointment, {'instructor_id': 20})

    assert exception_info.value.detail == 'Instructors cannot change instructor_id on an appointment.'


def test_authorize_write_rejects_changing_candidate_for_instructors() -> None:
    appointment = _appointment(instructor_id=10, candidate_id=5)

    with pytest.raises(ForbiddenError):
        authorize_write(INSTRUCTOR_A, appointment, {'candidate_id': 6})


def test_authorize_write_allows_resending_unchanged_references() -> None:
    appointment = _appointment(instructor_id=10, candidate_id=5)

    authorize_write(INSTRUCTOR_A, appointment, {'instructor_id': 10, 'candidate_id': 5, 'notes': 'ok'})


def test_authorize_write_lets_admin_reassign() -> None:
    authorize_write(ADMIN, _appointment(instructor_id=10), {'instructor_id': 20, 'candidate_id': 6})


def test_authorize_write_rejects_non_owner() -> None:
    with pytest.raises(ForbiddenError):
        authorize_write(INSTRUCTOR_B, _appointment(instructor_id=10), {'notes': 'hijack'})


def test_authorize_instructor_listing() -> None:
    authorize_instructor_listing(ADMIN, 10)
    authorize_instructor_listing(INSTRUCTOR_A, 10)

    with pytest.raises(ForbiddenError):
        authorize_instructor_listing(INSTRUCTOR_A, 20)
