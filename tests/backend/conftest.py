import os
from types import SimpleNamespace

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from backend.auth.access import Caller  # noqa: E402
from backend.database import Base  # noqa: E402
from backend.models.appointment import Appointment  # noqa: E402,F401
from backend.models.candidate import Candidate  # noqa: E402
from backend.models.car import Car  # noqa: E402
from backend.models.instructor import Instructor, InstructorType  # noqa: E402
from backend.models.user import User, UserRole  # noqa: E402


@pytest.fixture
def session_factory():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    try:
        yield testing_session_local
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def appointment_db(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


def _add(db, instance):
    db.add(instance)
    db.commit()
    db.refresh(instance)
    return instance


@pytest.fixture
def school(appointment_db):
    """Admin, an insider and an outsider instructor, one candidate and one car."""
    admin = _add(appointment_db, User(email='admin@school.test', first_name='Ada', last_name='Admin', role='admin'))
    insider_user = _add(
        appointment_db,
        User(email='ina@school.test', first_name='Ina', last_name='Insider', role='instructor'),
    )
    outsider_user = _add(
        appointment_db,
        User(email='otto@school.test', first_name='Otto', last_name='Outsider', role='instructor'),
    )
    orphan_user = _add(
        appointment_db,
        User(email='nobody@school.test', first_name='No', last_name='Profile', role='instructor'),
    )

    insider = _add(
        appointment_db,
        Instructor(user_id=insider_user.id, phone='555-0101', instructor_type=InstructorType.INSIDER.value),
    )
    outsider = _add(
        appointment_db,
        Instructor(
            user_id=outsider_user.id,
            phone='555-0102',
            instructor_type=InstructorType.OUTSIDER.value,
            rate_per_hour=10,
        ),
    )
    candidate = _add(appointment_db, Candidate(first_name='Cara', last_name='Candidate'))
    car = _add(appointment_db, Car(model='Golf 7', license_plate='AB-123-CD', transmission='manual'))

    return SimpleNamespace(
        insider=insider,
        outsider=outsider,
        candidate=candidate,
        car=car,
        admin_caller=Caller(user_id=admin.id, email=admin.email, role=UserRole.ADMIN),
        insider_caller=Caller(
            user_id=insider_user.id,
            email=insider_user.email,
            role=UserRole.INSTRUCTOR,
            instructor_id=insider.id,
        ),
        outsider_caller=Caller(
            user_id=outsider_user.id,
            email=outsider_user.email,
            role=UserRole.INSTRUCTOR,
            instructor_id=outsider.id,
        ),
        orphan_caller=Caller(user_id=orphan_user.id, email=orphan_user.email, role=UserRole.INSTRUCTOR),
    )


@pytest.fixture
def fail_commits_after(monkeypatch: pytest.MonkeyPatch):
    """Let ``allowed`` commits through on ``db``, then raise OperationalError."""
    def arm(db, allowed: int = 0) -> None:
        real_commit = db.commit
        calls = {'count': 0}

        def commit() -> None:
            calls['count'] += 1
            if calls['count'] > allowed:
                raise OperationalError('COMMIT', {}, Exception('database is locked'))
            real_commit()

        monkeypatch.setattr(db, 'commit', commit)

    return arm
