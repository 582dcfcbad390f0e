import os
from dotenv import load_dotenv
from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from backend.core import config


load_dotenv()
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./driving_school.db")

engine = create_engine(DATABASE_URL, echo=config.SQL_ECHO)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_appointment_schema_checked = False
_instructor_schema_checked = False


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ensure_appointment_schema() -> None:
    global _appointment_schema_checked

    if _appointment_schema_checked:
        return

    with _schema_lock:
        if _appointment_schema_checked:
            return

        inspector = inspect(engine)

        if 'appointments' not in inspector.get_table_names():
            _appointment_schema_checked = True
            return

        existing_columns = {column['name'] for column in inspector.get_columns('appointments')}
        migration_steps = [
            ('car_id', 'ALTER TABLE appointments ADD COLUMN car_id INTEGER REFERENCES cars(id)'),
            ('hours', 'ALTER TABLE appointments ADD COLUMN hours FLOAT'),
            ('notes', "ALTER TABLE appointments ADD COLUMN notes VARCHAR DEFAULT ''"),
            ('updated_at', 'ALTER TABLE appointments ADD COLUMN updated_at TIMESTAMP'),
        ]

        with engine.begin() as connection:
            for column_name, statement in migration_steps:
                if column_name not in existing_columns:
                    connection.execute(text(statement))
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_appointments_instructor_date ON appointments(instructor_id, date)')
            )
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_appointments_candidate_date ON appointments(candidate_id, date)')
            )
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_appointments_date_start ON appointments(date, start_time)')
            )
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_appointments_status ON appointments(status)')
            )

        _appointment_schema_checked = True


def ensure_instructor_schema() -> None:
    global _instructor_schema_checked

    if _instructor_schema_checked:
        return

    with _schema_lock:
        if _instructor_schema_checked:
            return

        inspector = inspect(engine)

        if 'instructors' not in inspector.get_table_names():
            _instructor_schema_checked = True
            return

        existing_columns = {column['name'] for column in inspector.get_columns('instructors')}
        migration_steps = [
            ('instructor_type', "ALTER TABLE instructors ADD COLUMN instructor_type VARCHAR DEFAULT 'insider'"),
            ('rate_per_hour', 'ALTER TABLE instructors ADD COLUMN rate_per_hour FLOAT'),
            ('total_credits', 'ALTER TABLE instructors ADD COLUMN total_credits FLOAT DEFAULT 0'),
        ]

        with engine.begin() as connection:
            for column_name, statement in migration_steps:
                if column_name not in existing_columns:
                    connection.execute(text(statement))

        _instructor_schema_checked = True
