"""Appointment model definitions."""

import enum
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, Date, DateTime, Float, ForeignKey, String
from sqlalchemy.orm import relationship
from backend.database import Base


class AppointmentStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Appointment(Base):
    """Represents a scheduled driving lesson."""
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True)
    instructor_id = Column(Integer, ForeignKey("instructors.id"), nullable=False)
    candidate_id = Column(Integer, ForeignKey("candidates.id"), nullable=False)
    car_id = Column(Integer, ForeignKey("cars.id"), nullable=True)
    date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    hours = Column(Float, nullable=False)
    status = Column(String, default=AppointmentStatus.SCHEDULED.value, nullable=False)
    notes = Column(String, default="")
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    instructor = relationship("Instructor")
    candidate = relationship("Candidate")
    car = relationship("Car")
