"""Instructor model definitions."""

import enum

from sqlalchemy import Column, Integer, Float, ForeignKey, String
from sqlalchemy.orm import relationship
from backend.database import Base


class InstructorType(str, enum.Enum):
    INSIDER = "insider"
    OUTSIDER = "outsider"


class Instructor(Base):
    """Driving instructor profile with running lesson totals."""
    __tablename__ = "instructors"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    phone = Column(String)
    instructor_type = Column(String, default=InstructorType.INSIDER.value, nullable=False)
    rate_per_hour = Column(Float, nullable=True)
    total_hours = Column(Float, default=0, nullable=False)
    total_credits = Column(Float, default=0, nullable=False)
    status = Column(String, default="active")

    user = relationship("User", lazy="joined")

    @property
    def first_name(self) -> str:
        return self.user.first_name if self.user else ""

    @property
    def last_name(self) -> str:
        return self.user.last_name if self.user else ""

    @property
    def email(self) -> str | None:
        return self.user.email if self.user else None
