"""Candidate model definitions."""

from sqlalchemy import Column, Integer, ForeignKey, String
from backend.database import Base


class Candidate(Base):
    """A learner driver enrolled at the school."""
    __tablename__ = "candidates"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String)
    phone = Column(String)
    status = Column(String, default="active")
    instructor_id = Column(Integer, ForeignKey("instructors.id"), nullable=True)
