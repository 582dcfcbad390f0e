"""Car model definitions."""

from sqlalchemy import Column, Integer, String
from backend.database import Base


class Car(Base):
    """A school car used for lessons."""
    __tablename__ = "cars"

    id = Column(Integer, primary_key=True, index=True)
    model = Column(String, nullable=False)
    license_plate = Column(String, unique=True, nullable=False)
    transmission = Column(String)  # manual/automatic
    status = Column(String, default="active")
