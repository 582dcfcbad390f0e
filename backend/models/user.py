"""User model definitions."""

import enum

from sqlalchemy import Column, Integer, String
from backend.database import Base


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    INSTRUCTOR = "instructor"


class User(Base):
    """Represents an application user."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True)
    hashed_password = Column(String)
    first_name = Column(String, default="")
    last_name = Column(String, default="")
    role = Column(String)  # admin/instructor
