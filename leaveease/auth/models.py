from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text

from leaveease.core.enums import Role
from leaveease.db.session import Base


class User(Base):
    """Identity record. Usernames and emails are unique across the system."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    # EMPLOYEE | ADMIN
    role = Column(String(20), nullable=False, default=Role.EMPLOYEE.value)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
