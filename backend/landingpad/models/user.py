"""User model for website owners."""
from sqlalchemy import Column, String, DateTime, Uuid, func
import uuid
from landingpad.database import Base


class User(Base):
    """Website owner/user model."""
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, nullable=False, index=True)
    name = Column(String)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
