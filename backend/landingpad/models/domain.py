"""Domain model for custom hostnames attached to a website."""
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, JSON, Uuid, func
from sqlalchemy.orm import relationship
import uuid
from landingpad.database import Base
from landingpad.constants import DomainStatus, SslStatus, VerificationStatus
from landingpad.utils.time import utc_now


class Domain(Base):
    """Custom domain model."""
    __tablename__ = "domains"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    website_id = Column(Uuid, ForeignKey("websites.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False, unique=True, index=True)
    status = Column(String(20), default=DomainStatus.PENDING, nullable=False, index=True)  # pending|active|error
    verification_status = Column(String(20), default=VerificationStatus.PENDING, nullable=False, index=True)  # pending|verified|failed
    verification_errors = Column(Text, nullable=True)
    ssl_status = Column(String(20), default=SslStatus.PENDING, nullable=False)  # pending|valid
    is_primary = Column(Boolean, default=False, nullable=False)
    dns_records = Column(JSON, nullable=False, default=list)  # [{type, host, value, ttl, purpose}]
    last_verified_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now(), onupdate=utc_now)

    # Relationships
    website = relationship("Website", back_populates="domains")
    user = relationship("User")
