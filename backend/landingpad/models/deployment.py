"""Deployment model: one publish attempt of a website."""
from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey, Uuid, func, Index
from sqlalchemy.orm import relationship
import uuid
from landingpad.database import Base
from landingpad.constants import DeploymentStatus
from landingpad.utils.time import utc_now


class Deployment(Base):
    """Deployment model. Status changes go through the deployment lifecycle table."""
    __tablename__ = "deployments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    website_id = Column(Uuid, ForeignKey("websites.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), default=DeploymentStatus.QUEUED, nullable=False, index=True)  # queued|in_progress|success|failed|canceled
    version = Column(String, nullable=True)
    commit_message = Column(String, nullable=True)
    build_time = Column(Integer, nullable=True)  # Build time in milliseconds
    completed_at = Column(DateTime(timezone=True), nullable=True)
    deployment_url = Column(String(500), nullable=True)
    build_logs = Column(Text, nullable=True)
    error_message = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now(), onupdate=utc_now)

    # Relationships
    website = relationship("Website", back_populates="deployments", foreign_keys=[website_id])
    user = relationship("User")

    __table_args__ = (
        Index("idx_deployments_website_created", "website_id", "created_at"),
    )
