"""Website model: the aggregate root for documents, deployments and domains."""
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, JSON, Uuid, func
from sqlalchemy.orm import relationship
import uuid
from landingpad.database import Base
from landingpad.constants import WebsiteStatus
from landingpad.editor.defaults import default_pages, default_settings


def default_content() -> dict:
    return {"pages": default_pages()}


class Website(Base):
    """Website model."""
    __tablename__ = "websites"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    slug = Column(String, nullable=False, unique=True, index=True)
    status = Column(String(20), default=WebsiteStatus.DRAFT, nullable=False, index=True)  # draft|published|archived
    content = Column(JSON, nullable=False, default=default_content)  # {"pages": [...]}
    settings = Column(JSON, nullable=False, default=default_settings)
    public_url = Column(String(500), nullable=True)

    # Denormalized publish state
    last_published_at = Column(DateTime(timezone=True), nullable=True)
    last_deployed_at = Column(DateTime(timezone=True), nullable=True)
    last_successful_deployment_id = Column(
        Uuid,
        ForeignKey(
            "deployments.id",
            ondelete="SET NULL",
            use_alter=True,
            name="fk_websites_last_successful_deployment",
        ),
        nullable=True,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("User", backref="websites")
    deployments = relationship(
        "Deployment",
        back_populates="website",
        cascade="all, delete-orphan",
        foreign_keys="Deployment.website_id",
    )
    domains = relationship("Domain", back_populates="website", cascade="all, delete-orphan")
