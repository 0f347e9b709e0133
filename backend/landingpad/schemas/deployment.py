"""Schemas for deployments."""
from pydantic import BaseModel, Field
from typing import Optional, List

from landingpad.utils.serialization import serialize_datetime


class PublishRequest(BaseModel):
    """Request schema for publishing a website."""
    commit_message: Optional[str] = Field(None, max_length=500, description="Optional deployment note")


class DeploymentResponse(BaseModel):
    """Deployment response."""
    id: str
    website_id: str
    user_id: str
    status: str
    version: Optional[str] = None
    commit_message: Optional[str] = None
    build_time: Optional[int] = None
    completed_at: Optional[str] = None
    deployment_url: Optional[str] = None
    build_logs: Optional[str] = None
    error_message: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_orm(cls, obj) -> "DeploymentResponse":
        """Convert SQLAlchemy model to response model."""
        return cls(
            id=str(obj.id),
            website_id=str(obj.website_id),
            user_id=str(obj.user_id),
            status=obj.status,
            version=obj.version,
            commit_message=obj.commit_message,
            build_time=obj.build_time,
            completed_at=serialize_datetime(obj.completed_at),
            deployment_url=obj.deployment_url,
            build_logs=obj.build_logs,
            error_message=obj.error_message,
            created_at=serialize_datetime(obj.created_at),
            updated_at=serialize_datetime(obj.updated_at),
        )


class Pagination(BaseModel):
    total_items: int
    items_per_page: int
    current_page: int
    total_pages: int


class DeploymentListResponse(BaseModel):
    """One page of a website's deployments, newest first."""
    deployments: List[DeploymentResponse]
    pagination: Pagination
