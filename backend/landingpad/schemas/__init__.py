"""Pydantic schemas for request/response validation."""
from landingpad.schemas.website import ProjectDocument, WebsiteCreate, WebsiteResponse
from landingpad.schemas.deployment import DeploymentListResponse, DeploymentResponse, PublishRequest
from landingpad.schemas.domain import DomainCreate, DomainResponse, DomainVerificationResponse

__all__ = [
    "ProjectDocument",
    "WebsiteCreate",
    "WebsiteResponse",
    "DeploymentListResponse",
    "DeploymentResponse",
    "PublishRequest",
    "DomainCreate",
    "DomainResponse",
    "DomainVerificationResponse",
]
