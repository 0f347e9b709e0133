"""Schemas for custom domains."""
from pydantic import BaseModel, Field
from typing import Optional, List

from landingpad.utils.serialization import serialize_datetime


class DomainCreate(BaseModel):
    """Request schema for attaching a domain to a website."""
    name: str = Field(..., description="Domain name, e.g. www.example.com")


class DnsRecord(BaseModel):
    """A DNS record the owner must publish."""
    type: str
    host: str
    value: str
    ttl: int
    purpose: Optional[str] = None


class DomainResponse(BaseModel):
    """Domain response."""
    id: str
    website_id: str
    name: str
    status: str
    verification_status: str
    verification_errors: Optional[str] = None
    ssl_status: str = "pending"
    is_primary: bool
    dns_records: List[DnsRecord] = []
    last_verified_at: Optional[str] = None
    created_at: Optional[str] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_orm(cls, obj) -> "DomainResponse":
        """Convert SQLAlchemy model to response model."""
        return cls(
            id=str(obj.id),
            website_id=str(obj.website_id),
            name=obj.name,
            status=obj.status,
            verification_status=obj.verification_status,
            verification_errors=obj.verification_errors,
            ssl_status=obj.ssl_status,
            is_primary=obj.is_primary,
            dns_records=[DnsRecord(**r) for r in obj.dns_records or []],
            last_verified_at=serialize_datetime(obj.last_verified_at),
            created_at=serialize_datetime(obj.created_at),
        )


class DomainVerificationResponse(BaseModel):
    """Response for a verification request."""
    queued: bool
    domain: DomainResponse
