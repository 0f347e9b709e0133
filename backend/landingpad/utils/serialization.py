"""Serialization helpers for API response models."""
from datetime import datetime
from typing import Optional
from uuid import UUID


def serialize_uuid(value: Optional[UUID]) -> Optional[str]:
    """
    Serialize UUID to string.

    Args:
        value: UUID value or None

    Returns:
        String representation or None
    """
    return str(value) if value else None


def serialize_datetime(value: Optional[datetime]) -> Optional[str]:
    """Serialize a datetime to an ISO 8601 string, or None."""
    return value.isoformat() if value else None
