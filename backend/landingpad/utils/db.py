"""Database query utility functions."""
import math
from typing import Optional, TypeVar, Type, Any, Dict
from uuid import UUID
from sqlalchemy.orm import Session, Query

from landingpad.utils.exceptions import NotFoundError, ValidationError

T = TypeVar("T")


def parse_uuid(value: str | UUID, label: str = "ID") -> UUID:
    """
    Parse a UUID given as string or UUID.

    Raises:
        ValidationError: If the value is not a valid UUID
    """
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise ValidationError(f"Invalid {label} format")


def find_by_id(db: Session, model: Type[T], id_value: str | UUID) -> Optional[T]:
    """
    Get a model instance by ID, or None.

    Args:
        db: Database session
        model: SQLAlchemy model class
        id_value: ID value (UUID string or UUID object)

    Returns:
        Model instance or None
    """
    return db.query(model).filter(model.id == parse_uuid(id_value, f"{model.__name__} ID")).first()


def get_by_id(
    db: Session,
    model: Type[T],
    id_value: str | UUID,
    error_message: Optional[str] = None,
) -> T:
    """
    Get a model instance by ID.

    Args:
        db: Database session
        model: SQLAlchemy model class
        id_value: ID value (UUID string or UUID object)
        error_message: Custom error message if not found

    Returns:
        Model instance

    Raises:
        NotFoundError: If model not found
        ValidationError: If the ID is malformed
    """
    instance = find_by_id(db, model, id_value)
    if not instance:
        raise NotFoundError(error_message or f"{model.__name__} not found")
    return instance


def paginate(query: Query, page: int = 1, limit: int = 10) -> Dict[str, Any]:
    """
    Slice a query into one page of results.

    Args:
        query: An ordered SQLAlchemy query
        page: 1-based page number
        limit: Items per page

    Returns:
        Dict with "items" and "pagination" (total_items, items_per_page,
        current_page, total_pages)
    """
    page = max(page, 1)
    limit = max(limit, 1)
    total_items = query.count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return {
        "items": items,
        "pagination": {
            "total_items": total_items,
            "items_per_page": limit,
            "current_page": page,
            "total_pages": math.ceil(total_items / limit),
        },
    }
