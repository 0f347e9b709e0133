"""Websites API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from landingpad.database import get_db
from landingpad.editor.document import Project
from landingpad.models import Website
from landingpad.schemas.website import ProjectDocument, WebsiteCreate, WebsiteResponse
from landingpad.services.websites import (
    create_website,
    get_project_document,
    get_website_by_id,
    save_project_document,
)
from landingpad.utils.exceptions import (
    AppException,
    handle_database_error,
    not_found_error,
    to_http_exception,
    validation_error,
)
from landingpad.utils.logger import logger

router = APIRouter(prefix="/api/websites", tags=["websites"])


def get_owned_website(db: Session, website_id: str, user_id: str) -> Website:
    """
    Load a website owned by ``user_id``.

    Raises:
        HTTPException: 404 if missing or owned by someone else, 400 on malformed IDs
    """
    try:
        website = get_website_by_id(db, website_id, user_id)
    except AppException as e:
        raise to_http_exception(e)
    if not website:
        raise not_found_error("Website")
    return website


@router.post("", response_model=WebsiteResponse)
async def create_website_endpoint(
    website: WebsiteCreate,
    db: Session = Depends(get_db),
) -> WebsiteResponse:
    """
    Create a website with a default home page.

    Args:
        website: Website creation data
        db: Database session

    Returns:
        Created website
    """
    try:
        created = create_website(db, website.user_id, website.name, website.description)
        return WebsiteResponse.from_orm(created)
    except AppException as e:
        raise to_http_exception(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create website: {e}", exc_info=True)
        raise handle_database_error(e, "create_website")


@router.get("/{website_id}", response_model=WebsiteResponse)
async def get_website(
    website_id: str,
    user_id: str = Query(..., description="User ID"),
    db: Session = Depends(get_db),
) -> WebsiteResponse:
    """Get a website's summary and publish state."""
    try:
        return WebsiteResponse.from_orm(get_owned_website(db, website_id, user_id))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to get website {website_id}: {e}", exc_info=True)
        raise handle_database_error(e, "get_website")


@router.get("/{website_id}/project", response_model=ProjectDocument)
async def get_project(
    website_id: str,
    user_id: str = Query(..., description="User ID"),
    db: Session = Depends(get_db),
) -> ProjectDocument:
    """
    Get the editor document of a website.

    Settings are returned fully populated; keys missing in storage are
    filled from the defaults.
    """
    try:
        website = get_owned_website(db, website_id, user_id)
        return ProjectDocument.model_validate(get_project_document(website).to_dict())
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to get project for website {website_id}: {e}", exc_info=True)
        raise handle_database_error(e, "get_project")


@router.put("/{website_id}/project", response_model=ProjectDocument)
async def save_project(
    website_id: str,
    document: ProjectDocument,
    user_id: str = Query(..., description="User ID"),
    db: Session = Depends(get_db),
) -> ProjectDocument:
    """
    Replace the editor document of a website. The last save wins.

    Args:
        website_id: The website being edited
        document: The full document
        user_id: The user ID (must own the website)
        db: Database session

    Returns:
        The stored document
    """
    try:
        website = get_owned_website(db, website_id, user_id)
        if document.id != str(website.id):
            raise validation_error("Document ID does not match the website")

        project = Project.from_dict(document.model_dump())
        website = save_project_document(db, website, project)
        return ProjectDocument.model_validate(get_project_document(website).to_dict())
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to save project for website {website_id}: {e}", exc_info=True)
        raise handle_database_error(e, "save_project")

