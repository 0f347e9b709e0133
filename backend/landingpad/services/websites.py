"""Website aggregate operations and document conversion."""
import re
import uuid
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from landingpad.editor.defaults import default_pages, default_settings
from landingpad.editor.document import Project
from landingpad.models import Website
from landingpad.utils.db import find_by_id, parse_uuid
from landingpad.utils.logger import logger

# Fields callers may set through update_website
UPDATABLE_FIELDS = {
    "name",
    "description",
    "status",
    "public_url",
    "last_published_at",
    "last_deployed_at",
    "last_successful_deployment_id",
}


def generate_slug(name: str) -> str:
    """Generate a URL-friendly slug from a website name."""
    slug = name.lower()
    # Replace spaces and underscores with hyphens
    slug = re.sub(r'[\s_]+', '-', slug)
    # Remove special characters, keep only alphanumeric and hyphens
    slug = re.sub(r'[^a-z0-9-]', '', slug)
    slug = re.sub(r'-+', '-', slug)
    slug = slug.strip('-')
    if not slug:
        slug = 'website'
    return slug


def get_unique_slug(db: Session, base_slug: str, exclude_website_id: Optional[uuid.UUID] = None) -> str:
    """Generate a slug unused by any website, appending numbers if needed."""
    slug = base_slug
    counter = 1

    while True:
        query = db.query(Website).filter(Website.slug == slug)
        if exclude_website_id:
            query = query.filter(Website.id != exclude_website_id)

        if not query.first():
            return slug

        slug = f"{base_slug}-{counter}"
        counter += 1


def create_website(
    db: Session,
    user_id: str | uuid.UUID,
    name: str,
    description: Optional[str] = None,
) -> Website:
    """Create a website with the default one-page document and settings."""
    website = Website(
        id=uuid.uuid4(),
        user_id=parse_uuid(user_id, "user ID"),
        name=name,
        description=description,
        slug=get_unique_slug(db, generate_slug(name)),
        content={"pages": default_pages()},
        settings=default_settings(),
    )
    db.add(website)
    db.commit()
    db.refresh(website)
    logger.info(f"Website created: {website.id} ({website.slug})")
    return website


def get_website_by_id(
    db: Session,
    website_id: str | uuid.UUID,
    user_id: Optional[str | uuid.UUID] = None,
) -> Optional[Website]:
    """
    Get a website, optionally scoped to its owner.

    Returns:
        The website, or None if it does not exist or belongs to someone else
    """
    website = find_by_id(db, Website, website_id)
    if website and user_id is not None and website.user_id != parse_uuid(user_id, "user ID"):
        return None
    return website


def update_website(
    db: Session,
    website_id: str | uuid.UUID,
    fields: Dict[str, Any],
    commit: bool = True,
) -> Optional[Website]:
    """
    Set denormalized or descriptive fields on a website.

    Args:
        db: Database session
        website_id: The website to update
        fields: Field values; keys outside UPDATABLE_FIELDS are ignored
        commit: Commit immediately, or leave it to the caller's transaction

    Returns:
        The updated website, or None if it does not exist
    """
    website = find_by_id(db, Website, website_id)
    if not website:
        return None

    for key, value in fields.items():
        if key in UPDATABLE_FIELDS:
            setattr(website, key, value)

    if commit:
        db.commit()
        db.refresh(website)
        logger.info(f"Website updated: {website_id}")
    return website


def get_project_document(website: Website) -> Project:
    """Build the editor document for a website row."""
    content = website.content or {}
    return Project.from_dict({
        "id": str(website.id),
        "name": website.name,
        "settings": website.settings,
        "pages": content.get("pages", []),
    })


def save_project_document(db: Session, website: Website, project: Project) -> Website:
    """Store an editor document on its website row. Last write wins."""
    data = project.to_dict()
    website.name = data["name"]
    website.settings = data["settings"]
    website.content = {**(website.content or {}), "pages": data["pages"]}
    db.commit()
    db.refresh(website)
    logger.info(f"Project document saved for website {website.id}")
    return website
