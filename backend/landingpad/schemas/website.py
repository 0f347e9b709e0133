"""Schemas for websites and their editor documents."""
from pydantic import BaseModel, Field, model_validator
from typing import Optional, Dict, Any, List

from landingpad.utils.serialization import serialize_uuid, serialize_datetime


class ElementSchema(BaseModel):
    """One block on a page. Unknown type tags are stored as given."""
    id: str
    type: str
    content: Dict[str, Any] = Field(default_factory=dict)
    position: int
    settings: Optional[Dict[str, Any]] = None


class PageSchema(BaseModel):
    """A page of the website document."""
    id: str
    name: str
    slug: str
    isHome: bool = False
    elements: List[ElementSchema] = Field(default_factory=list)


class WebsiteSettingsSchema(BaseModel):
    """Theme settings. Missing keys are filled from the defaults on load."""
    colors: Dict[str, str] = Field(default_factory=dict)
    fonts: Dict[str, str] = Field(default_factory=dict)
    globalStyles: Dict[str, str] = Field(default_factory=dict)


class ProjectDocument(BaseModel):
    """Full editor document, as saved by the editor and served back to it."""
    id: str
    name: str
    settings: WebsiteSettingsSchema = Field(default_factory=WebsiteSettingsSchema)
    pages: List[PageSchema]

    @model_validator(mode="after")
    def check_pages(self) -> "ProjectDocument":
        if not self.pages:
            raise ValueError("A website needs at least one page")
        home_count = sum(1 for p in self.pages if p.isHome)
        if home_count != 1:
            raise ValueError(f"Exactly one page must be the home page (found {home_count})")
        page_ids = [p.id for p in self.pages]
        if len(set(page_ids)) != len(page_ids):
            raise ValueError("Page IDs must be unique")
        return self


class WebsiteCreate(BaseModel):
    """Request schema for creating a website."""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    user_id: str


class WebsiteResponse(BaseModel):
    """Website summary response."""
    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    slug: str
    status: str
    public_url: Optional[str] = None
    last_published_at: Optional[str] = None
    last_deployed_at: Optional[str] = None
    last_successful_deployment_id: Optional[str] = None
    created_at: Optional[str] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_orm(cls, obj) -> "WebsiteResponse":
        """Convert SQLAlchemy model to response model."""
        return cls(
            id=str(obj.id),
            user_id=str(obj.user_id),
            name=obj.name,
            description=obj.description,
            slug=obj.slug,
            status=obj.status,
            public_url=obj.public_url,
            last_published_at=serialize_datetime(obj.last_published_at),
            last_deployed_at=serialize_datetime(obj.last_deployed_at),
            last_successful_deployment_id=serialize_uuid(obj.last_successful_deployment_id),
            created_at=serialize_datetime(obj.created_at),
        )
