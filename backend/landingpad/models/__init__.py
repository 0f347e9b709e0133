"""Models package."""
from landingpad.models.user import User
from landingpad.models.website import Website
from landingpad.models.deployment import Deployment
from landingpad.models.domain import Domain

__all__ = ["User", "Website", "Deployment", "Domain"]
