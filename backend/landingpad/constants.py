"""Application-wide constants."""


class DeploymentStatus:
    """Deployment status constants."""
    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    SUCCESS = "success"
    FAILED = "failed"
    CANCELED = "canceled"

    ALL = (QUEUED, IN_PROGRESS, SUCCESS, FAILED, CANCELED)
    TERMINAL = (SUCCESS, FAILED, CANCELED)


class DomainStatus:
    """Operational status of a custom domain."""
    PENDING = "pending"
    ACTIVE = "active"
    ERROR = "error"

    ALL = (PENDING, ACTIVE, ERROR)


class VerificationStatus:
    """DNS verification status of a custom domain."""
    PENDING = "pending"
    VERIFIED = "verified"
    FAILED = "failed"

    ALL = (PENDING, VERIFIED, FAILED)


class SslStatus:
    """Certificate status of a custom domain, informational only."""
    PENDING = "pending"
    VALID = "valid"


class WebsiteStatus:
    """Website status constants."""
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


# Element type tags understood by the editor
ELEMENT_TYPES = (
    "hero",
    "features",
    "text",
    "image",
    "gallery",
    "testimonials",
    "pricing",
    "contact",
    "cta",
    "custom",
)

DOMAIN_NAME_PATTERN = r"^([a-z0-9]+(-[a-z0-9]+)*\.)+[a-z]{2,}$"
DNS_RECORD_TTL = 3600
VERIFICATION_RECORD_PREFIX = "_landingpad-verification"

DEFAULT_COMMIT_MESSAGE = "User initiated deployment"
