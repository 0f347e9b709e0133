"""Hashing utilities for domain ownership tokens."""
import hashlib
from landingpad.config import settings


def generate_domain_verification_token(domain_name: str, domain_id: str) -> str:
    """
    Derive the TXT ownership token for a domain.

    The token is stable for a given domain row, so the DNS instructions shown
    to the user never change between verification attempts.

    Args:
        domain_name: The custom domain name
        domain_id: The domain's ID

    Returns:
        Token string (format: landingpad-verify=<24 hex chars>)
    """
    salted = f"{domain_name}-{domain_id}-{settings.secret_key}"
    digest = hashlib.sha256(salted.encode()).hexdigest()
    return f"landingpad-verify={digest[:24]}"
