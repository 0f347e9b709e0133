"""Custom domains: creation, primary selection and DNS verification."""
import re
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from landingpad.config import settings
from landingpad.constants import (
    DNS_RECORD_TTL,
    DOMAIN_NAME_PATTERN,
    VERIFICATION_RECORD_PREFIX,
    DomainStatus,
    SslStatus,
    VerificationStatus,
)
from landingpad.models import Domain
from landingpad.services.dns import DnsChecker
from landingpad.services.lifecycle import DOMAIN_VERIFICATION, validate_transition
from landingpad.utils.db import find_by_id, get_by_id, parse_uuid
from landingpad.utils.exceptions import ConflictError, NotFoundError, ValidationError
from landingpad.utils.hashing import generate_domain_verification_token
from landingpad.utils.logger import logger
from landingpad.utils.time import utc_now

_DOMAIN_RE = re.compile(DOMAIN_NAME_PATTERN, re.IGNORECASE)


def validate_domain_name(name: Optional[str]) -> str:
    """
    Check a domain name and return it normalized to lowercase.

    Raises:
        ValidationError: If the name is missing or malformed
    """
    if not name or not _DOMAIN_RE.match(name.strip()):
        raise ValidationError("Invalid domain name format")
    return name.strip().lower()


def is_apex_domain(name: str) -> bool:
    return len(name.split(".")) == 2


def generate_expected_dns_records(domain: Domain) -> List[Dict[str, Any]]:
    """
    Build the DNS records a user must publish for a domain.

    Returns:
        A TXT ownership record plus an A record (apex names) or a CNAME
        record (subdomains), each as {type, host, value, ttl, purpose}
    """
    records = [
        {
            "type": "TXT",
            "host": f"{VERIFICATION_RECORD_PREFIX}.{domain.name}",
            "value": generate_domain_verification_token(domain.name, str(domain.id)),
            "ttl": DNS_RECORD_TTL,
            "purpose": "Domain ownership verification",
        }
    ]
    if is_apex_domain(domain.name):
        records.append({
            "type": "A",
            "host": domain.name,
            "value": settings.apex_ip,
            "ttl": DNS_RECORD_TTL,
            "purpose": "Apex domain record",
        })
    else:
        records.append({
            "type": "CNAME",
            "host": domain.name,
            "value": settings.cname_target,
            "ttl": DNS_RECORD_TTL,
            "purpose": "Primary domain record",
        })
    return records


def get_domains_by_website_id(db: Session, website_id: str | uuid.UUID) -> List[Domain]:
    """List a website's domains, primary first, then newest first."""
    return (
        db.query(Domain)
        .filter(Domain.website_id == parse_uuid(website_id, "website ID"))
        .order_by(Domain.is_primary.desc(), Domain.created_at.desc())
        .all()
    )


def get_domain_by_id(db: Session, domain_id: str | uuid.UUID) -> Optional[Domain]:
    return find_by_id(db, Domain, domain_id)


def get_domain_by_name(db: Session, name: str) -> Optional[Domain]:
    return db.query(Domain).filter(func.lower(Domain.name) == name.strip().lower()).first()


def check_domain_availability(db: Session, name: str) -> Dict[str, Any]:
    existing = get_domain_by_name(db, name)
    return {
        "name": name,
        "available": existing is None,
        "reason": "Domain is already in use" if existing else None,
    }


def create_domain(
    db: Session,
    website_id: str | uuid.UUID,
    user_id: str | uuid.UUID,
    name: str,
) -> Domain:
    """
    Attach a custom domain to a website.

    Raises:
        ValidationError: If the name is malformed
        ConflictError: If the name is already used by any website
    """
    name = validate_domain_name(name)
    if get_domain_by_name(db, name):
        raise ConflictError("This domain is already in use")

    domain = Domain(
        id=uuid.uuid4(),
        website_id=parse_uuid(website_id, "website ID"),
        user_id=parse_uuid(user_id, "user ID"),
        name=name,
        status=DomainStatus.PENDING,
        verification_status=VerificationStatus.PENDING,
        is_primary=False,
    )
    domain.dns_records = generate_expected_dns_records(domain)
    db.add(domain)
    db.commit()
    db.refresh(domain)
    logger.info(f"Domain created: {domain.name} for website {domain.website_id}")
    return domain


def delete_domain(db: Session, domain_id: str | uuid.UUID) -> bool:
    """
    Remove a domain.

    Raises:
        ConflictError: If the domain is the website's primary domain
    """
    domain = find_by_id(db, Domain, domain_id)
    if not domain:
        return False
    if domain.is_primary:
        raise ConflictError(
            "Cannot remove the primary domain. Please set another domain as primary first."
        )

    db.delete(domain)
    db.commit()
    logger.info(f"Domain deleted: {domain.name}")
    return True


def set_primary_domain(db: Session, website_id: str | uuid.UUID, domain_id: str | uuid.UUID) -> Domain:
    """
    Make a domain the website's primary domain.

    The previous primary is demoted in the same transaction, so the website
    never has two primaries.

    Raises:
        NotFoundError: If the domain does not belong to the website
        ConflictError: If the domain is not active and verified
    """
    website_uuid = parse_uuid(website_id, "website ID")
    domain = find_by_id(db, Domain, domain_id)
    if not domain or domain.website_id != website_uuid:
        raise NotFoundError("Domain not found")
    if domain.status != DomainStatus.ACTIVE or domain.verification_status != VerificationStatus.VERIFIED:
        raise ConflictError("Domain must be active and verified to set as primary")

    try:
        db.query(Domain).filter(
            Domain.website_id == website_uuid,
            Domain.is_primary.is_(True),
            Domain.id != domain.id,
        ).update({Domain.is_primary: False}, synchronize_session="fetch")
        domain.is_primary = True
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(domain)
    logger.info(f"Domain set as primary: {domain.name} for website {website_uuid}")
    return domain


def _set_verification(domain: Domain, target: str) -> None:
    validate_transition(DOMAIN_VERIFICATION, domain.verification_status, target)
    domain.verification_status = target


def reset_verification(db: Session, domain: Domain) -> Domain:
    """Put a domain back to pending before a new verification attempt."""
    if domain.verification_status != VerificationStatus.PENDING:
        _set_verification(domain, VerificationStatus.PENDING)
    domain.status = DomainStatus.PENDING
    db.commit()
    db.refresh(domain)
    return domain


async def verify_domain(
    db: Session,
    domain_id: str | uuid.UUID,
    checker: Optional[DnsChecker] = None,
) -> Domain:
    """
    Check a domain's DNS records and site, and record the outcome.

    The domain is reset to pending first and that state is committed, so
    clients polling the domain see the attempt in flight. All expected
    records must resolve to their expected values, and the domain must then
    serve our site over HTTP, for it to become verified and active;
    otherwise it ends failed with status error and the reasons in
    verification_errors. The HTTPS check only sets ssl_status.

    Args:
        db: Database session
        domain_id: The domain to verify
        checker: DNS and site checker (a default DoH checker when omitted)

    Returns:
        The updated domain
    """
    checker = checker or DnsChecker()
    domain = get_by_id(db, Domain, domain_id, "Domain not found")
    logger.info(f"Verifying domain: {domain.name} for website {domain.website_id}")

    if not domain.dns_records:
        domain.dns_records = generate_expected_dns_records(domain)
    reset_verification(db, domain)

    errors = []
    for record in domain.dns_records:
        result = await checker.verify_record(record)
        if result.verified:
            logger.info(f"DNS record verified: {result.record_type} for {domain.name}")
        else:
            errors.append(result.error)

    if not errors:
        http_result = await checker.verify_http_endpoint(domain.name)
        if http_result.verified:
            logger.info(f"HTTP verification successful for {domain.name}")
        else:
            logger.warning(f"HTTP verification failed for {domain.name}: {http_result.error}")
            errors.append(f"HTTP verification failed: {http_result.error}")

    if errors:
        _set_verification(domain, VerificationStatus.FAILED)
        domain.status = DomainStatus.ERROR
        domain.ssl_status = SslStatus.PENDING
        domain.verification_errors = "; ".join(errors)
        db.commit()
        db.refresh(domain)
        logger.info(f"Domain verification failed: {domain.name}, errors: {domain.verification_errors}")
        return domain

    # Only ssl_status depends on the certificate
    ssl_result = await checker.verify_ssl_certificate(domain.name)
    if not ssl_result.verified:
        logger.warning(f"SSL not ready for {domain.name}: {ssl_result.error}")

    _set_verification(domain, VerificationStatus.VERIFIED)
    domain.status = DomainStatus.ACTIVE
    domain.ssl_status = SslStatus.VALID if ssl_result.verified else SslStatus.PENDING
    domain.verification_errors = None
    domain.last_verified_at = utc_now()
    db.commit()
    db.refresh(domain)
    logger.info(f"Domain verification successful: {domain.name}")

    # The first active domain of a website without a primary becomes primary
    siblings = get_domains_by_website_id(db, domain.website_id)
    active = [d for d in siblings if d.status == DomainStatus.ACTIVE]
    if len(active) == 1 and not any(d.is_primary for d in siblings):
        domain = set_primary_domain(db, domain.website_id, domain.id)

    return domain
