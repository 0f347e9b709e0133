"""Custom domain endpoints."""
from typing import Awaitable, Callable, List
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from landingpad.api.websites import get_owned_website
from landingpad.database import get_db
from landingpad.models import Domain
from landingpad.schemas.domain import DomainCreate, DomainResponse, DomainVerificationResponse
from landingpad.services import domains as domain_service
from landingpad.services.dns import DnsChecker
from landingpad.utils.exceptions import (
    AppException,
    external_service_error,
    handle_database_error,
    not_found_error,
    to_http_exception,
)
from landingpad.utils.job_queue import queue_domain_verification
from landingpad.utils.logger import logger

router = APIRouter(prefix="/api/websites", tags=["domains"])


def get_dns_checker() -> DnsChecker:
    """Dependency returning the DNS checker used for inline verification."""
    return DnsChecker()


def get_verification_queue() -> Callable[[str], Awaitable[bool]]:
    """Dependency returning the function that queues background verification."""
    return queue_domain_verification


def get_website_domain(db: Session, website_id, domain_id: str) -> Domain:
    try:
        domain = domain_service.get_domain_by_id(db, domain_id)
    except AppException as e:
        raise to_http_exception(e)
    if not domain or domain.website_id != website_id:
        raise not_found_error("Domain")
    return domain


@router.get("/{website_id}/domains", response_model=List[DomainResponse])
async def list_domains(
    website_id: str,
    user_id: str = Query(..., description="User ID"),
    db: Session = Depends(get_db),
) -> List[DomainResponse]:
    """List a website's domains, primary first."""
    try:
        website = get_owned_website(db, website_id, user_id)
        return [DomainResponse.from_orm(d) for d in domain_service.get_domains_by_website_id(db, website.id)]
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to list domains for website {website_id}: {e}", exc_info=True)
        raise handle_database_error(e, "list_domains")


@router.post("/{website_id}/domains", response_model=DomainResponse)
async def add_domain(
    website_id: str,
    request: DomainCreate,
    user_id: str = Query(..., description="User ID"),
    db: Session = Depends(get_db),
) -> DomainResponse:
    """
    Attach a custom domain to a website.

    The response lists the DNS records the owner has to publish before
    the domain can be verified.

    Args:
        website_id: The website the domain points at
        request: Domain name
        user_id: The user ID (must own the website)
        db: Database session

    Returns:
        The pending domain with its expected DNS records
    """
    try:
        website = get_owned_website(db, website_id, user_id)
        domain = domain_service.create_domain(db, website.id, user_id, request.name)
        return DomainResponse.from_orm(domain)
    except HTTPException:
        raise
    except AppException as e:
        raise to_http_exception(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to add domain {request.name}: {e}", exc_info=True)
        raise handle_database_error(e, "add_domain")


@router.delete("/{website_id}/domains/{domain_id}")
async def remove_domain(
    website_id: str,
    domain_id: str,
    user_id: str = Query(..., description="User ID"),
    db: Session = Depends(get_db),
) -> dict[str, bool]:
    """Remove a domain. The primary domain cannot be removed."""
    try:
        website = get_owned_website(db, website_id, user_id)
        domain = get_website_domain(db, website.id, domain_id)
        domain_service.delete_domain(db, domain.id)
        return {"success": True}
    except HTTPException:
        raise
    except AppException as e:
        raise to_http_exception(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to remove domain {domain_id}: {e}", exc_info=True)
        raise handle_database_error(e, "remove_domain")


@router.put("/{website_id}/domains/{domain_id}/primary", response_model=DomainResponse)
async def set_primary(
    website_id: str,
    domain_id: str,
    user_id: str = Query(..., description="User ID"),
    db: Session = Depends(get_db),
) -> DomainResponse:
    """Make a verified, active domain the website's primary domain."""
    try:
        website = get_owned_website(db, website_id, user_id)
        domain = domain_service.set_primary_domain(db, website.id, domain_id)
        return DomainResponse.from_orm(domain)
    except HTTPException:
        raise
    except AppException as e:
        raise to_http_exception(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to set primary domain {domain_id}: {e}", exc_info=True)
        raise handle_database_error(e, "set_primary")


@router.post("/{website_id}/domains/{domain_id}/verify", response_model=DomainVerificationResponse)
async def verify(
    website_id: str,
    domain_id: str,
    user_id: str = Query(..., description="User ID"),
    background: bool = Query(False, description="Queue the check instead of running it now"),
    db: Session = Depends(get_db),
    checker: DnsChecker = Depends(get_dns_checker),
    enqueue: Callable[[str], Awaitable[bool]] = Depends(get_verification_queue),
) -> DomainVerificationResponse:
    """
    Check a domain's DNS records.

    By default the check runs inline and the response carries the outcome.
    With ``background=true`` the check is queued (and retried while DNS
    propagates) and the domain is returned as it is now.
    """
    try:
        website = get_owned_website(db, website_id, user_id)
        domain = get_website_domain(db, website.id, domain_id)

        if background:
            if not await enqueue(str(domain.id)):
                raise external_service_error("Could not queue the verification. Please try again")
            return DomainVerificationResponse(queued=True, domain=DomainResponse.from_orm(domain))

        domain = await domain_service.verify_domain(db, domain.id, checker)
        return DomainVerificationResponse(queued=False, domain=DomainResponse.from_orm(domain))
    except HTTPException:
        raise
    except AppException as e:
        raise to_http_exception(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to verify domain {domain_id}: {e}", exc_info=True)
        raise handle_database_error(e, "verify_domain")
