"""ARQ background tasks for deployments and domain verification."""
from datetime import timedelta
from typing import Dict, Any

from arq import Retry

from landingpad.config import settings
from landingpad.constants import DeploymentStatus, VerificationStatus
from landingpad.database import SessionLocal
from landingpad.models import Deployment
from landingpad.services.domains import verify_domain
from landingpad.services.dns import DnsChecker
from landingpad.services.publish import run_deployment
from landingpad.utils.exceptions import AppException
from landingpad.utils.job_queue import queue_deployment
from landingpad.utils.logger import logger
from landingpad.utils.time import utc_now


def _open_db(ctx: Dict[str, Any]):
    return ctx.get("db_factory", SessionLocal)()


async def process_deployment(ctx: Dict[str, Any], deployment_id: str) -> Dict[str, Any]:
    """
    Build and publish a queued deployment.

    Args:
        ctx: ARQ context
        deployment_id: The deployment to process

    Returns:
        Dict with success status and details
    """
    db = _open_db(ctx)
    try:
        deployment = run_deployment(db, deployment_id, attempt=ctx.get("job_try", 1))
        return {
            "success": deployment.status == DeploymentStatus.SUCCESS,
            "deployment_id": str(deployment.id),
            "status": deployment.status,
            "deployment_url": deployment.deployment_url,
        }
    except AppException as e:
        logger.error(f"Error processing deployment {deployment_id}: {e.message}")
        return {"success": False, "error": e.message}
    finally:
        db.close()


async def verify_domain_task(ctx: Dict[str, Any], domain_id: str) -> Dict[str, Any]:
    """
    Verify a domain's DNS records, retrying while records may still be propagating.

    Args:
        ctx: ARQ context
        domain_id: The domain to verify

    Returns:
        Dict with the verification outcome

    Raises:
        Retry: While verification fails and attempts remain
    """
    db = _open_db(ctx)
    job_try = ctx.get("job_try", 1)
    try:
        domain = await verify_domain(db, domain_id, ctx.get("dns_checker") or DnsChecker())
        if (
            domain.verification_status == VerificationStatus.FAILED
            and job_try < settings.domain_verification_max_tries
        ):
            delay = 60 * 2 ** (job_try - 1)  # 1min, 2min, 4min, ...
            logger.info(
                f"Verification of {domain.name} failed on attempt {job_try}, retrying in {delay}s"
            )
            raise Retry(defer=delay)

        return {
            "success": domain.verification_status == VerificationStatus.VERIFIED,
            "domain_id": str(domain.id),
            "verification_status": domain.verification_status,
            "status": domain.status,
            "errors": domain.verification_errors,
        }
    except AppException as e:
        logger.error(f"Error verifying domain {domain_id}: {e.message}")
        return {"success": False, "error": e.message}
    finally:
        db.close()


async def requeue_stale_deployments(ctx: Dict[str, Any]) -> Dict[str, Any]:
    """
    Re-queue deployments that have been waiting in 'queued' for too long.

    Jobs are keyed by deployment ID, so a deployment whose job is still
    waiting is not queued twice.

    Returns:
        Dict with the number of deployments re-queued
    """
    db = _open_db(ctx)
    enqueue = ctx.get("enqueue", queue_deployment)
    try:
        threshold = utc_now() - timedelta(minutes=settings.stale_deployment_minutes)
        stale = db.query(Deployment).filter(
            Deployment.status == DeploymentStatus.QUEUED,
            Deployment.created_at < threshold,
        ).all()

        requeued = 0
        for deployment in stale:
            if await enqueue(str(deployment.id)):
                requeued += 1

        if requeued:
            logger.info(f"Re-queued {requeued} stale deployments")
        return {"success": True, "deployments_requeued": requeued}
    finally:
        db.close()
