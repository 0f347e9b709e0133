"""Publish orchestration: creating deployments and running their builds."""
import time
import uuid
from datetime import datetime
from typing import Awaitable, Callable, Optional

from sqlalchemy.orm import Session

from landingpad.constants import DeploymentStatus
from landingpad.models import Deployment, Website
from landingpad.services import deployments as deployment_service
from landingpad.services.builder import BuildResult, build_site
from landingpad.services.websites import get_website_by_id, update_website
from landingpad.utils.exceptions import BuildError, ExternalServiceError, NotFoundError
from landingpad.utils.job_queue import queue_deployment
from landingpad.utils.logger import logger
from landingpad.utils.time import utc_now

Enqueue = Callable[[str], Awaitable[bool]]
Builder = Callable[[Website, str], BuildResult]


def generate_version(now: Optional[datetime] = None) -> str:
    """Version label for a deployment, e.g. 2025.11.03.14.05."""
    now = now or utc_now()
    return now.strftime("%Y.%m.%d.%H.%M")


def categorize_deployment_error(error: Exception) -> str:
    """
    Classify a build failure for the deployment's error message.

    Returns:
        One of: build_error, timeout, network_error, not_found,
        database_error, unknown_error
    """
    if isinstance(error, BuildError):
        return "build_error"
    if isinstance(error, NotFoundError):
        return "not_found"

    message = str(error).lower()
    if isinstance(error, TimeoutError) or "timeout" in message or "timed out" in message:
        return "timeout"
    if isinstance(error, ConnectionError) or "network" in message or "connection" in message:
        return "network_error"
    if "database" in message or "sql" in message:
        return "database_error"
    return "unknown_error"


async def publish_website(
    db: Session,
    website_id: str | uuid.UUID,
    user_id: str | uuid.UUID,
    commit_message: Optional[str] = None,
    enqueue: Enqueue = queue_deployment,
) -> Deployment:
    """
    Create a queued deployment for a website and hand it to the build queue.

    The website's last_published_at is only touched once the job is queued;
    if queuing fails the new deployment is removed again and the website is
    left as it was.

    Raises:
        NotFoundError: If the website does not exist for this user
        ExternalServiceError: If the build job could not be queued
    """
    website = get_website_by_id(db, website_id, user_id)
    if not website:
        raise NotFoundError("Website not found")

    logger.info(f"Publishing website {website.id} for user {user_id}")
    deployment = deployment_service.create_deployment(
        db,
        website_id=website.id,
        user_id=user_id,
        version=generate_version(),
        commit_message=commit_message,
    )

    queued = await enqueue(str(deployment.id))
    if not queued:
        deployment_service.delete_deployment(db, deployment.id)
        raise ExternalServiceError("Could not queue the deployment. Please try again")

    update_website(db, website.id, {"last_published_at": utc_now()})
    return deployment


def _is_canceled(db: Session, deployment: Deployment) -> bool:
    db.refresh(deployment)
    return deployment.status == DeploymentStatus.CANCELED


def run_deployment(
    db: Session,
    deployment_id: str | uuid.UUID,
    builder: Builder = build_site,
    attempt: int = 1,
) -> Deployment:
    """
    Run the build for a queued deployment.

    Deployments that are no longer queued (already picked up, canceled) are
    returned untouched. A deployment canceled while building stays canceled.
    Build errors end the deployment as failed with a categorized message.

    Args:
        db: Database session
        deployment_id: The deployment to build
        builder: Build step, build_site by default
        attempt: Worker attempt number, for the build log

    Returns:
        The deployment in its final state
    """
    deployment = deployment_service.get_deployment_by_id(db, deployment_id)
    if not deployment:
        raise NotFoundError(f"Deployment {deployment_id} not found")
    if deployment.status != DeploymentStatus.QUEUED:
        logger.info(f"Skipping deployment {deployment.id} with status {deployment.status}")
        return deployment

    deployment = deployment_service.mark_in_progress(
        db, deployment.id, f"Deployment attempt {attempt} started"
    )
    started = time.monotonic()

    try:
        website = db.query(Website).filter(Website.id == deployment.website_id).first()
        if not website:
            raise NotFoundError(f"Website {deployment.website_id} not found")
        result = builder(website, deployment.version)
    except Exception as e:
        category = categorize_deployment_error(e)
        logger.error(f"Deployment {deployment.id} failed ({category}): {e}", exc_info=True)
        if _is_canceled(db, deployment):
            return deployment
        return deployment_service.mark_failed(db, deployment.id, f"{category}: {e}")

    if _is_canceled(db, deployment):
        logger.info(f"Deployment {deployment.id} was canceled during the build")
        return deployment

    build_time = int((time.monotonic() - started) * 1000)
    return deployment_service.mark_success(
        db,
        deployment.id,
        deployment_url=result.deployment_url,
        build_time=build_time,
        build_logs=result.logs,
    )
