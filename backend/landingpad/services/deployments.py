"""Deployment records and their status changes."""
import uuid
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from landingpad.constants import DeploymentStatus, WebsiteStatus, DEFAULT_COMMIT_MESSAGE
from landingpad.models import Deployment, Website
from landingpad.services.lifecycle import DEPLOYMENT, validate_transition
from landingpad.services.websites import update_website
from landingpad.utils.db import find_by_id, get_by_id, paginate, parse_uuid
from landingpad.utils.exceptions import ConflictError
from landingpad.utils.logger import logger
from landingpad.utils.time import utc_now


def create_deployment(
    db: Session,
    website_id: str | uuid.UUID,
    user_id: str | uuid.UUID,
    version: Optional[str],
    commit_message: Optional[str] = None,
) -> Deployment:
    """Create a deployment. New deployments always start queued."""
    deployment = Deployment(
        id=uuid.uuid4(),
        website_id=parse_uuid(website_id, "website ID"),
        user_id=parse_uuid(user_id, "user ID"),
        status=DeploymentStatus.QUEUED,
        version=version,
        commit_message=commit_message or DEFAULT_COMMIT_MESSAGE,
    )
    db.add(deployment)
    db.commit()
    db.refresh(deployment)
    logger.info(f"Deployment created: {deployment.id} for website {deployment.website_id}")
    return deployment


def get_deployments(
    db: Session,
    website_id: str | uuid.UUID,
    page: int = 1,
    limit: int = 10,
) -> Dict[str, Any]:
    """List a website's deployments, newest first, one page at a time."""
    query = (
        db.query(Deployment)
        .filter(Deployment.website_id == parse_uuid(website_id, "website ID"))
        .order_by(Deployment.created_at.desc())
    )
    return paginate(query, page=page, limit=limit)


def get_deployment_by_id(db: Session, deployment_id: str | uuid.UUID) -> Optional[Deployment]:
    return find_by_id(db, Deployment, deployment_id)


def get_latest_successful_deployment(db: Session, website_id: str | uuid.UUID) -> Optional[Deployment]:
    return (
        db.query(Deployment)
        .filter(
            Deployment.website_id == parse_uuid(website_id, "website ID"),
            Deployment.status == DeploymentStatus.SUCCESS,
        )
        .order_by(Deployment.created_at.desc())
        .first()
    )


def has_active_deployments(db: Session, website_id: str | uuid.UUID) -> bool:
    return (
        db.query(Deployment)
        .filter(
            Deployment.website_id == parse_uuid(website_id, "website ID"),
            Deployment.status.in_([DeploymentStatus.QUEUED, DeploymentStatus.IN_PROGRESS]),
        )
        .first()
        is not None
    )


def _append_log(deployment: Deployment, line: str) -> None:
    stamped = f"[{utc_now().isoformat()}] {line}"
    deployment.build_logs = f"{deployment.build_logs}\n{stamped}" if deployment.build_logs else stamped


def _transition(deployment: Deployment, target: str) -> None:
    validate_transition(DEPLOYMENT, deployment.status, target)
    deployment.status = target
    if target in DeploymentStatus.TERMINAL:
        deployment.completed_at = utc_now()


def mark_in_progress(db: Session, deployment_id: str | uuid.UUID, log_line: Optional[str] = None) -> Deployment:
    """Move a queued deployment to in_progress when a worker picks it up."""
    deployment = get_by_id(db, Deployment, deployment_id)
    _transition(deployment, DeploymentStatus.IN_PROGRESS)
    _append_log(deployment, log_line or "Build started")
    db.commit()
    db.refresh(deployment)
    logger.info(f"Deployment {deployment.id} in progress")
    return deployment


def mark_success(
    db: Session,
    deployment_id: str | uuid.UUID,
    deployment_url: str,
    build_time: int,
    build_logs: Optional[list] = None,
) -> Deployment:
    """
    Complete a deployment and point its website at it.

    The deployment row and the website pointers are written in one
    transaction, so a successful deployment never exists without the
    website knowing about it.

    Args:
        db: Database session
        deployment_id: The in-progress deployment
        deployment_url: Public URL of the deployed site
        build_time: Build duration in milliseconds
        build_logs: Extra log lines from the build

    Returns:
        The completed deployment
    """
    deployment = get_by_id(db, Deployment, deployment_id)
    try:
        _transition(deployment, DeploymentStatus.SUCCESS)
        deployment.deployment_url = deployment_url
        deployment.build_time = build_time
        for line in build_logs or []:
            _append_log(deployment, line)
        _append_log(deployment, f"Deployment succeeded in {build_time}ms: {deployment_url}")

        update_website(
            db,
            deployment.website_id,
            {
                "last_deployed_at": deployment.completed_at,
                "last_successful_deployment_id": deployment.id,
                "public_url": deployment_url,
                "status": WebsiteStatus.PUBLISHED,
            },
            commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(deployment)
    logger.info(f"Deployment {deployment.id} succeeded in {build_time}ms")
    return deployment


def mark_failed(db: Session, deployment_id: str | uuid.UUID, error_message: str) -> Deployment:
    """Fail an in-progress deployment. The website keeps its last successful deployment."""
    deployment = get_by_id(db, Deployment, deployment_id)
    _transition(deployment, DeploymentStatus.FAILED)
    deployment.error_message = error_message[:255]
    _append_log(deployment, f"[ERROR] {error_message}")
    db.commit()
    db.refresh(deployment)
    logger.info(f"Deployment {deployment.id} failed: {error_message}")
    return deployment


def cancel_deployment(db: Session, deployment_id: str | uuid.UUID) -> Deployment:
    """Cancel a queued or in-progress deployment."""
    deployment = get_by_id(db, Deployment, deployment_id)
    _transition(deployment, DeploymentStatus.CANCELED)
    _append_log(deployment, "Deployment canceled")
    db.commit()
    db.refresh(deployment)
    logger.info(f"Deployment {deployment.id} canceled")
    return deployment


def retry_deployment(
    db: Session,
    deployment_id: str | uuid.UUID,
    user_id: str | uuid.UUID,
) -> Deployment:
    """
    Start over from a failed or canceled deployment.

    The old row is left as history; a new queued deployment is created for
    the same website and version.

    Raises:
        ConflictError: If the deployment did not fail and was not canceled
    """
    previous = get_by_id(db, Deployment, deployment_id)
    if previous.status not in (DeploymentStatus.FAILED, DeploymentStatus.CANCELED):
        raise ConflictError(
            f"Only failed or canceled deployments can be retried (status is '{previous.status}')"
        )
    return create_deployment(
        db,
        website_id=previous.website_id,
        user_id=user_id,
        version=previous.version,
        commit_message=f"Retry of deployment {previous.id}",
    )


def delete_deployment(db: Session, deployment_id: str | uuid.UUID) -> bool:
    """Delete a deployment, clearing any website pointer to it."""
    deployment = find_by_id(db, Deployment, deployment_id)
    if not deployment:
        return False

    db.query(Website).filter(
        Website.last_successful_deployment_id == deployment.id
    ).update({Website.last_successful_deployment_id: None}, synchronize_session="fetch")
    db.delete(deployment)
    db.commit()
    logger.info(f"Deployment deleted: {deployment_id}")
    return True
