"""Publishing and deployment history endpoints."""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from landingpad.api.websites import get_owned_website
from landingpad.database import get_db
from landingpad.models import Deployment
from landingpad.schemas.deployment import DeploymentListResponse, DeploymentResponse, PublishRequest
from landingpad.services import deployments as deployment_service
from landingpad.services.publish import Enqueue, publish_website
from landingpad.utils.exceptions import (
    AppException,
    external_service_error,
    handle_database_error,
    not_found_error,
    to_http_exception,
)
from landingpad.utils.job_queue import queue_deployment
from landingpad.utils.logger import logger

router = APIRouter(prefix="/api/websites", tags=["deployments"])


def get_deployment_queue() -> Enqueue:
    """Dependency returning the function that queues deployment builds."""
    return queue_deployment


def get_website_deployment(db: Session, website_id, deployment_id: str) -> Deployment:
    try:
        deployment = deployment_service.get_deployment_by_id(db, deployment_id)
    except AppException as e:
        raise to_http_exception(e)
    if not deployment or deployment.website_id != website_id:
        raise not_found_error("Deployment")
    return deployment


@router.post("/{website_id}/publish", response_model=DeploymentResponse)
async def publish(
    website_id: str,
    request: Optional[PublishRequest] = None,
    user_id: str = Query(..., description="User ID"),
    db: Session = Depends(get_db),
    enqueue: Enqueue = Depends(get_deployment_queue),
) -> DeploymentResponse:
    """
    Publish a website.

    Creates a queued deployment and hands it to the build worker. The
    response returns immediately; poll the deployment for its outcome.

    Args:
        website_id: The website to publish
        request: Optional commit message
        user_id: The user ID (must own the website)
        db: Database session
        enqueue: Build queue

    Returns:
        The queued deployment
    """
    try:
        website = get_owned_website(db, website_id, user_id)
        deployment = await publish_website(
            db,
            website.id,
            user_id,
            commit_message=request.commit_message if request else None,
            enqueue=enqueue,
        )
        return DeploymentResponse.from_orm(deployment)
    except HTTPException:
        raise
    except AppException as e:
        raise to_http_exception(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to publish website {website_id}: {e}", exc_info=True)
        raise handle_database_error(e, "publish")


@router.get("/{website_id}/deployments", response_model=DeploymentListResponse)
async def list_deployments(
    website_id: str,
    user_id: str = Query(..., description="User ID"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Items per page"),
    db: Session = Depends(get_db),
) -> DeploymentListResponse:
    """List a website's deployments, newest first."""
    try:
        website = get_owned_website(db, website_id, user_id)
        result = deployment_service.get_deployments(db, website.id, page=page, limit=limit)
        return DeploymentListResponse(
            deployments=[DeploymentResponse.from_orm(d) for d in result["items"]],
            pagination=result["pagination"],
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to list deployments for website {website_id}: {e}", exc_info=True)
        raise handle_database_error(e, "list_deployments")


@router.get("/{website_id}/deployments/{deployment_id}", response_model=DeploymentResponse)
async def get_deployment(
    website_id: str,
    deployment_id: str,
    user_id: str = Query(..., description="User ID"),
    db: Session = Depends(get_db),
) -> DeploymentResponse:
    """Get one deployment, including its build logs."""
    try:
        website = get_owned_website(db, website_id, user_id)
        return DeploymentResponse.from_orm(get_website_deployment(db, website.id, deployment_id))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to get deployment {deployment_id}: {e}", exc_info=True)
        raise handle_database_error(e, "get_deployment")


@router.post("/{website_id}/deployments/{deployment_id}/cancel", response_model=DeploymentResponse)
async def cancel_deployment(
    website_id: str,
    deployment_id: str,
    user_id: str = Query(..., description="User ID"),
    db: Session = Depends(get_db),
) -> DeploymentResponse:
    """Cancel a queued or in-progress deployment. Finished deployments answer 409."""
    try:
        website = get_owned_website(db, website_id, user_id)
        deployment = get_website_deployment(db, website.id, deployment_id)
        return DeploymentResponse.from_orm(deployment_service.cancel_deployment(db, deployment.id))
    except HTTPException:
        raise
    except AppException as e:
        db.rollback()
        raise to_http_exception(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to cancel deployment {deployment_id}: {e}", exc_info=True)
        raise handle_database_error(e, "cancel_deployment")


@router.post("/{website_id}/deployments/{deployment_id}/retry", response_model=DeploymentResponse)
async def retry_deployment(
    website_id: str,
    deployment_id: str,
    user_id: str = Query(..., description="User ID"),
    db: Session = Depends(get_db),
    enqueue: Enqueue = Depends(get_deployment_queue),
) -> DeploymentResponse:
    """
    Retry a failed or canceled deployment as a new queued deployment.

    Returns:
        The new deployment
    """
    try:
        website = get_owned_website(db, website_id, user_id)
        previous = get_website_deployment(db, website.id, deployment_id)
        deployment = deployment_service.retry_deployment(db, previous.id, user_id)

        if not await enqueue(str(deployment.id)):
            deployment_service.delete_deployment(db, deployment.id)
            raise external_service_error("Could not queue the deployment. Please try again")
        return DeploymentResponse.from_orm(deployment)
    except HTTPException:
        raise
    except AppException as e:
        raise to_http_exception(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to retry deployment {deployment_id}: {e}", exc_info=True)
        raise handle_database_error(e, "retry_deployment")
