"""Job queue helpers for deployment builds and domain verification."""
from arq import create_pool
from landingpad.workers.redis_config import redis_settings
from landingpad.utils.logger import logger


def deployment_job_id(deployment_id: str) -> str:
    """Job ID for a deployment build; one job per deployment."""
    return f"deployment:{deployment_id}"


async def queue_deployment(deployment_id: str) -> bool:
    """
    Queue the build job for a deployment.

    Args:
        deployment_id: The deployment to build

    Returns:
        True if the job was queued (or is already queued), False otherwise
    """
    try:
        redis = await create_pool(redis_settings)
        try:
            job = await redis.enqueue_job(
                "process_deployment",
                deployment_id,
                _job_id=deployment_job_id(deployment_id),
            )
        finally:
            await redis.close()
        if job is None:
            logger.info(f"Deployment {deployment_id} already has a queued job")
        else:
            logger.info(f"Deployment {deployment_id} queued as job {job.job_id}")
        return True
    except Exception as e:
        logger.error(f"Failed to queue deployment {deployment_id}: {e}", exc_info=True)
        return False


async def queue_domain_verification(domain_id: str, defer_seconds: int = 0) -> bool:
    """
    Queue a DNS verification job for a domain.

    Args:
        domain_id: The domain to verify
        defer_seconds: Delay before the job runs

    Returns:
        True if the job was queued, False otherwise
    """
    try:
        redis = await create_pool(redis_settings)
        try:
            await redis.enqueue_job(
                "verify_domain_task",
                domain_id,
                _defer_by=defer_seconds or None,
            )
        finally:
            await redis.close()
        logger.info(f"Domain verification for {domain_id} queued")
        return True
    except Exception as e:
        logger.error(f"Failed to queue verification for domain {domain_id}: {e}", exc_info=True)
        return False
