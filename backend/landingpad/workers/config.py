"""ARQ worker configuration."""
from arq.cron import cron
from landingpad.config import settings
from landingpad.database import SessionLocal
from landingpad.services.dns import DnsChecker
from landingpad.utils.logger import logger
from landingpad.workers.redis_config import redis_settings

from landingpad.workers.tasks import process_deployment, verify_domain_task, requeue_stale_deployments


async def startup(ctx):
    """Worker startup hook."""
    logger.info("ARQ worker starting up...")
    ctx["db_factory"] = SessionLocal
    ctx["dns_checker"] = DnsChecker()


async def shutdown(ctx):
    """Worker shutdown hook."""
    logger.info("ARQ worker shutting down...")


class WorkerSettings:
    """ARQ worker settings."""

    functions = [
        process_deployment,
        verify_domain_task,
        requeue_stale_deployments,
    ]

    cron_jobs = [
        # Sweep for stuck deployments every 5 minutes
        cron(
            requeue_stale_deployments,
            minute={0, 5, 10, 15, 20, 25, 30, 35, 40, 45, 50, 55},
        ),
    ]

    on_startup = startup
    on_shutdown = shutdown

    redis_settings = redis_settings

    # Job configuration
    max_jobs = 5
    job_timeout = 600  # 10 minute timeout for a build
    keep_result = 3600
    retry_jobs = True
    max_tries = max(settings.deployment_max_tries, settings.domain_verification_max_tries)
