from datetime import timedelta

import pytest
from arq import Retry

from conftest import fake_dns_transport, published_answers
from landingpad.constants import DeploymentStatus, VerificationStatus
from landingpad.database import SessionLocal
from landingpad.models import Deployment, Domain
from landingpad.services import deployments as deployment_service
from landingpad.services import domains as domain_service
from landingpad.services.dns import DnsChecker
from landingpad.utils.time import utc_now
from landingpad.workers.config import WorkerSettings
from landingpad.workers.tasks import process_deployment, requeue_stale_deployments, verify_domain_task


def worker_ctx(job_try=1, **extra):
    return {"db_factory": SessionLocal, "job_try": job_try, **extra}


def checker_for(answers) -> DnsChecker:
    return DnsChecker(resolver_url="https://dns.test/dns-query", transport=fake_dns_transport(answers))


def test_worker_registers_tasks() -> None:
    names = {f.__name__ for f in WorkerSettings.functions}
    assert names == {"process_deployment", "verify_domain_task", "requeue_stale_deployments"}
    assert WorkerSettings.max_tries >= 3


@pytest.mark.asyncio
async def test_process_deployment_builds_site(db, website) -> None:
    deployment_id = str(deployment_service.create_deployment(db, website.id, website.user_id, "v1").id)

    result = await process_deployment(worker_ctx(job_try=2), deployment_id)

    assert result["success"] is True
    assert result["status"] == DeploymentStatus.SUCCESS
    db.expire_all()
    deployment = db.query(Deployment).first()
    assert "attempt 2" in deployment.build_logs


@pytest.mark.asyncio
async def test_process_deployment_of_unknown_id(db) -> None:
    result = await process_deployment(worker_ctx(), "00000000-0000-0000-0000-000000000000")
    assert result["success"] is False
    assert "not found" in result["error"]


@pytest.mark.asyncio
async def test_verify_domain_task_retries_while_dns_propagates(db, website) -> None:
    domain_id = str(domain_service.create_domain(db, website.id, website.user_id, "example.com").id)

    with pytest.raises(Retry):
        await verify_domain_task(worker_ctx(job_try=1, dns_checker=checker_for({})), domain_id)

    db.expire_all()
    assert db.query(Domain).first().verification_status == VerificationStatus.FAILED


@pytest.mark.asyncio
async def test_verify_domain_task_gives_up_after_last_try(db, website) -> None:
    domain_id = str(domain_service.create_domain(db, website.id, website.user_id, "example.com").id)

    result = await verify_domain_task(worker_ctx(job_try=5, dns_checker=checker_for({})), domain_id)

    assert result["success"] is False
    assert result["verification_status"] == VerificationStatus.FAILED
    assert "No TXT record found" in result["errors"]


@pytest.mark.asyncio
async def test_verify_domain_task_succeeds(db, website) -> None:
    domain = domain_service.create_domain(db, website.id, website.user_id, "example.com")
    checker = checker_for(published_answers(domain))

    result = await verify_domain_task(worker_ctx(dns_checker=checker), str(domain.id))

    assert result["success"] is True
    assert result["status"] == "active"


@pytest.mark.asyncio
async def test_requeue_stale_deployments(db, website) -> None:
    stale = deployment_service.create_deployment(db, website.id, website.user_id, "v1")
    stale.created_at = utc_now() - timedelta(hours=1)
    db.commit()
    stale_id = str(stale.id)
    deployment_service.create_deployment(db, website.id, website.user_id, "v2")

    queued = []

    async def enqueue(deployment_id: str) -> bool:
        queued.append(deployment_id)
        return True

    result = await requeue_stale_deployments(worker_ctx(enqueue=enqueue))

    assert result == {"success": True, "deployments_requeued": 1}
    assert queued == [stale_id]
