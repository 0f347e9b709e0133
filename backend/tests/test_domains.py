import uuid

import pytest

from conftest import fake_dns_transport, published_answers
from landingpad.constants import DomainStatus, SslStatus, VerificationStatus
from landingpad.models import Domain
from landingpad.services import domains as domain_service
from landingpad.services.dns import DnsChecker
from landingpad.services.websites import create_website
from landingpad.utils.exceptions import ConflictError, NotFoundError, ValidationError
from landingpad.utils.hashing import generate_domain_verification_token


def checker_for(answers, **site) -> DnsChecker:
    return DnsChecker(
        resolver_url="https://dns.test/dns-query", transport=fake_dns_transport(answers, **site)
    )


def make_active(db, domain: Domain) -> Domain:
    domain.status = DomainStatus.ACTIVE
    domain.verification_status = VerificationStatus.VERIFIED
    db.commit()
    db.refresh(domain)
    return domain


@pytest.mark.parametrize("name", ["example.com", "www.example.co.uk", "My-Shop.Example.com"])
def test_validate_domain_name_accepts_and_lowercases(name) -> None:
    assert domain_service.validate_domain_name(name) == name.lower()


@pytest.mark.parametrize("name", ["", "localhost", "-bad.com", "exa mple.com", "example.c"])
def test_validate_domain_name_rejects(name) -> None:
    with pytest.raises(ValidationError, match="Invalid domain name format"):
        domain_service.validate_domain_name(name)


def test_create_domain_starts_pending_with_expected_records(db, website) -> None:
    domain = domain_service.create_domain(db, website.id, website.user_id, "Example.com")

    assert domain.name == "example.com"
    assert domain.status == DomainStatus.PENDING
    assert domain.verification_status == VerificationStatus.PENDING
    assert domain.is_primary is False

    records = {r["type"]: r for r in domain.dns_records}
    assert set(records) == {"TXT", "A"}
    assert records["TXT"]["host"] == "_landingpad-verification.example.com"
    assert records["TXT"]["value"] == generate_domain_verification_token("example.com", str(domain.id))
    assert records["A"]["value"] == "76.76.21.21"


def test_subdomain_gets_cname_record(db, website) -> None:
    domain = domain_service.create_domain(db, website.id, website.user_id, "www.example.com")
    records = {r["type"]: r for r in domain.dns_records}
    assert set(records) == {"TXT", "CNAME"}
    assert records["CNAME"]["value"] == "cname.landingpad.digital"


def test_domain_names_are_globally_unique(db, website, user) -> None:
    domain_service.create_domain(db, website.id, user.id, "example.com")
    other = create_website(db, user.id, "Other Site")

    with pytest.raises(ConflictError, match="already in use"):
        domain_service.create_domain(db, other.id, user.id, "EXAMPLE.com")

    assert domain_service.check_domain_availability(db, "example.com")["available"] is False
    assert domain_service.check_domain_availability(db, "free.example.com")["available"] is True


@pytest.mark.asyncio
async def test_verify_then_set_primary(db, website) -> None:
    domain = domain_service.create_domain(db, website.id, website.user_id, "example.com")

    with pytest.raises(ConflictError, match="must be active and verified"):
        domain_service.set_primary_domain(db, website.id, domain.id)

    domain = await domain_service.verify_domain(db, domain.id, checker_for(published_answers(domain)))

    assert domain.verification_status == VerificationStatus.VERIFIED
    assert domain.status == DomainStatus.ACTIVE
    assert domain.verification_errors is None
    assert domain.last_verified_at is not None
    # First active domain of a website without a primary
    assert domain.is_primary is True

    second = domain_service.create_domain(db, website.id, website.user_id, "www.example.com")
    second = await domain_service.verify_domain(db, second.id, checker_for(published_answers(second)))
    assert second.is_primary is False

    second = domain_service.set_primary_domain(db, website.id, second.id)
    db.refresh(domain)
    assert second.is_primary is True
    assert domain.is_primary is False


@pytest.mark.asyncio
async def test_failed_verification_reports_every_missing_record(db, website) -> None:
    domain = domain_service.create_domain(db, website.id, website.user_id, "example.com")
    answers = published_answers(domain)
    answers[("example.com", "A")] = ["10.0.0.1"]
    del answers[("_landingpad-verification.example.com", "TXT")]

    domain = await domain_service.verify_domain(db, domain.id, checker_for(answers))

    assert domain.verification_status == VerificationStatus.FAILED
    assert domain.status == DomainStatus.ERROR
    assert domain.last_verified_at is None
    assert domain.is_primary is False
    errors = domain.verification_errors.split("; ")
    assert len(errors) == 2
    assert "No TXT record found" in errors[0]
    assert "10.0.0.1" in errors[1]


@pytest.mark.asyncio
async def test_failed_domain_can_be_verified_again(db, website) -> None:
    domain = domain_service.create_domain(db, website.id, website.user_id, "example.com")
    domain = await domain_service.verify_domain(db, domain.id, checker_for({}))
    assert domain.verification_status == VerificationStatus.FAILED

    domain = await domain_service.verify_domain(db, domain.id, checker_for(published_answers(domain)))
    assert domain.verification_status == VerificationStatus.VERIFIED


@pytest.mark.asyncio
async def test_dns_alone_does_not_verify_a_domain_serving_another_site(db, website) -> None:
    domain = domain_service.create_domain(db, website.id, website.user_id, "example.com")
    checker = checker_for(published_answers(domain), site_headers={"server": "nginx"})

    domain = await domain_service.verify_domain(db, domain.id, checker)

    assert domain.verification_status == VerificationStatus.FAILED
    assert domain.status == DomainStatus.ERROR
    assert domain.is_primary is False
    assert domain.verification_errors.startswith("HTTP verification failed: ")
    assert "does not point to our servers" in domain.verification_errors


@pytest.mark.asyncio
async def test_unreachable_site_fails_verification(db, website) -> None:
    domain = domain_service.create_domain(db, website.id, website.user_id, "example.com")
    checker = checker_for(published_answers(domain), site_status=503)

    domain = await domain_service.verify_domain(db, domain.id, checker)

    assert domain.verification_status == VerificationStatus.FAILED
    assert "status 503" in domain.verification_errors


@pytest.mark.asyncio
async def test_ssl_status_follows_https_check(db, website) -> None:
    domain = domain_service.create_domain(db, website.id, website.user_id, "example.com")
    answers = published_answers(domain)

    domain = await domain_service.verify_domain(
        db, domain.id, checker_for(answers, https_error="certificate verify failed")
    )
    assert domain.verification_status == VerificationStatus.VERIFIED
    assert domain.ssl_status == SslStatus.PENDING

    domain = await domain_service.verify_domain(db, domain.id, checker_for(answers))
    assert domain.verification_status == VerificationStatus.VERIFIED
    assert domain.ssl_status == SslStatus.VALID


def test_set_primary_keeps_a_single_primary(db, website) -> None:
    names = ["example.com", "www.example.com", "shop.example.com"]
    domains = [
        make_active(db, domain_service.create_domain(db, website.id, website.user_id, name))
        for name in names
    ]

    for domain in domains + domains[::-1]:
        domain_service.set_primary_domain(db, website.id, domain.id)
        primaries = db.query(Domain).filter(
            Domain.website_id == website.id, Domain.is_primary.is_(True)
        ).all()
        assert [d.id for d in primaries] == [domain.id]


def test_set_primary_rejects_domain_of_another_website(db, website, user) -> None:
    other = create_website(db, user.id, "Other Site")
    domain = make_active(db, domain_service.create_domain(db, other.id, user.id, "example.com"))

    with pytest.raises(NotFoundError):
        domain_service.set_primary_domain(db, website.id, domain.id)


def test_primary_domain_cannot_be_deleted(db, website) -> None:
    domain = make_active(db, domain_service.create_domain(db, website.id, website.user_id, "example.com"))
    domain_service.set_primary_domain(db, website.id, domain.id)

    with pytest.raises(ConflictError, match="primary domain"):
        domain_service.delete_domain(db, domain.id)
    assert domain_service.get_domain_by_id(db, domain.id) is not None


def test_delete_domain(db, website) -> None:
    domain = domain_service.create_domain(db, website.id, website.user_id, "example.com")
    domain_id = domain.id

    assert domain_service.delete_domain(db, domain_id) is True
    assert domain_service.get_domain_by_id(db, domain_id) is None
    assert domain_service.delete_domain(db, uuid.uuid4()) is False


def test_domains_list_primary_first(db, website) -> None:
    first = make_active(db, domain_service.create_domain(db, website.id, website.user_id, "example.com"))
    domain_service.create_domain(db, website.id, website.user_id, "www.example.com")
    domain_service.set_primary_domain(db, website.id, first.id)

    listed = domain_service.get_domains_by_website_id(db, website.id)
    assert listed[0].id == first.id
    assert len(listed) == 2
