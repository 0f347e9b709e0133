import os
import uuid

import pytest

# Settings are read at import time, so configure them before importing the app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ENVIRONMENT"] = "test"

from landingpad.database import Base, SessionLocal, engine  # noqa: E402
from landingpad.models import User  # noqa: E402
from landingpad.services.websites import create_website  # noqa: E402


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def user(db):
    user = User(id=uuid.uuid4(), email="owner@example.com", name="Owner")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def website(db, user):
    return create_website(db, user.id, "Acme Bakery", "Fresh bread daily")


def fake_dns_transport(answers, site_headers=None, site_status=200, https_error=None):
    """
    Build an httpx transport that answers DoH JSON queries from a dict and
    serves every other host as a site.

    Args:
        answers: {(host, type): [data, ...]}; missing keys answer NXDOMAIN
        site_headers: headers of site responses (defaults to our hosting's)
        site_status: status of site responses
        https_error: if set, HTTPS site requests raise httpx.ConnectError with this message
    """
    import httpx
    from landingpad.services.dns import RECORD_TYPE_CODES

    if site_headers is None:
        site_headers = {"server": "Vercel"}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host != "dns.test":
            if https_error and request.url.scheme == "https":
                raise httpx.ConnectError(https_error, request=request)
            return httpx.Response(site_status, headers=site_headers, text="ok")

        host = request.url.params["name"]
        record_type = request.url.params["type"]
        data = answers.get((host, record_type))
        if data is None:
            return httpx.Response(200, json={"Status": 3})
        return httpx.Response(200, json={
            "Status": 0,
            "Answer": [
                {"name": host, "type": RECORD_TYPE_CODES[record_type], "TTL": 300, "data": value}
                for value in data
            ],
        })

    return httpx.MockTransport(handler)


def published_answers(domain):
    """DNS answers that satisfy every expected record of a domain."""
    answers = {}
    for record in domain.dns_records:
        value = record["value"]
        if record["type"] == "TXT":
            value = f'"{value}"'
        elif record["type"] == "CNAME":
            value = f"{value}."
        answers[(record["host"], record["type"])] = [value]
    return answers
