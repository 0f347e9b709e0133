"""DNS and site reachability checks for custom domain verification."""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import httpx

from landingpad.config import settings
from landingpad.utils.exceptions import ExternalServiceError
from landingpad.utils.logger import logger

# DNS RR type codes used in DoH JSON answers
RECORD_TYPE_CODES: Dict[str, int] = {
    "A": 1,
    "CNAME": 5,
    "MX": 15,
    "TXT": 16,
    "AAAA": 28,
}

NXDOMAIN = 3


@dataclass
class DnsCheckResult:
    """Outcome of checking one expected DNS record."""
    verified: bool
    record_type: str
    host: str
    actual_values: List[str] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class SiteCheckResult:
    """Outcome of an HTTP or HTTPS request to a custom domain."""
    verified: bool
    status_code: Optional[int] = None
    error: Optional[str] = None


def _normalize(record_type: str, value: str) -> str:
    value = value.strip()
    if record_type == "TXT":
        # TXT data arrives quoted, possibly split into several strings
        value = "".join(part for part in value.split('"') if part.strip())
    if record_type == "MX" and " " in value:
        value = value.split(" ", 1)[1]
    return value.rstrip(".").lower() if record_type != "TXT" else value


class DnsChecker:
    """
    Resolves DNS records using a DNS-over-HTTPS JSON resolver, and checks
    the site a domain serves over HTTP and HTTPS.

    One transport is shared by the resolver and the site requests.
    """

    def __init__(
        self,
        resolver_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.resolver_url = resolver_url or settings.dns_resolver_url
        self.timeout = timeout or settings.dns_timeout_seconds
        self.transport = transport

    async def resolve(self, host: str, record_type: str) -> List[str]:
        """
        Resolve the records of one type for a host.

        Args:
            host: Hostname to look up
            record_type: A, AAAA, CNAME, TXT or MX

        Returns:
            Normalized record values; empty if the name or record does not exist

        Raises:
            ValueError: For an unsupported record type
            ExternalServiceError: If the resolver could not be reached
        """
        record_type = record_type.upper()
        if record_type not in RECORD_TYPE_CODES:
            raise ValueError(f"Unsupported record type: {record_type}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(
                    self.resolver_url,
                    params={"name": host, "type": record_type},
                    headers={"accept": "application/dns-json"},
                )
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"DNS lookup for {host} failed: {e}") from e

        if response.status_code != 200:
            raise ExternalServiceError(
                f"DNS resolver returned {response.status_code} for {host}"
            )

        payload = response.json()
        if payload.get("Status") == NXDOMAIN:
            return []

        wanted = RECORD_TYPE_CODES[record_type]
        return [
            _normalize(record_type, answer.get("data", ""))
            for answer in payload.get("Answer") or []
            if answer.get("type") == wanted
        ]

    async def verify_record(self, record: dict) -> DnsCheckResult:
        """
        Check that an expected record ({type, host, value}) is published.

        Lookup failures are reported as unverified results rather than raised,
        so one unreachable record does not hide the others.
        """
        record_type = record["type"].upper()
        host = record["host"]
        expected = _normalize(record_type, record["value"])

        try:
            values = await self.resolve(host, record_type)
        except (ExternalServiceError, ValueError) as e:
            logger.warning(f"DNS check error for {record_type} {host}: {e}")
            return DnsCheckResult(False, record_type, host, error=str(e))

        if not values:
            return DnsCheckResult(False, record_type, host, error=f"No {record_type} record found for {host}")

        if expected.lower() not in [v.lower() for v in values]:
            return DnsCheckResult(
                False,
                record_type,
                host,
                actual_values=values,
                error=(
                    f"{record_type} record for {host} does not match expected value. "
                    f"Found: {values}, Expected: {expected}"
                ),
            )

        return DnsCheckResult(True, record_type, host, actual_values=values)

    def _site_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=settings.site_check_timeout_seconds,
            transport=self.transport,
            follow_redirects=True,
            max_redirects=5,
        )

    async def verify_http_endpoint(self, domain_name: str) -> SiteCheckResult:
        """
        Check that the domain serves our site over plain HTTP.

        Redirects are followed (usually to HTTPS). Any status below 500 counts
        as reachable; the response must then identify our hosting through the
        "server" or "x-powered-by" header. In development any reachable
        response is accepted.
        """
        try:
            async with self._site_client() as client:
                response = await client.get(f"http://{domain_name}")
        except httpx.HTTPError as e:
            return SiteCheckResult(False, error=f"Could not connect to domain: {e}")

        if response.status_code >= 500:
            return SiteCheckResult(
                False,
                status_code=response.status_code,
                error=f"Domain answered with status {response.status_code}",
            )

        is_ours = (
            response.headers.get("server") == settings.hosting_server_header
            or settings.hosting_powered_by in response.headers.get("x-powered-by", "")
        )
        if is_ours or settings.environment == "development":
            return SiteCheckResult(True, status_code=response.status_code)

        return SiteCheckResult(
            False,
            status_code=response.status_code,
            error="Domain does not point to our servers. Check your DNS configuration.",
        )

    async def verify_ssl_certificate(self, domain_name: str) -> SiteCheckResult:
        """Check that the domain answers over HTTPS with a certificate the client accepts."""
        try:
            async with self._site_client() as client:
                response = await client.get(f"https://{domain_name}")
        except httpx.ConnectError as e:
            if "certificate" in str(e).lower():
                return SiteCheckResult(False, error=f"SSL certificate issue: {e}")
            return SiteCheckResult(False, error=f"HTTPS connection failed: {e}")
        except httpx.HTTPError as e:
            return SiteCheckResult(False, error=f"HTTPS connection failed: {e}")

        if response.status_code >= 500:
            return SiteCheckResult(
                False,
                status_code=response.status_code,
                error=f"HTTPS request answered with status {response.status_code}",
            )
        return SiteCheckResult(True, status_code=response.status_code)
