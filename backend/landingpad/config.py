"""Application configuration using Pydantic settings."""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_base_url: str = "http://localhost:8000"  # Used by the editor persistence client
    environment: str = "development"

    # Security
    secret_key: str

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:3001"

    # Redis (for ARQ worker)
    redis_url: str = "redis://127.0.0.1:6379"

    # Publishing
    public_base_domain: str = "landingpad.digital"
    cname_target: str = "cname.landingpad.digital"
    apex_ip: str = "76.76.21.21"
    deployment_max_tries: int = 3
    stale_deployment_minutes: int = 15

    # Domain verification
    dns_resolver_url: str = "https://cloudflare-dns.com/dns-query"
    dns_timeout_seconds: float = 10.0
    domain_verification_max_tries: int = 5
    site_check_timeout_seconds: float = 10.0
    hosting_server_header: str = "Vercel"  # "server" header sent by the hosting edge
    hosting_powered_by: str = "Landing Pad"  # expected in "x-powered-by" when self-hosted

    # Editor
    editor_history_limit: int = 100

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
