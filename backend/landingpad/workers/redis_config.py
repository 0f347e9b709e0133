"""Redis connection settings shared by the job queue and the worker."""
from urllib.parse import urlparse

from arq.connections import RedisSettings

from landingpad.config import settings


def parse_redis_url(url: str) -> RedisSettings:
    """
    Build ARQ RedisSettings from a redis:// or rediss:// URL.

    The database number is taken from the path (redis://host:6379/2);
    rediss:// enables TLS.
    """
    parsed = urlparse(url)
    database = parsed.path.lstrip("/")
    return RedisSettings(
        host=parsed.hostname or "localhost",
        port=parsed.port or 6379,
        username=parsed.username,
        password=parsed.password,
        database=int(database) if database else 0,
        ssl=parsed.scheme == "rediss",
        conn_retries=3,
    )


redis_settings = parse_redis_url(settings.redis_url)
