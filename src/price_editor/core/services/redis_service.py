"""Redis connection service backing the shared rate limit counters."""

from loguru import logger
from redis.asyncio import Redis
from redis.asyncio.retry import Retry
from redis.backoff import ExponentialBackoff

from src.price_editor.runtime.config.config_data import RedisConfig
from src.price_editor.runtime.context import get_config


class RedisService:
    """Owns the Redis client used when counters must be shared across workers.

    When Redis is disabled or not configured the service stays inert and
    ``get_client`` returns None, so callers fall back to in-process state.
    """

    def __init__(self, redis_config: RedisConfig | None = None):
        config = get_config()
        redis_config = redis_config or config.redis

        self._enabled = redis_config.enabled
        self._client: Redis | None = None
        self._url = redis_config.url

        if not self._enabled:
            logger.info("Redis is disabled, service will not connect")
            return

        if not self._url:
            logger.warning("Redis URL not configured, service will not connect")
            self._enabled = False
            return

        logger.info(
            "Initializing Redis client with connection string: {}",
            redis_config.sanitized_connection_string,
        )
        try:
            self._client = Redis.from_url(
                redis_config.connection_string,
                encoding="utf-8",
                decode_responses=redis_config.decode_responses,
                max_connections=redis_config.max_connections,
                socket_timeout=redis_config.socket_timeout,
                socket_connect_timeout=redis_config.socket_connect_timeout,
                health_check_interval=30,
                retry=Retry(ExponentialBackoff(base=1, cap=10), retries=3),
                client_name="price_editor",
            )
        except ValueError as e:
            logger.bind(error_message=str(e)).error("Failed to initialize Redis client")
            self._enabled = False
            self._client = None
            if config.app.environment == "production":
                raise

    def get_client(self) -> Redis | None:
        if not self._enabled:
            return None
        return self._client

    async def health_check(self) -> bool:
        """PING the server; False when disabled or unreachable."""
        if not self._enabled or not self._client:
            return False
        try:
            await self._client.ping()
            return True
        except Exception as e:
            logger.bind(error_type=type(e).__name__, error_message=str(e)).error(
                "Redis health check failed"
            )
            return False

    async def close(self) -> None:
        if self._client:
            try:
                await self._client.aclose()
                logger.info("Redis connection closed")
            except Exception as e:
                logger.bind(error_type=type(e).__name__).error(
                    "Error closing Redis connection"
                )
            finally:
                self._client = None

    @property
    def is_enabled(self) -> bool:
        return self._enabled
