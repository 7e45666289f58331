"""
Redis client for cart storage.

Each cart is a single JSON blob stored under one key and always read and
written wholesale. When Redis is unreachable at startup the client keeps
blobs in an in-process dict instead. Once Redis is attached, storage errors
are raised to the caller.
"""
from typing import Dict, Optional
import logging
from redis.asyncio import Redis, ConnectionPool
from storefront.config import settings

logger = logging.getLogger(__name__)


class RedisClient:
    """Async Redis client wrapper with an in-memory fallback"""

    def __init__(self):
        self._redis: Optional[Redis] = None
        self._pool: Optional[ConnectionPool] = None
        self._fallback: Dict[str, str] = {}

    async def connect(self):
        """Initialize Redis connection pool"""
        try:
            self._pool = ConnectionPool.from_url(
                settings.REDIS_URL,
                decode_responses=True,
                max_connections=10
            )
            self._redis = Redis(connection_pool=self._pool)

            # Test connection
            await self._redis.ping()
            logger.info("Redis connected successfully")
        except Exception as e:
            logger.error(f"Redis connection failed: {e}")
            logger.warning("Running without Redis - carts are kept in process memory")
            self._redis = None

    def use(self, redis: Optional[Redis]):
        """Attach an already configured client (None switches to the in-memory store)"""
        self._redis = redis
        self._fallback.clear()

    async def disconnect(self):
        """Close Redis connection"""
        if self._redis is not None:
            await self._redis.aclose()
            logger.info("Redis disconnected")

    @property
    def is_connected(self) -> bool:
        """Check if Redis is available"""
        return self._redis is not None

    # Blob storage
    #
    # The in-memory dict is only used while no Redis client is attached.
    # With Redis attached, errors propagate so the two stores never diverge.

    async def get_blob(self, key: str) -> Optional[str]:
        """Read the raw blob stored under key"""
        if self._redis is None:
            return self._fallback.get(key)
        try:
            return await self._redis.get(key)
        except Exception as e:
            logger.error(f"Failed to read {key}: {e}")
            raise

    async def set_blob(self, key: str, value: str, ttl: Optional[int] = None):
        """Replace the blob stored under key"""
        if self._redis is None:
            self._fallback[key] = value
            return
        try:
            await self._redis.set(key, value, ex=ttl or None)
        except Exception as e:
            logger.error(f"Failed to write {key}: {e}")
            raise

    async def delete_blob(self, key: str):
        """Delete the blob stored under key"""
        if self._redis is None:
            self._fallback.pop(key, None)
            return
        try:
            await self._redis.delete(key)
        except Exception as e:
            logger.error(f"Failed to delete {key}: {e}")
            raise


# Singleton instance
redis_client = RedisClient()


# Convenience functions
async def init_redis():
    """Initialize Redis connection on startup"""
    await redis_client.connect()


async def close_redis():
    """Close Redis connection on shutdown"""
    await redis_client.disconnect()
