"""
Redis connection used by the shared cart backend.
Supports both a REDIS_URL (Upstash or other managed Redis) and host/port settings.
"""

import logging
import os
from typing import Optional

import redis

logger = logging.getLogger(__name__)

redis_client: Optional[redis.Redis] = None


def _mask(redis_url: str) -> str:
    if "@" in redis_url:
        url_parts = redis_url.split("@")
        protocol = url_parts[0].split(":")[0]
        return f"{protocol}:****@{url_parts[1]}"
    return "****"


def get_redis_client() -> redis.Redis:
    """Get or create the Redis client"""
    global redis_client

    if redis_client is None:
        logger.info("🔄 Initializing Redis connection for cart storage...")
        redis_url = os.getenv("REDIS_URL")

        try:
            if redis_url:
                logger.info(f"📡 Using Redis URL connection: {_mask(redis_url)}")
                client = redis.from_url(
                    redis_url,
                    decode_responses=True,
                    socket_connect_timeout=15,
                    socket_timeout=30,
                    retry_on_timeout=True,
                    health_check_interval=30,
                    max_connections=20,
                )
            else:
                redis_host = os.getenv("REDIS_HOST", "localhost")
                redis_port = int(os.getenv("REDIS_PORT", "6379"))
                redis_ssl = os.getenv("REDIS_SSL", "false").lower() == "true"
                logger.info(
                    f"📡 Using Redis at {redis_host}:{redis_port} "
                    f"({'with' if redis_ssl else 'without'} SSL)"
                )
                client = redis.Redis(
                    host=redis_host,
                    port=redis_port,
                    password=os.getenv("REDIS_PASSWORD"),
                    db=int(os.getenv("REDIS_DB", "0")),
                    ssl=redis_ssl,
                    decode_responses=True,
                    socket_connect_timeout=15,
                    socket_timeout=30,
                    retry_on_timeout=True,
                    health_check_interval=30,
                    max_connections=20,
                )
            client.ping()
        except redis.RedisError as e:
            logger.error(f"❌ Failed to connect to Redis: {str(e)}")
            raise

        redis_client = client
        logger.info("Redis connected successfully")

    return redis_client
