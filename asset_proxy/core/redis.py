import os

import redis


def get_redis_connection() -> redis.Redis:
    redis_url = os.getenv("REDIS_URL")
    if not redis_url:
        raise ValueError("REDIS_URL environment variable is required when DOWNLOADS_BACKEND=redis")
    return redis.from_url(redis_url)
