import redis.asyncio as redis
from app.core.config import settings

# Looked up as a module attribute at call time so it can be swapped out.
redis_client = redis.from_url(settings.redis_url, decode_responses=True)
