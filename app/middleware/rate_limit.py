import time
import uuid
import structlog
from fastapi import Request
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware
import app.core.redis as redis_module
from app.core.config import settings

logger = structlog.get_logger()

async def sliding_window_allow(key: str, limit: int, window_seconds: int) -> bool:
    now = time.time()
    window_start = now - window_seconds
    try:
        client = redis_module.redis_client
        pipe = client.pipeline()
        pipe.zremrangebyscore(key, 0, window_start)
        pipe.zadd(key, {f"{now}:{uuid.uuid4().hex[:6]}": now})
        pipe.zcard(key)
        pipe.expire(key, window_seconds)
        _, _, count, _ = await pipe.execute()
        return count <= limit
    except RedisError as exc:
        # Fail open: an unavailable limiter must not take the API down
        logger.warning("Rate limiter unavailable", key=key, error=str(exc))
        return True

def is_bid_request(request: Request) -> bool:
    return request.method == "POST" and request.url.path.startswith('/auctions/') and request.url.path.endswith('/bid')

class RateLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        ip = request.client.host if request.client else 'unknown'
        global_key = f"rl:ip:{ip}"
        if not await sliding_window_allow(global_key, settings.rate_limit_requests, settings.rate_limit_window_seconds):
            return JSONResponse(status_code=429, content={"detail": "Too many requests"})

        if is_bid_request(request):
            bid_key = f"rl:bid:{ip}"
            if not await sliding_window_allow(bid_key, settings.bid_rate_limit_requests, settings.bid_rate_limit_window_seconds):
                return JSONResponse(status_code=429, content={"detail": "Bid rate limit exceeded"})

        return await call_next(request)
