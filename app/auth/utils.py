from jose import jwt, JWTError
from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
import uuid
from app.core.config import settings
from app.core import redis as app_redis
from app.core.errors import InvalidToken

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

async def create_access_token(account_id: int) -> tuple[str, str]:
    jti = str(uuid.uuid4())
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode = {"sub": str(account_id), "jti": jti, "exp": expire, "type": "access"}
    token = jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)
    return token, jti

async def blacklist_token(jti: str, ttl_seconds: int):
    await app_redis.redis_client.setex(f'blacklist:{jti}', max(1, ttl_seconds), '1')

async def is_token_blacklisted(jti: str) -> bool:
    return bool(await app_redis.redis_client.exists(f'blacklist:{jti}'))

async def verify_token(token: str, token_type: str = "access") -> dict:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        raise InvalidToken("Invalid or expired token")
    if payload.get("type") != token_type:
        raise InvalidToken("Invalid token type")
    if not payload.get("jti") or await is_token_blacklisted(payload["jti"]):
        raise InvalidToken("Token revoked")
    return payload

def remaining_ttl(payload: dict) -> int:
    now_ts = int(datetime.now(timezone.utc).timestamp())
    return max(0, int(payload["exp"]) - now_ts)

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)

def dummy_verify() -> None:
    """Spend a hash verification when there is no account to compare against."""
    pwd_context.dummy_verify()
