from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.core.db import get_db
from app.core.errors import MissingToken, InvalidToken
from app.models import User, Auction
from app.auth.utils import verify_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/signin", auto_error=False)

async def get_current_user(token: str | None = Depends(oauth2_scheme), db: AsyncSession = Depends(get_db)) -> User:
    if not token:
        raise MissingToken()
    payload = await verify_token(token, "access")
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise InvalidToken("Invalid token subject")
    res = await db.execute(select(User).where(User.id == user_id))
    user = res.scalars().first()
    if not user:
        raise InvalidToken("User not found")
    return user

def authorize_owner(auction: Auction, caller_id: int) -> bool:
    return auction.seller_id == caller_id
