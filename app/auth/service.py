"""Account creation and credential checks."""

import re
import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from app.models import User
from app.auth.utils import hash_password, verify_password, dummy_verify
from app.core.errors import DuplicateEmail, InvalidEmail, WeakPassword, AccountNotFound, InvalidCredentials

logger = structlog.get_logger()

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6

async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    res = await db.execute(select(User).where(User.email == email))
    return res.scalars().first()

async def create_account(db: AsyncSession, email: str, password: str) -> User:
    if not EMAIL_RE.match(email):
        raise InvalidEmail()
    if len(password) < MIN_PASSWORD_LENGTH:
        raise WeakPassword()
    if await get_user_by_email(db, email):
        raise DuplicateEmail()
    user = User(email=email, pw_hash=hash_password(password))
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same email
        await db.rollback()
        raise DuplicateEmail()
    await db.refresh(user)
    logger.info("Account created", user_id=user.id)
    return user

async def verify_credentials(db: AsyncSession, email: str, password: str) -> User:
    user = await get_user_by_email(db, email)
    if not user:
        dummy_verify()
        raise AccountNotFound()
    if not verify_password(password, user.pw_hash):
        raise InvalidCredentials()
    return user
