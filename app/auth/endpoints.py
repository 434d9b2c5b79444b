from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel
from datetime import timezone
from app.core.db import get_db
from app.models import User
from app.auth.service import create_account, verify_credentials
from app.auth.utils import create_access_token, blacklist_token, verify_token, remaining_ttl
from app.auth.dependencies import oauth2_scheme, get_current_user
from app.core.errors import MissingToken

router = APIRouter(tags=['auth'])

class Credentials(BaseModel):
    email: str
    password: str

class SignupResponse(BaseModel):
    token: str
    message: str

class SigninResponse(BaseModel):
    token: str


@router.post('/signup', status_code=status.HTTP_201_CREATED, response_model=SignupResponse)
async def signup(body: Credentials, db: AsyncSession = Depends(get_db)):
    user = await create_account(db, body.email, body.password)
    token, _ = await create_access_token(user.id)
    return {"token": token, "message": "Account created successfully!"}

@router.post('/signin', response_model=SigninResponse)
async def signin(body: Credentials, db: AsyncSession = Depends(get_db)):
    user = await verify_credentials(db, body.email, body.password)
    token, _ = await create_access_token(user.id)
    return {"token": token}

@router.post('/signout')
async def signout(token: str | None = Depends(oauth2_scheme)):
    if not token:
        raise MissingToken()
    payload = await verify_token(token, "access")
    await blacklist_token(payload["jti"], remaining_ttl(payload))
    return {"message": "Signed out"}

@router.get('/me')
async def me(user: User = Depends(get_current_user)):
    created_at = user.created_at.replace(tzinfo=timezone.utc).isoformat() if user.created_at else None
    return {"id": user.id, "email": user.email, "createdAt": created_at}
