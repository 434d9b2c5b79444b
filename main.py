import os
import structlog
from fastapi import FastAPI, Request
from contextlib import asynccontextmanager
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from app.core.config import settings
from app.core.db import engine
from app.middleware.request_id import RequestIDMiddleware
from app.middleware.rate_limit import RateLimitMiddleware
from app.auth.endpoints import router as auth_router
from app.auctions.endpoints import router as auctions_router

logger = structlog.get_logger()

os.makedirs(settings.upload_dir, exist_ok=True)

@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await engine.dispose()

app = FastAPI(title="Auction Marketplace", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*']
)
app.add_middleware(RateLimitMiddleware)
app.add_middleware(RequestIDMiddleware)

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Rejected inputs are not echoed back; a NaN or infinite value cannot be rendered as JSON
    errors = [{k: v for k, v in err.items() if k not in ("input", "ctx")} for err in exc.errors()]
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(errors)})

async def infrastructure_error_handler(request: Request, exc: Exception):
    logger.error(
        "Infrastructure failure",
        error_type=type(exc).__name__,
        error=str(exc),
        path=request.url.path,
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})

app.add_exception_handler(SQLAlchemyError, infrastructure_error_handler)
app.add_exception_handler(RedisError, infrastructure_error_handler)
app.add_exception_handler(OSError, infrastructure_error_handler)

app.include_router(auth_router)
app.include_router(auctions_router)
app.mount('/uploads', StaticFiles(directory=settings.upload_dir), name='uploads')
