import os
import time
import uuid
import structlog
from fastapi import UploadFile
from app.core.config import settings

logger = structlog.get_logger()

URL_PREFIX = "/uploads/"

def _safe_name(filename: str | None) -> str:
    name = os.path.basename(filename or "").replace(" ", "_")
    return name or "upload"

async def save_upload(upload: UploadFile) -> str:
    """Write an uploaded file into the upload dir and return its public url."""
    stored = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{_safe_name(upload.filename)}"
    data = await upload.read()
    with open(os.path.join(settings.upload_dir, stored), "wb") as fh:
        fh.write(data)
    return URL_PREFIX + stored

def remove_upload(url: str) -> None:
    path = os.path.join(settings.upload_dir, os.path.basename(url))
    try:
        os.remove(path)
    except FileNotFoundError:
        logger.warning("Upload already missing", url=url)
