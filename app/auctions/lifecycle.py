"""Auction lifecycle: lazy Open -> Closed transition, creation, edits and deletion.

An auction closes the first time it is loaded after its end date. The
transition is persisted and never reverses.
"""

from datetime import datetime, timezone
import structlog
from fastapi import UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from app.auctions import repository
from app.auctions.repository import AuctionView
from app.auctions.schemas import AuctionCreate, AuctionPatch
from app.auctions.uploads import save_upload, remove_upload
from app.auth.dependencies import authorize_owner
from app.core.config import settings
from app.core.errors import AuctionClosed, AuctionNotFound, NotFoundOrUnauthorized, ValidationError
from app.models import Auction

logger = structlog.get_logger()

EDITABLE_FIELDS = ("title", "description", "category", "location", "end_date")
REQUIRED_TEXT_FIELDS = ("title", "description", "category", "location")

def to_naive_utc(dt: datetime) -> datetime:
    """Convert any datetime to naive UTC (no tzinfo)."""
    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt

def _aware(dt: datetime | None) -> datetime | None:
    """Ensure datetime is timezone-aware (UTC) for safe arithmetic.
    If None, returns None."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt

def is_expired(auction: Auction, now: datetime) -> bool:
    end_date = _aware(auction.end_date)
    return end_date is not None and _aware(now) > end_date

async def ensure_closed(db: AsyncSession, auction: Auction, now: datetime) -> bool:
    """Close an expired auction in-session and flush. Return True if it changed.
    Caller is responsible for committing."""
    if auction.is_closed or not is_expired(auction, now):
        return False
    auction.is_closed = True
    await db.flush()
    logger.info("Auction closed", auction_id=auction.id, current_bid=auction.current_bid, winner_id=auction.current_bidder_id)
    return True

def validate_new_auction(fields: AuctionCreate, image_count: int) -> None:
    for name in REQUIRED_TEXT_FIELDS:
        if not getattr(fields, name).strip():
            raise ValidationError(f"{name} is required")
    if fields.starting_price <= 0:
        raise ValidationError("Starting price must be positive")
    if to_naive_utc(fields.end_date) <= to_naive_utc(fields.start_date):
        raise ValidationError("End date must be after start date")
    if image_count > settings.max_images_per_auction:
        raise ValidationError(f"At most {settings.max_images_per_auction} images are allowed")

async def create_auction(db: AsyncSession, seller_id: int, fields: AuctionCreate, uploads: list[UploadFile]) -> Auction:
    validate_new_auction(fields, len(uploads))
    stored: list[tuple[str, str | None]] = []
    try:
        for upload in uploads:
            stored.append((await save_upload(upload), upload.filename))
        auction = Auction(
            title=fields.title,
            description=fields.description,
            starting_price=fields.starting_price,
            reserve_price=fields.reserve_price,
            current_bid=fields.starting_price,
            current_bidder_id=None,
            seller_id=seller_id,
            start_date=to_naive_utc(fields.start_date),
            end_date=to_naive_utc(fields.end_date),
            category=fields.category,
            location=fields.location,
            condition=fields.condition,
            is_closed=False,
        )
        await repository.insert(db, auction, stored)
        await db.commit()
    except (SQLAlchemyError, OSError):
        await db.rollback()
        for url, _ in stored:
            remove_upload(url)
        raise
    logger.info("Auction created", auction_id=auction.id, seller_id=seller_id, images=len(stored))
    return auction

async def load_owned(db: AsyncSession, auction_id: int, caller_id: int) -> Auction:
    auction = await repository.get_by_id(db, auction_id)
    if auction is None or not authorize_owner(auction, caller_id):
        raise NotFoundOrUnauthorized()
    return auction

async def edit_auction(db: AsyncSession, auction_id: int, caller_id: int, patch: AuctionPatch, now: datetime) -> Auction:
    auction = await load_owned(db, auction_id, caller_id)
    if await ensure_closed(db, auction, now):
        await db.commit()
    if auction.is_closed:
        raise AuctionClosed("Cannot edit closed auction")
    # Falsy values are treated as "not supplied"
    changes = {name: getattr(patch, name) for name in EDITABLE_FIELDS if getattr(patch, name)}
    for name in REQUIRED_TEXT_FIELDS:
        if name in changes and not changes[name].strip():
            raise ValidationError(f"{name} must not be blank")
    if "end_date" in changes:
        changes["end_date"] = to_naive_utc(changes["end_date"])
        if changes["end_date"] <= auction.start_date:
            raise ValidationError("End date must be after start date")
    await repository.update(db, auction, changes)
    await db.commit()
    logger.info("Auction edited", auction_id=auction.id, fields=sorted(changes))
    return auction

async def delete_auction(db: AsyncSession, auction_id: int, caller_id: int) -> None:
    auction = await load_owned(db, auction_id, caller_id)
    images = await repository.get_image_urls(db, [auction.id])
    await repository.delete(db, auction)
    await db.commit()
    for url in images[auction_id]:
        remove_upload(url)
    logger.info("Auction deleted", auction_id=auction_id, seller_id=caller_id)

async def get_auction(db: AsyncSession, auction_id: int, now: datetime) -> AuctionView:
    auction = await repository.get_by_id(db, auction_id)
    if auction is None:
        raise AuctionNotFound()
    if await ensure_closed(db, auction, now):
        await db.commit()
    views = await repository.describe(db, [auction])
    return views[0]

async def list_auctions(db: AsyncSession, now: datetime) -> list[AuctionView]:
    views = await repository.list_all(db)
    any_changed = False
    for view in views:
        changed = await ensure_closed(db, view.auction, now)
        any_changed = any_changed or changed
    if any_changed:
        await db.commit()
    return views
