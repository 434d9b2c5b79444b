from datetime import datetime, timezone
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.db import get_db
from app.core.clock import utcnow
from app.auth.dependencies import get_current_user
from app.auctions import repository
from app.auctions.lifecycle import create_auction, edit_auction, delete_auction, get_auction, list_auctions
from app.auctions.repository import AuctionView
from app.auctions.schemas import AuctionCreate, AuctionPatch, BidIn
from app.auctions.tx_bid import place_bid

router = APIRouter(prefix='/auctions', tags=['auctions'])

def _iso(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat()

def serialize_auction(view: AuctionView) -> dict:
    a = view.auction
    return {
        "id": a.id,
        "title": a.title,
        "description": a.description,
        "startingPrice": a.starting_price,
        "reservePrice": a.reserve_price,
        "currentBid": a.current_bid,
        "currentBidder": {"id": a.current_bidder_id, "email": view.bidder_email} if a.current_bidder_id else None,
        "seller": {"id": a.seller_id, "email": view.seller_email},
        "startDate": _iso(a.start_date),
        "endDate": _iso(a.end_date),
        "images": view.images,
        "category": a.category,
        "location": a.location,
        "condition": a.condition,
        "isClosed": a.is_closed,
        "createdAt": _iso(a.created_at),
    }

async def render(db: AsyncSession, auction) -> dict:
    views = await repository.describe(db, [auction])
    return serialize_auction(views[0])


@router.post('', status_code=status.HTTP_201_CREATED)
async def create(
    title: str = Form(...),
    description: str = Form(...),
    starting_price: float = Form(..., alias="startingPrice", allow_inf_nan=False),
    start_date: datetime = Form(..., alias="startDate"),
    end_date: datetime = Form(..., alias="endDate"),
    category: str = Form(...),
    location: str = Form(...),
    reserve_price: float | None = Form(None, alias="reservePrice", gt=0, allow_inf_nan=False),
    condition: str | None = Form(None),
    images: list[UploadFile] | None = File(None),
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    fields = AuctionCreate(
        title=title,
        description=description,
        starting_price=starting_price,
        start_date=start_date,
        end_date=end_date,
        category=category,
        location=location,
        reserve_price=reserve_price,
        condition=condition or None,
    )
    auction = await create_auction(db, user.id, fields, images or [])
    return await render(db, auction)

@router.get('')
async def list_all(db: AsyncSession = Depends(get_db), now: datetime = Depends(utcnow)):
    views = await list_auctions(db, now)
    return [serialize_auction(v) for v in views]

@router.get('/{auction_id}')
async def get_one(auction_id: int, db: AsyncSession = Depends(get_db), now: datetime = Depends(utcnow)):
    view = await get_auction(db, auction_id, now)
    return serialize_auction(view)

@router.post('/{auction_id}/bid')
async def bid(auction_id: int, body: BidIn, db: AsyncSession = Depends(get_db), user=Depends(get_current_user), now: datetime = Depends(utcnow)):
    auction = await place_bid(db, auction_id, user.id, body.amount, now)
    return await render(db, auction)

@router.put('/{auction_id}')
async def edit(auction_id: int, body: AuctionPatch, db: AsyncSession = Depends(get_db), user=Depends(get_current_user), now: datetime = Depends(utcnow)):
    auction = await edit_auction(db, auction_id, user.id, body, now)
    return await render(db, auction)

@router.delete('/{auction_id}')
async def delete(auction_id: int, db: AsyncSession = Depends(get_db), user=Depends(get_current_user)):
    await delete_auction(db, auction_id, user.id)
    return {"message": "Auction deleted successfully"}
