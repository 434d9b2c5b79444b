"""Persistence for auctions. No business rules live here."""

from dataclasses import dataclass, field
from sqlalchemy import select, update as sa_update, delete as sa_delete
from sqlalchemy.ext.asyncio import AsyncSession
from app.models import Auction, Image, User


@dataclass
class AuctionView:
    """An auction with its seller, current bidder and images resolved for display."""
    auction: Auction
    seller_email: str | None
    bidder_email: str | None
    images: list[str] = field(default_factory=list)


async def insert(db: AsyncSession, auction: Auction, images: list[tuple[str, str | None]]) -> Auction:
    db.add(auction)
    await db.flush()
    for position, (url, original_filename) in enumerate(images):
        db.add(Image(auction_id=auction.id, position=position, url=url, original_filename=original_filename))
    await db.flush()
    return auction

async def get_by_id(db: AsyncSession, auction_id: int) -> Auction | None:
    res = await db.execute(select(Auction).where(Auction.id == auction_id))
    return res.scalars().first()

async def get_for_update(db: AsyncSession, auction_id: int) -> Auction | None:
    stmt = select(Auction).where(Auction.id == auction_id).with_for_update()
    res = await db.execute(stmt)
    return res.scalars().first()

async def get_image_urls(db: AsyncSession, auction_ids: list[int]) -> dict[int, list[str]]:
    urls: dict[int, list[str]] = {auction_id: [] for auction_id in auction_ids}
    if not auction_ids:
        return urls
    res = await db.execute(
        select(Image).where(Image.auction_id.in_(auction_ids)).order_by(Image.auction_id, Image.position)
    )
    for img in res.scalars().all():
        urls[img.auction_id].append(img.url)
    return urls

async def describe(db: AsyncSession, auctions: list[Auction]) -> list[AuctionView]:
    user_ids = {a.seller_id for a in auctions} | {a.current_bidder_id for a in auctions if a.current_bidder_id}
    emails: dict[int, str] = {}
    if user_ids:
        res = await db.execute(select(User.id, User.email).where(User.id.in_(user_ids)))
        emails = {row.id: row.email for row in res.all()}
    images = await get_image_urls(db, [a.id for a in auctions])
    return [
        AuctionView(
            auction=a,
            seller_email=emails.get(a.seller_id),
            bidder_email=emails.get(a.current_bidder_id) if a.current_bidder_id else None,
            images=images.get(a.id, []),
        )
        for a in auctions
    ]

async def list_all(db: AsyncSession) -> list[AuctionView]:
    res = await db.execute(select(Auction).order_by(Auction.id))
    return await describe(db, list(res.scalars().all()))

async def update(db: AsyncSession, auction: Auction, changes: dict) -> Auction:
    for name, value in changes.items():
        setattr(auction, name, value)
    await db.flush()
    return auction

async def compare_and_set_bid(db: AsyncSession, auction_id: int, amount: float, bidder_id: int) -> bool:
    """Accept the bid only if the auction is still open and the amount still beats the stored bid."""
    stmt = (
        sa_update(Auction)
        .where(Auction.id == auction_id, Auction.is_closed.is_(False), Auction.current_bid < amount)
        .values(current_bid=amount, current_bidder_id=bidder_id)
        .execution_options(synchronize_session=False)
    )
    res = await db.execute(stmt)
    return res.rowcount == 1

async def delete(db: AsyncSession, auction: Auction) -> None:
    await db.execute(sa_delete(Image).where(Image.auction_id == auction.id))
    await db.delete(auction)
    await db.flush()
