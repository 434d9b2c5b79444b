from datetime import datetime
import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from app.auctions import repository
from app.auctions.lifecycle import ensure_closed
from app.core.errors import AuctionClosed, AuctionNotFound, BidTooLow, SellerBid
from app.models import Auction

logger = structlog.get_logger()

def check_bid_allowed(auction: Auction, bidder_id: int, amount: float) -> None:
    """Raises if the bid cannot be accepted against the auction as currently loaded."""
    if auction.is_closed:
        raise AuctionClosed()
    if auction.seller_id == bidder_id:
        raise SellerBid()
    if float(amount) <= float(auction.current_bid):
        raise BidTooLow()

async def place_bid(db: AsyncSession, auction_id: int, bidder_id: int, amount: float, now: datetime) -> Auction:
    auction = await repository.get_for_update(db, auction_id)
    if not auction:
        raise AuctionNotFound()

    if await ensure_closed(db, auction, now):
        await db.commit()
    check_bid_allowed(auction, bidder_id, amount)

    # Conditional write: a concurrent higher bid or close since our read makes this a no-op
    if not await repository.compare_and_set_bid(db, auction_id, float(amount), bidder_id):
        await db.rollback()
        await db.refresh(auction)
        check_bid_allowed(auction, bidder_id, amount)
        raise BidTooLow()

    await db.commit()
    await db.refresh(auction)
    logger.info("Bid accepted", auction_id=auction_id, bidder_id=bidder_id, amount=float(amount))
    return auction
