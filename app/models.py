from sqlalchemy import Boolean, Column, Integer, String, Float, DateTime, ForeignKey
from datetime import datetime, timezone
from app.core.db import Base

def _utcnow_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)

class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    pw_hash = Column(String, nullable=False)
    created_at = Column(DateTime, default=_utcnow_naive)


class Auction(Base):
    __tablename__ = "auctions"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, index=True, nullable=False)
    description = Column(String, nullable=False)
    starting_price = Column(Float, nullable=False)
    # Collected from the listing form, never consulted when accepting bids
    reserve_price = Column(Float, nullable=True)
    current_bid = Column(Float, nullable=False)
    current_bidder_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    seller_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    # Naive UTC
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    category = Column(String, nullable=False)
    location = Column(String, nullable=False)
    condition = Column(String, nullable=True)
    is_closed = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=_utcnow_naive)


class Image(Base):
    __tablename__ = "auction_images"
    id = Column(Integer, primary_key=True, index=True)
    auction_id = Column(Integer, ForeignKey("auctions.id", ondelete="CASCADE"), index=True, nullable=False)
    position = Column(Integer, nullable=False, default=0)
    url = Column(String, nullable=False)
    original_filename = Column(String, nullable=True)
