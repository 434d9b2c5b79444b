"""Unit tests for the auction state predicates and bid checks."""

from datetime import datetime, timedelta, timezone
import pytest
from app.auctions.lifecycle import is_expired, to_naive_utc, _aware
from app.auctions.tx_bid import check_bid_allowed
from app.auth.dependencies import authorize_owner
from app.core.errors import AuctionClosed, BidTooLow, SellerBid
from app.models import Auction

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def make_auction(**overrides) -> Auction:
    fields = dict(
        id=1,
        seller_id=1,
        starting_price=100.0,
        current_bid=100.0,
        start_date=datetime(2026, 10, 19, 11, 0),
        end_date=datetime(2026, 10, 19, 13, 0),
        is_closed=False,
    )
    fields.update(overrides)
    return Auction(**fields)

def test_is_expired_compares_naive_end_date_as_utc():
    auction = make_auction()
    assert not is_expired(auction, NOW)
    assert not is_expired(auction, NOW + timedelta(hours=1))
    assert is_expired(auction, NOW + timedelta(hours=1, seconds=1))

def test_to_naive_utc_and_aware():
    ist = timezone(timedelta(hours=5, minutes=30))
    local = datetime(2026, 10, 19, 17, 30, tzinfo=ist)
    assert to_naive_utc(local) == datetime(2026, 10, 19, 12, 0)
    assert _aware(datetime(2026, 10, 19, 12, 0)) == NOW
    assert _aware(None) is None

def test_check_bid_allowed_requires_strictly_higher_amount():
    auction = make_auction(current_bid=150.0)
    check_bid_allowed(auction, bidder_id=2, amount=150.01)
    with pytest.raises(BidTooLow):
        check_bid_allowed(auction, bidder_id=2, amount=150)
    with pytest.raises(BidTooLow):
        check_bid_allowed(auction, bidder_id=2, amount=120)

def test_check_bid_allowed_rejects_closed_before_amount():
    auction = make_auction(is_closed=True)
    with pytest.raises(AuctionClosed):
        check_bid_allowed(auction, bidder_id=2, amount=10)

def test_seller_cannot_bid():
    with pytest.raises(SellerBid):
        check_bid_allowed(make_auction(seller_id=7), bidder_id=7, amount=500)

def test_authorize_owner():
    auction = make_auction(seller_id=3)
    assert authorize_owner(auction, 3)
    assert not authorize_owner(auction, 4)
