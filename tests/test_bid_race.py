"""Bid acceptance under interleaving: the conditional update and the re-check after it fails."""

import pytest
from fastapi.testclient import TestClient
from conftest import AsyncSessionLocal, signup, create_auction
from app.auctions import repository
from app.auctions.tx_bid import place_bid
from app.core.errors import AuctionClosed, BidTooLow


def account_id(client: TestClient, headers: dict) -> int:
    return client.get('/me', headers=headers).json()["id"]

async def stored_bid(auction_id: int) -> tuple[float, int | None, bool]:
    async with AsyncSessionLocal() as db:
        auction = await repository.get_by_id(db, auction_id)
        return auction.current_bid, auction.current_bidder_id, auction.is_closed


def test_compare_and_set_only_accepts_higher_amount_on_open_auction(client: TestClient, clock):
    seller = signup(client)
    bidder = signup(client)
    bidder_id = account_id(client, bidder)
    auction_id = create_auction(client, seller, clock.now)["id"]

    async def attempt(amount: float) -> bool:
        async with AsyncSessionLocal() as db:
            accepted = await repository.compare_and_set_bid(db, auction_id, amount, bidder_id)
            await db.commit()
            return accepted

    assert client.portal.call(attempt, 100.0) is False
    assert client.portal.call(attempt, 99.0) is False
    assert client.portal.call(stored_bid, auction_id) == (100.0, None, False)

    assert client.portal.call(attempt, 150.0) is True
    assert client.portal.call(stored_bid, auction_id) == (150.0, bidder_id, False)

    clock.advance(hours=2)
    assert client.get(f"/auctions/{auction_id}").json()["isClosed"] is True
    assert client.portal.call(attempt, 1000.0) is False
    assert client.portal.call(stored_bid, auction_id) == (150.0, bidder_id, True)


def test_place_bid_rejects_when_outbid_after_read(client: TestClient, clock, monkeypatch):
    seller = signup(client)
    rival = signup(client)
    late = signup(client)
    rival_id = account_id(client, rival)
    late_id = account_id(client, late)
    auction_id = create_auction(client, seller, clock.now)["id"]

    load = repository.get_for_update

    async def load_then_outbid(db, wanted_id):
        auction = await load(db, wanted_id)
        # A competing bid commits between our read and our write
        async with AsyncSessionLocal() as other:
            assert await repository.compare_and_set_bid(other, wanted_id, 150.0, rival_id)
            await other.commit()
        return auction

    monkeypatch.setattr(repository, "get_for_update", load_then_outbid)

    async def bid_late():
        async with AsyncSessionLocal() as db:
            with pytest.raises(BidTooLow):
                await place_bid(db, auction_id, late_id, 120.0, clock.now)

    client.portal.call(bid_late)
    assert client.portal.call(stored_bid, auction_id) == (150.0, rival_id, False)


def test_place_bid_rejects_when_closed_after_read(client: TestClient, clock, monkeypatch):
    seller = signup(client)
    bidder = signup(client)
    bidder_id = account_id(client, bidder)
    auction_id = create_auction(client, seller, clock.now)["id"]

    load = repository.get_for_update

    async def load_then_close(db, wanted_id):
        auction = await load(db, wanted_id)
        async with AsyncSessionLocal() as other:
            closing = await repository.get_by_id(other, wanted_id)
            await repository.update(other, closing, {"is_closed": True})
            await other.commit()
        return auction

    monkeypatch.setattr(repository, "get_for_update", load_then_close)

    async def bid():
        async with AsyncSessionLocal() as db:
            with pytest.raises(AuctionClosed):
                await place_bid(db, auction_id, bidder_id, 500.0, clock.now)

    client.portal.call(bid)
    assert client.portal.call(stored_bid, auction_id) == (100.0, None, True)
