"""Domain errors.

Each one is an HTTPException carrying its own status code and message, so
service code can raise it directly and FastAPI renders ``{"detail": ...}``.
"""

from fastapi import HTTPException, status


class MarketplaceError(HTTPException):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Bad request"

    def __init__(self, detail: str | None = None, headers: dict | None = None):
        super().__init__(status_code=type(self).status_code, detail=detail or self.message, headers=headers)


# Validation (400)

class ValidationError(MarketplaceError):
    message = "Invalid request"

class InvalidEmail(ValidationError):
    message = "Please enter a valid email address"

class WeakPassword(ValidationError):
    message = "Password must be at least 6 characters long"


# Conflict (400)

class DuplicateEmail(MarketplaceError):
    message = "Email already registered. Please use a different email or sign in."

class AccountNotFound(MarketplaceError):
    message = "User not found"

class InvalidCredentials(MarketplaceError):
    message = "Invalid password"

class AuctionClosed(MarketplaceError):
    message = "Auction is closed"

class BidTooLow(MarketplaceError):
    message = "Bid must be higher than current bid"

class SellerBid(MarketplaceError):
    message = "Sellers cannot bid on their own auction"


# Authentication (401)

class MissingToken(MarketplaceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Authorization header missing"

    def __init__(self, detail: str | None = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})

class InvalidToken(MarketplaceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Authentication failed"

    def __init__(self, detail: str | None = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


# Not found (404)

class AuctionNotFound(MarketplaceError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Auction not found"

class NotFoundOrUnauthorized(AuctionNotFound):
    """Raised for owner-scoped mutations; does not reveal whether the auction exists."""
    message = "Auction not found or unauthorized"
