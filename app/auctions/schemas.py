from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

class AuctionCreate(BaseModel):
    title: str
    description: str
    starting_price: float = Field(allow_inf_nan=False)
    start_date: datetime
    end_date: datetime
    category: str
    location: str
    reserve_price: float | None = Field(None, allow_inf_nan=False)
    condition: str | None = None

class AuctionPatch(BaseModel):
    """Editable fields. Anything else in the request body is ignored."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str | None = None
    description: str | None = None
    category: str | None = None
    location: str | None = None
    end_date: datetime | None = Field(None, alias="endDate")

class BidIn(BaseModel):
    amount: float = Field(gt=0, allow_inf_nan=False)
