from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class RateUpsert(BaseModel):
    category: str = Field(..., min_length=1, max_length=64)
    amount: Decimal = Field(..., ge=0)


class RateResponse(BaseModel):
    id: Optional[int] = None
    category: str
    amount: Decimal
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
