"""Схемы каталога изделий и закупок материалов."""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    price: Decimal = Field(..., ge=0)
    image_url: str = ""
    category: str = Field(..., min_length=1)
    stock: int = Field(default=0, ge=0)
    active: bool = True


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    image_url: Optional[str] = None
    category: Optional[str] = None
    stock: Optional[int] = Field(None, ge=0)
    active: Optional[bool] = None


class ProductResponse(BaseModel):
    id: int
    name: str
    description: str
    price: Decimal
    image_url: str
    category: str
    stock: int
    active: bool

    class Config:
        from_attributes = True


class InventoryItemCreate(BaseModel):
    name: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)
    unit_cost: Decimal = Field(..., ge=0)
    date: Optional[datetime] = None


class InventoryItemResponse(BaseModel):
    id: int
    name: str
    quantity: int
    unit_cost: Decimal
    date: datetime

    class Config:
        from_attributes = True


class InventoryList(BaseModel):
    items: List[InventoryItemResponse]
    total: Decimal
