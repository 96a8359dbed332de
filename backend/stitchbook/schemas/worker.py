from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class WorkerCategoryResponse(BaseModel):
    id: int
    name: str
    is_active: bool

    class Config:
        from_attributes = True


class WorkerCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)


class WorkerCategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=128)
    is_active: Optional[bool] = None


class WorkerResponse(BaseModel):
    id: int
    name: str
    phone_number: str
    email: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    joined_date: Optional[datetime] = None
    is_active: bool
    category: Optional[WorkerCategoryResponse] = None

    class Config:
        from_attributes = True


class WorkerCreate(BaseModel):
    name: str = Field(..., min_length=1)
    phone_number: str = Field(..., min_length=1)
    email: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    category_id: Optional[int] = None


class WorkerUpdate(BaseModel):
    name: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None
    category_id: Optional[int] = None
