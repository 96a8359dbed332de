from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stitchbook.api.auth import RequireAdmin
from stitchbook.core.database import get_db
from stitchbook.models import Product, Staff
from stitchbook.schemas.catalog import ProductCreate, ProductResponse, ProductUpdate

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=List[ProductResponse])
async def list_products(db: AsyncSession = Depends(get_db)):
    """Каталог для витрины: только активные изделия, новые сверху."""
    r = await db.execute(
        select(Product).where(Product.active == True).order_by(Product.created_at.desc(), Product.id.desc())
    )
    return [ProductResponse.model_validate(p) for p in r.scalars().all()]


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    body: ProductCreate,
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireAdmin),
):
    p = Product(**body.model_dump())
    db.add(p)
    await db.flush()
    await db.refresh(p)
    return ProductResponse.model_validate(p)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    body: ProductUpdate,
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireAdmin),
):
    p = await db.get(Product, product_id)
    if not p:
        raise HTTPException(status_code=404, detail="Изделие не найдено")
    for key, value in body.model_dump(exclude_unset=True).items():
        setattr(p, key, value)
    await db.flush()
    await db.refresh(p)
    return ProductResponse.model_validate(p)


@router.delete("/{product_id}")
async def delete_product(
    product_id: int,
    db: AsyncSession = Depends(get_db),
    _staff: Staff = Depends(RequireAdmin),
):
    p = await db.get(Product, product_id)
    if not p:
        raise HTTPException(status_code=404, detail="Изделие не найдено")
    await db.delete(p)
    return {"ok": True}
