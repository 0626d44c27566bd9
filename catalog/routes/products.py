from __future__ import annotations

from typing import Union

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from ..config import read_config
from ..errors import DataAccessError
from ..services.catalog_svc import CatalogService

router = APIRouter()


class ProductOut(BaseModel):
    name: str
    price: float
    img: str | None = None
    sku: int
    paypal: str | None = None


class ProductDetailOut(ProductOut):
    sizes: list[str] = []


class ProductPageOut(BaseModel):
    page: int
    page_size: int
    total: int
    total_pages: int
    items: list[ProductOut]


def get_catalog_service() -> CatalogService:
    return CatalogService()


@router.get("/api/products/recent", response_model=list[ProductOut])
def api_products_recent(svc: CatalogService = Depends(get_catalog_service)):
    try:
        return svc.list_recent()
    except DataAccessError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/api/products/search", response_model=list[ProductOut])
def api_products_search(
    q: str = Query(..., min_length=1),
    svc: CatalogService = Depends(get_catalog_service),
):
    try:
        return svc.search(q)
    except DataAccessError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/api/products/count")
def api_products_count(svc: CatalogService = Depends(get_catalog_service)):
    try:
        return {"count": svc.count()}
    except DataAccessError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/api/products/subset", response_model=list[ProductOut])
def api_products_subset(
    start: int = Query(..., ge=1),
    end: int = Query(..., ge=1),
    svc: CatalogService = Depends(get_catalog_service),
):
    try:
        return svc.subset(start, end)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except DataAccessError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/api/products", response_model=Union[list[ProductOut], ProductPageOut])
def api_products(
    page: int | None = Query(None),
    svc: CatalogService = Depends(get_catalog_service),
):
    """不带 page 返回全部商品；带 page 时按 config.yaml 的 page_size 分页（越界页码会被夹到有效范围）。"""
    try:
        if page is None:
            return svc.list_all()
        return svc.page(page, read_config()["page_size"])
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except DataAccessError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/api/products/{sku}", response_model=ProductDetailOut)
def api_product_detail(sku: int, svc: CatalogService = Depends(get_catalog_service)):
    try:
        product = svc.get_by_sku(sku)
    except DataAccessError as e:
        raise HTTPException(status_code=500, detail=str(e))
    if product is None:
        raise HTTPException(status_code=404, detail="product_not_found")
    return product
