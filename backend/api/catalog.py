import asyncio
from typing import Dict, List
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, status

from dependencies import get_catalog_repository
from errors import QuoteRequiredError
from repositories.catalog_repository import CatalogRepository
from schemas import CartItem, CustomizationDetails, PriceQuote, PriceQuoteRequest, Product, ProductSize
from services.pricing_service import calculate_price, price_cart_item

router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/catalog/products", response_model=List[Product])
async def list_products(
    catalog: CatalogRepository = Depends(get_catalog_repository),
) -> List[Product]:
    return await asyncio.to_thread(catalog.get_managed_products)


@router.get("/catalog/sizes", response_model=Dict[str, List[ProductSize]])
async def list_sizes(
    catalog: CatalogRepository = Depends(get_catalog_repository),
) -> Dict[str, List[ProductSize]]:
    return await asyncio.to_thread(catalog.get_product_sizes)


@router.post("/pricing/quote", response_model=PriceQuote)
async def quote_price(
    payload: PriceQuoteRequest,
    catalog: CatalogRepository = Depends(get_catalog_repository),
) -> PriceQuote:
    sizes = await asyncio.to_thread(catalog.get_product_sizes)
    return calculate_price(
        payload.product_type,
        payload.width,
        payload.height,
        payload.depth,
        payload.quantity,
        sizes.get(payload.product_type, []),
    )


@router.post("/cart/items", response_model=CartItem, status_code=status.HTTP_201_CREATED)
async def add_cart_item(
    payload: CustomizationDetails,
    catalog: CatalogRepository = Depends(get_catalog_repository),
) -> CartItem:
    sizes = await asyncio.to_thread(catalog.get_product_sizes)
    try:
        return price_cart_item(payload, sizes, cart_item_id=uuid4().hex)
    except QuoteRequiredError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
