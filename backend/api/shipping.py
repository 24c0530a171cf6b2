from typing import List

from fastapi import APIRouter

from schemas import DeliveryCompanyResponse
from services.shipping_service import get_delivery_companies

router = APIRouter(prefix="/api/shipping", tags=["shipping"])


@router.get("/carriers", response_model=List[DeliveryCompanyResponse])
async def list_carriers() -> List[DeliveryCompanyResponse]:
    return [
        DeliveryCompanyResponse(
            id=company.id,
            name=company.name,
            requires_manual_tracking=company.requires_manual_tracking,
        )
        for company in get_delivery_companies()
    ]
