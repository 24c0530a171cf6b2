import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import catalog_router, orders_router, shipping_router
from config import settings

logger = logging.getLogger("packaging-store")

app = FastAPI(title="Packaging Storefront API")

if settings.allowed_origins == ["*"]:
    allow_origins = ["*"]
else:
    allow_origins = settings.allowed_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(catalog_router)
app.include_router(orders_router)
app.include_router(shipping_router)


@app.on_event("startup")
async def _on_startup() -> None:
    logger.info("Storefront API starting with %s storage", settings.storage_backend)
    if allow_origins == ["*"]:
        logger.warning(
            "CORS is set to allow all origins with credentials; set ALLOWED_ORIGINS to explicit values outside local dev."
        )
    if settings.allow_placeholder_tracking:
        logger.warning(
            "ALLOW_PLACEHOLDER_TRACKING is on; failed carrier calls will ship orders with MOCK tracking numbers."
        )


@app.get("/api/health")
async def health():
    return {"status": "ok", "storage_backend": settings.storage_backend}
