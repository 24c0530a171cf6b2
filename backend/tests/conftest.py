"""Pytest fixtures for storefront tests."""

from typing import Callable, Dict, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from dependencies import get_catalog_repository, get_order_service
from repositories.catalog_repository import InMemoryCatalogRepository
from repositories.order_repository import InMemoryOrderRepository
from schemas import CartItem, ClientDetails, PriceTier, Product, ProductSize
from services.notification_service import Notifier
from services.orders_service import OrderService
from services.shipping_service import CarrierClient


class RecordingSender:
    """Email sender that keeps messages and can be told to fail for some recipients."""

    def __init__(self, fail_for: Optional[set] = None) -> None:
        self.sent: List[Dict[str, str]] = []
        self.fail_for = fail_for or set()

    def send(self, to: str, subject: str, body: str) -> None:
        if to in self.fail_for:
            raise RuntimeError(f"smtp refused {to}")
        self.sent.append({"to": to, "subject": subject, "body": body})


@pytest.fixture
def carton_sizes():
    return [
        ProductSize(
            id="cb-s",
            width=15,
            height=10,
            depth=5,
            weight=50,
            pricing=[PriceTier(min_quantity=50, price=1.2), PriceTier(min_quantity=200, price=1.0)],
        ),
        ProductSize(
            id="cb-m",
            width=20,
            height=15,
            depth=10,
            weight=90,
            pricing=[
                PriceTier(min_quantity=1000, price=1.2),
                PriceTier(min_quantity=50, price=1.8),
                PriceTier(min_quantity=200, price=1.5),
            ],
        ),
    ]


@pytest.fixture
def catalog(carton_sizes):
    return InMemoryCatalogRepository(
        sizes={"cartonBox": carton_sizes},
        products=[Product(id="cartonBox", name="Carton Box")],
    )


@pytest.fixture
def client_details():
    return ClientDetails(
        client_name="Amina Benali",
        phone="0550123456",
        email="amina@example.com",
        address="12 Rue Didouche Mourad",
        wilaya="Alger",
        commune="Alger Centre",
    )


@pytest.fixture
def make_cart_item(client_details) -> Callable[..., CartItem]:
    counter = {"n": 0}

    def _make(**overrides) -> CartItem:
        counter["n"] += 1
        data = dict(
            client_details.model_dump(),
            cart_item_id=f"cart-{counter['n']}",
            product_type="cartonBox",
            product_name="Carton Box",
            width=15,
            height=10,
            depth=5,
            quantity=75,
            color="Kraft",
            description="Logo on lid",
            logo_url="https://cdn.example.com/logo.png",
            unit_price=1.2,
            item_weight=50,
        )
        data.update(overrides)
        return CartItem(**data)

    return _make


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def notifier(sender):
    return Notifier(sender=sender, store_name="Test Store", store_public_url="https://shop.test/")


@pytest.fixture
def carrier_requests():
    return []


@pytest.fixture
def carrier_handler():
    """Default carrier API behaviour; tests replace it through ``set_carrier``."""
    state = {"handler": lambda request: httpx.Response(200, json={"tracking_number": "ZR-12345"})}
    return state


@pytest.fixture
def set_carrier(carrier_handler):
    def _set(handler) -> None:
        carrier_handler["handler"] = handler

    return _set


@pytest.fixture
def carrier_client(carrier_handler, carrier_requests):
    def _dispatch(request: httpx.Request) -> httpx.Response:
        carrier_requests.append(request)
        return carrier_handler["handler"](request)

    return CarrierClient(timeout=1, transport=httpx.MockTransport(_dispatch))


@pytest.fixture
def repository():
    return InMemoryOrderRepository()


@pytest.fixture
def service(repository, notifier, carrier_client):
    return OrderService(
        repository,
        notifier=notifier,
        carrier_client=carrier_client,
        order_id_prefix="PKM",
        allow_placeholder_tracking=False,
    )


@pytest.fixture
def api_client(service, catalog):
    from main import app

    app.dependency_overrides[get_order_service] = lambda: service
    app.dependency_overrides[get_catalog_repository] = lambda: catalog
    yield TestClient(app)
    app.dependency_overrides.clear()
