from collections import defaultdict
from typing import Any, Dict, List, Optional, Protocol

from schemas import PriceTier, Product, ProductColor, ProductSize

PRODUCTS_TABLE = "products"
SIZES_TABLE = "product_sizes"


class CatalogRepository(Protocol):
    def get_product_sizes(self) -> Dict[str, List[ProductSize]]: ...

    def get_managed_products(self) -> List[Product]: ...


def _tiers(*pairs: tuple) -> List[PriceTier]:
    return [PriceTier(min_quantity=qty, price=price) for qty, price in pairs]


DEFAULT_PRODUCTS = [
    Product(
        id="cartonBox",
        name="Carton Box",
        available_colors=[
            ProductColor(name="Kraft", value="#c8a27a"),
            ProductColor(name="White", value="#ffffff"),
        ],
    ),
    Product(
        id="mailerBox",
        name="Mailer Box",
        available_colors=[ProductColor(name="White", value="#ffffff")],
    ),
    Product(
        id="paperBag",
        name="Paper Bag",
        available_colors=[
            ProductColor(name="Kraft", value="#c8a27a"),
            ProductColor(name="Black", value="#111111"),
        ],
    ),
    Product(id="businessCard", name="Business Card"),
]

DEFAULT_SIZES: Dict[str, List[ProductSize]] = {
    "cartonBox": [
        ProductSize(id="cb-s", width=15, height=10, depth=5, weight=50,
                    pricing=_tiers((50, 1.2), (200, 1.0))),
        ProductSize(id="cb-m", width=20, height=15, depth=10, weight=90,
                    pricing=_tiers((50, 1.8), (200, 1.5), (1000, 1.2))),
    ],
    "mailerBox": [
        ProductSize(id="mb-s", width=25, height=18, depth=6, weight=120,
                    pricing=_tiers((100, 2.1), (500, 1.7))),
    ],
    "paperBag": [
        ProductSize(id="pb-m", width=26, height=32, depth=12, weight=70,
                    pricing=_tiers((100, 0.9), (1000, 0.65))),
    ],
    "businessCard": [
        ProductSize(id="bc-std", width=8.5, height=5.5, weight=2,
                    pricing=_tiers((100, 0.12), (500, 0.08))),
    ],
}


class InMemoryCatalogRepository:
    def __init__(
        self,
        sizes: Optional[Dict[str, List[ProductSize]]] = None,
        products: Optional[List[Product]] = None,
    ) -> None:
        self._sizes = sizes if sizes is not None else DEFAULT_SIZES
        self._products = products if products is not None else DEFAULT_PRODUCTS

    def get_product_sizes(self) -> Dict[str, List[ProductSize]]:
        return {key: [size.model_copy(deep=True) for size in items] for key, items in self._sizes.items()}

    def get_managed_products(self) -> List[Product]:
        return [product.model_copy(deep=True) for product in self._products]


class SupabaseCatalogRepository:
    def __init__(self, client: Any = None) -> None:
        if client is None:
            from supabase_client import get_supabase

            client = get_supabase()
        self._client = client

    def get_product_sizes(self) -> Dict[str, List[ProductSize]]:
        response = self._client.table(SIZES_TABLE).select("*").execute()
        grouped: Dict[str, List[ProductSize]] = defaultdict(list)
        for row in response.data or []:
            product_id = row.get("product_id")
            if not product_id:
                continue
            grouped[product_id].append(ProductSize.model_validate(row))
        return dict(grouped)

    def get_managed_products(self) -> List[Product]:
        response = self._client.table(PRODUCTS_TABLE).select("*").order("name").execute()
        return [Product.model_validate(row) for row in response.data or []]
