from typing import Dict, List, Optional, Sequence

from errors import QuoteRequiredError
from schemas import CartItem, CustomizationDetails, PriceQuote, PriceTier, ProductSize

CUSTOM_SIZE_QUOTE = PriceQuote(
    price_per_item=None,
    total_price=None,
    item_weight=None,
    discount_applied=False,
    is_custom_size=True,
)


def find_size(
    sizes: Sequence[ProductSize], width: float, height: float, depth: float
) -> Optional[ProductSize]:
    # Dimensions come from the catalog itself, so exact equality is intended.
    for size in sizes:
        if size.width == width and size.height == height and (size.depth or 0) == depth:
            return size
    return None


def select_tier(pricing: Sequence[PriceTier], quantity: int) -> tuple[PriceTier, bool]:
    """Return the applicable tier and whether it is a discounted (non-base) tier.

    Tiers are walked from the highest ``min_quantity`` down; the first one the
    quantity reaches wins. A quantity below every threshold falls back to the
    base tier, i.e. the one with the smallest ``min_quantity``. The sort is
    stable, so tiers sharing a threshold keep their catalog order.
    """
    ordered = sorted(pricing, key=lambda tier: tier.min_quantity, reverse=True)
    base = ordered[-1]
    for tier in ordered:
        if tier.min_quantity <= quantity:
            return tier, tier is not base
    return base, False


def calculate_price(
    product_type: str,
    width: float,
    height: float,
    depth: Optional[float],
    quantity: int,
    sizes_for_product: Sequence[ProductSize],
) -> PriceQuote:
    """Quote ``quantity`` boxes of one size of ``product_type``.

    ``sizes_for_product`` must already be narrowed to that product's sizes;
    ``product_type`` names it for callers and is not used to filter. A size
    not in the list is a custom size and gets a quote-required result.
    """
    size = find_size(sizes_for_product, width, height, depth or 0)
    if size is None:
        return CUSTOM_SIZE_QUOTE.model_copy()
    tier, discounted = select_tier(size.pricing, quantity)
    return PriceQuote(
        price_per_item=tier.price,
        total_price=tier.price * quantity,
        item_weight=size.weight,
        discount_applied=discounted,
        is_custom_size=False,
    )


def price_cart_item(
    details: CustomizationDetails,
    sizes_by_product: Dict[str, List[ProductSize]],
    cart_item_id: str,
) -> CartItem:
    quote = calculate_price(
        details.product_type,
        details.width,
        details.height,
        details.depth,
        details.quantity,
        sizes_by_product.get(details.product_type, []),
    )
    if quote.is_custom_size:
        raise QuoteRequiredError(
            details.product_type, details.width, details.height, details.depth
        )
    return CartItem(
        **details.model_dump(),
        cart_item_id=cart_item_id,
        unit_price=quote.price_per_item,
        item_weight=quote.item_weight,
    )
