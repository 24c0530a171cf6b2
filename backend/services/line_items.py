from typing import Iterable, List

from schemas import CartItem, OrderLineItem

# Everything on a cart item except buyer contact and session fields.
LINE_ITEM_FIELDS = {
    "product_type",
    "product_name",
    "width",
    "height",
    "depth",
    "quantity",
    "color",
    "description",
    "logo_url",
    "logo_props",
    "unit_price",
    "item_weight",
}


def build_line_item(cart_item: CartItem) -> OrderLineItem:
    """Snapshot a cart item into an order line item.

    ``unit_price`` and ``item_weight`` are taken as stored on the cart item
    when it was added; the catalog is not consulted again here.
    """
    data = cart_item.model_dump(include=LINE_ITEM_FIELDS)
    data["logo_url"] = cart_item.logo_url or None
    return OrderLineItem(**data)


def build_line_items(cart_items: Iterable[CartItem]) -> List[OrderLineItem]:
    return [build_line_item(item) for item in cart_items]
