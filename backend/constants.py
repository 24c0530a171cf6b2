from typing import Any, Dict, List

ORDER_ID_RANDOM_BYTES = 3
PLACEHOLDER_TRACKING_PREFIX = "MOCK"

# Carriers with an "api" block support automated shipment creation and tracking.
# The rest need a tracking number typed in by an operator.
DELIVERY_COMPANIES: List[Dict[str, Any]] = [
    {
        "id": "zr-express",
        "name": "ZR Express",
        "api": {
            "create_shipment_url": "https://api.zrexpress.com/create",
            "track_shipment_url": "https://api.zrexpress.com/track",
        },
    },
    {"id": "yalidine", "name": "Yalidine", "api": None},
    {"id": "maystro", "name": "Maystro Delivery", "api": None},
    {"id": "ems", "name": "EMS Algeria", "api": None},
]
