# storefront/services/delivery.py
from storefront.domain.schemas import DeliveryOption

DELIVERY_FEES = {
    DeliveryOption.PICKUP: 0,
    DeliveryOption.KIGALI: 2000,
    DeliveryOption.UPCOUNTRY: 3500,
}

DELIVERY_LABELS = {
    DeliveryOption.PICKUP: "Pickup",
    DeliveryOption.KIGALI: "Kigali Delivery",
    DeliveryOption.UPCOUNTRY: "Upcountry Delivery",
}


def _as_option(option) -> DeliveryOption | None:
    try:
        return DeliveryOption(option)
    except ValueError:
        return None


def delivery_fee(option) -> int:
    """Fee in RWF; an unrecognised option costs nothing."""
    return DELIVERY_FEES.get(_as_option(option), 0)


def delivery_label(option) -> str:
    return DELIVERY_LABELS.get(_as_option(option), "Upcountry Delivery")
