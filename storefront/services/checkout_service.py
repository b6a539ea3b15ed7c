# storefront/services/checkout_service.py
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, List
from urllib.parse import quote

from storefront.domain.schemas import (
    CartItem,
    CheckoutDraft,
    CheckoutQuote,
    CheckoutResult,
    DeliveryOption,
    OrderItemPayload,
    OrderPayload,
)
from storefront.services.cart_service import CartStore
from storefront.services.delivery import delivery_fee, delivery_label
from storefront.services.order_client import OrderClient
from storefront.utils.formatting import format_rwf
from storefront.utils.settings import MERCHANT_WHATSAPP_NUMBER
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

#same set of characters JS encodeURIComponent leaves untouched
_URI_SAFE = "-_.!~*'()"

Submitter = Callable[[str], None]


class CheckoutValidationError(ValueError):
    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class ThreadSubmitter:
    """Posts the order beacon from a worker thread; the caller never waits."""

    def __init__(self, client: OrderClient, max_workers: int = 2):
        self.client = client
        self.executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="order-beacon",
        )

    def __call__(self, body: str) -> None:
        future = self.executor.submit(self.client.send_beacon, body)
        future.add_done_callback(_log_beacon_outcome)

    def shutdown(self, wait: bool = True) -> None:
        self.executor.shutdown(wait=wait)
        logger.info("Order beacon workers stopped")


def _log_beacon_outcome(future: Future) -> None:
    exc = future.exception()
    if exc is not None:
        logger.warning(f"Order beacon failed, order may not be recorded: {exc}")
    else:
        logger.info("Order beacon sent")


class CelerySubmitter:
    """Hands the order beacon to the Celery queue."""

    def __call__(self, body: str) -> None:
        from storefront.tasks.submit import submit_order_beacon_task

        submit_order_beacon_task.delay(body)


def build_submitter(kind: str, client: OrderClient) -> Submitter:
    if kind == "celery":
        return CelerySubmitter()
    if kind == "thread":
        return ThreadSubmitter(client)
    raise ValueError(f"Unknown checkout submitter: {kind}")


def _clean(value: str | None) -> str:
    return (value or "").strip()


class CheckoutService:
    """
    WhatsApp checkout.

    The order beacon and the customer handoff are two independent branches:
    the beacon is fired and forgotten, the handoff URL is built only from
    what the client holds (draft + cart). Once validation passes the cart is
    cleared and the handoff returned whatever happens to the beacon.
    """

    def __init__(
        self,
        cart: CartStore,
        submitter: Submitter,
        merchant_number: str = MERCHANT_WHATSAPP_NUMBER,
    ):
        self.cart = cart
        self.submitter = submitter
        self.merchant_number = merchant_number

    #query
    @staticmethod
    def can_submit(draft: CheckoutDraft) -> bool:
        if not _clean(draft.customer_phone):
            return False
        if draft.delivery_option != DeliveryOption.PICKUP and not _clean(draft.delivery_location):
            return False
        return True

    def quote(self, draft: CheckoutDraft) -> CheckoutQuote:
        subtotal = self.cart.total()
        fee = delivery_fee(draft.delivery_option)
        return CheckoutQuote(
            subtotal=subtotal,
            delivery_fee=fee,
            grand_total=subtotal + fee,
            can_submit=self.can_submit(draft) and not self.cart.is_empty(),
        )

    @staticmethod
    def validate(draft: CheckoutDraft, items: List[CartItem]) -> None:
        """First failing rule wins."""
        if not _clean(draft.customer_phone):
            raise CheckoutValidationError("customer_phone", "phone required")

        if draft.delivery_option != DeliveryOption.PICKUP and not _clean(draft.delivery_location):
            raise CheckoutValidationError("delivery_location", "location required")

        if not items:
            raise CheckoutValidationError("cart", "cart is empty")

    @staticmethod
    def build_payload(draft: CheckoutDraft, items: List[CartItem]) -> OrderPayload:
        subtotal = sum(i.price * i.quantity for i in items)
        is_pickup = draft.delivery_option == DeliveryOption.PICKUP

        return OrderPayload(
            customer_name=_clean(draft.customer_name) or None,
            customer_phone=_clean(draft.customer_phone),
            channel="whatsapp",
            subtotal=subtotal,
            delivery_option=draft.delivery_option,
            delivery_fee=delivery_fee(draft.delivery_option),
            delivery_location=None if is_pickup else _clean(draft.delivery_location),
            items=[
                OrderItemPayload(product_id=i.id, quantity=i.quantity, unit_price=i.price)
                for i in items
            ],
        )

    @staticmethod
    def build_message(draft: CheckoutDraft, items: List[CartItem]) -> str:
        option = draft.delivery_option
        location = _clean(draft.delivery_location)
        grand_total = sum(i.price * i.quantity for i in items) + delivery_fee(option)

        lines = [
            "NEW ORDER",
            "",
            f"Customer: {_clean(draft.customer_name) or 'Guest'}",
            f"Phone: {_clean(draft.customer_phone)}",
        ]

        if option != DeliveryOption.PICKUP:
            lines.append(f"Delivery: {delivery_label(option)}")
            if location:
                lines.append(f"Location: {location}")

        lines.extend(["", "ORDER ITEMS:"])
        for idx, item in enumerate(items, start=1):
            lines.append(
                f"{idx}. {item.name} - Qty: {item.quantity} x {format_rwf(item.price)} RWF"
            )
        lines.extend(["", f"TOTAL: {format_rwf(grand_total)} RWF"])

        return "\n".join(lines)

    def build_handoff_url(self, draft: CheckoutDraft, items: List[CartItem]) -> str:
        message = self.build_message(draft, items)
        return f"https://wa.me/{self.merchant_number}?text={quote(message, safe=_URI_SAFE)}"

    #commands
    def submit_in_background(self, payload: OrderPayload) -> None:
        body = payload.model_dump_json(by_alias=True)
        try:
            self.submitter(body)
        except Exception as e:
            #the handoff must go ahead even when the submitter itself blows up
            logger.warning(f"Could not dispatch order beacon: {e}")

    def checkout(self, draft: CheckoutDraft) -> CheckoutResult:
        items = self.cart.items()
        self.validate(draft, items)

        payload = self.build_payload(draft, items)
        message = self.build_message(draft, items)
        handoff_url = self.build_handoff_url(draft, items)

        logger.info(
            f"Checkout for {len(items)} items, {payload.delivery_option.value}, "
            f"total {payload.subtotal + payload.delivery_fee} RWF"
        )

        self.submit_in_background(payload)
        self.cart.clear()

        return CheckoutResult(
            handoff_url=handoff_url,
            message=message,
            grand_total=payload.subtotal + payload.delivery_fee,
        )
