# storefront/main.py
from fastapi import FastAPI
import uvicorn

from storefront.api.routers import cart, checkout, health, orders
from storefront.repos.cart_repo import CartStorage, build_storage
from storefront.services.cart_service import CartStore
from storefront.services.checkout_service import CheckoutService, Submitter, build_submitter
from storefront.services.order_client import OrderClient
from storefront.utils.settings import (
    CART_STORAGE_BACKEND,
    CART_STORAGE_KEY,
    CART_STORAGE_PATH,
    CHECKOUT_SUBMITTER,
    REDIS_URL,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def create_app(
    storage: CartStorage | None = None,
    order_client: OrderClient | None = None,
    submitter: Submitter | None = None,
) -> FastAPI:
    app = FastAPI(
        title="Kitenge Storefront",
        version="1.0.0",
    )

    storage = storage or build_storage(
        CART_STORAGE_BACKEND, CART_STORAGE_PATH, CART_STORAGE_KEY, REDIS_URL
    )
    order_client = order_client or OrderClient()
    submitter = submitter or build_submitter(CHECKOUT_SUBMITTER, order_client)

    cart_store = CartStore(storage)
    app.state.cart_store = cart_store
    app.state.order_client = order_client
    app.state.checkout_service = CheckoutService(cart_store, submitter)
    app.state.trackers = {}

    @app.on_event("shutdown")
    def _shutdown() -> None:
        for tracker in list(app.state.trackers.values()):
            tracker.unsubscribe()
        #let beacons already handed over finish
        if hasattr(submitter, "shutdown"):
            submitter.shutdown()

    logger.info(
        f"Storefront ready: cart storage {type(storage).__name__}, "
        f"orders API {order_client.base_url}"
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(cart.router)
    app.include_router(checkout.router)
    app.include_router(orders.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
