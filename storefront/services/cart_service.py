# storefront/services/cart_service.py
from typing import List
import redis

from storefront.domain.schemas import CartItem, ProductIn
from storefront.repos.cart_repo import CartStorage
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

#errors the storage port may raise; none of them is fatal for the session
STORAGE_ERRORS = (OSError, ValueError, redis.RedisError)


class CartStore:
    """
    Client cart held in memory, storage is only a copy of it.
    commands (add, remove, set_quantity, clear) persist right away
    query (items, total, count) read only
    """

    def __init__(self, storage: CartStorage):
        self.storage = storage
        self._items: List[CartItem] = []
        self._hydrate()

    def _hydrate(self) -> None:
        try:
            self._items = self.storage.load()
            logger.info(f"Cart hydrated with {len(self._items)} items")
        except STORAGE_ERRORS as e:
            logger.error(f"Failed to load cart: {e}")
            self._items = []

    def _persist(self) -> None:
        try:
            self.storage.save(list(self._items))
        except STORAGE_ERRORS as e:
            logger.error(f"Failed to save cart: {e}")

    #query
    def items(self) -> List[CartItem]:
        return [item.model_copy() for item in self._items]

    def get(self, product_id: int) -> CartItem | None:
        for item in self._items:
            if item.id == product_id:
                return item.model_copy()
        return None

    def total(self) -> int:
        return sum(item.price * item.quantity for item in self._items)

    def count(self) -> int:
        return sum(item.quantity for item in self._items)

    def is_empty(self) -> bool:
        return not self._items

    #commands
    def add_item(self, product: ProductIn) -> CartItem:
        for idx, item in enumerate(self._items):
            if item.id == product.id:
                updated = item.model_copy(update={"quantity": item.quantity + 1})
                self._items[idx] = updated
                logger.info(
                    f"Product {product.id} already in cart, quantity "
                    f"{item.quantity} -> {updated.quantity}"
                )
                self._persist()
                return updated.model_copy()

        added = CartItem(
            id=product.id,
            name=product.name,
            price=product.price,
            image=product.image,
            quantity=1,
        )
        self._items.append(added)
        logger.info(f"Added product {product.id} to cart")
        self._persist()
        return added.model_copy()

    def remove_item(self, product_id: int) -> None:
        before = len(self._items)
        self._items = [item for item in self._items if item.id != product_id]
        if len(self._items) != before:
            logger.info(f"Removed product {product_id} from cart")
        self._persist()

    def set_quantity(self, product_id: int, quantity: int) -> None:
        if quantity <= 0:
            self.remove_item(product_id)
            return

        self._items = [
            item.model_copy(update={"quantity": quantity}) if item.id == product_id else item
            for item in self._items
        ]
        self._persist()

    def clear(self) -> None:
        self._items = []
        logger.info("Cart cleared")
        self._persist()
