# storefront/api/routers/cart.py
from fastapi import APIRouter, Depends, HTTPException, Request

from storefront.domain.schemas import CartItem, CartOut, ProductIn, QuantityIn
from storefront.services.cart_service import CartStore

router = APIRouter(prefix="/cart", tags=["cart"])


def get_cart(request: Request) -> CartStore:
    return request.app.state.cart_store


def _cart_out(cart: CartStore) -> CartOut:
    return CartOut(items=cart.items(), total=cart.total(), count=cart.count())


@router.get("", response_model=CartOut)
def read_cart(cart: CartStore = Depends(get_cart)):
    return _cart_out(cart)


@router.post("/items", response_model=CartItem, status_code=201)
def add_item(payload: ProductIn, cart: CartStore = Depends(get_cart)):
    return cart.add_item(payload)


@router.put("/items/{product_id}", response_model=CartOut)
def set_quantity(product_id: int, payload: QuantityIn, cart: CartStore = Depends(get_cart)):
    if cart.get(product_id) is None:
        raise HTTPException(status_code=404, detail="Product not in cart")
    cart.set_quantity(product_id, payload.quantity)
    return _cart_out(cart)


@router.delete("/items/{product_id}", response_model=CartOut)
def remove_item(product_id: int, cart: CartStore = Depends(get_cart)):
    cart.remove_item(product_id)
    return _cart_out(cart)


@router.delete("", response_model=CartOut)
def clear_cart(cart: CartStore = Depends(get_cart)):
    cart.clear()
    return _cart_out(cart)
