# storefront/api/routers/checkout.py
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse

from storefront.domain.schemas import CheckoutDraft, CheckoutQuote, DeliveryOption
from storefront.services.checkout_service import CheckoutService, CheckoutValidationError

router = APIRouter(prefix="/checkout", tags=["checkout"])


def get_service(request: Request) -> CheckoutService:
    return request.app.state.checkout_service


@router.get("/quote", response_model=CheckoutQuote)
def quote(
    delivery_option: DeliveryOption = DeliveryOption.PICKUP,
    customer_phone: str = "",
    delivery_location: str | None = None,
    svc: CheckoutService = Depends(get_service),
):
    draft = CheckoutDraft(
        customer_phone=customer_phone,
        delivery_option=delivery_option,
        delivery_location=delivery_location,
    )
    return svc.quote(draft)


@router.post("")
def checkout(draft: CheckoutDraft, svc: CheckoutService = Depends(get_service)):
    """
    Validates the draft, fires the order beacon and redirects the customer
    to WhatsApp. The redirect does not depend on the beacon.
    """
    try:
        result = svc.checkout(draft)
    except CheckoutValidationError as e:
        return JSONResponse(status_code=422, content={"field": e.field, "detail": e.message})

    return RedirectResponse(url=result.handoff_url, status_code=303)
