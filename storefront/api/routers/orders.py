# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request

from storefront.domain.schemas import (
    OrderHistoryOut,
    TrackByNumberIn,
    TrackingOut,
    TrackingStepOut,
)
from storefront.services.order_client import OrderClient
from storefront.services.order_history_service import OrderHistoryService
from storefront.services.tracking_service import OrderTracker, TrackerView
from storefront.utils.formatting import normalize_phone

router = APIRouter(prefix="/orders", tags=["orders"])

EMPTY_TRACKING_MESSAGE = "Tracking information is not available for this order yet."
MAX_TRACKERS = 500


def get_client(request: Request) -> OrderClient:
    return request.app.state.order_client


def get_trackers(request: Request) -> dict:
    return request.app.state.trackers


def _tracker_for(trackers: dict, key: tuple, **target) -> OrderTracker:
    """
    One tracker per order, so a failed refresh answers with the last status
    seen instead of an empty one.
    """
    tracker = trackers.get(key)
    if tracker is None:
        if len(trackers) >= MAX_TRACKERS:
            #oldest first
            oldest = trackers.pop(next(iter(trackers)), None)
            if oldest is not None:
                oldest.unsubscribe()
        tracker = trackers.setdefault(key, OrderTracker(**target))
    return tracker


def _tracking_out(view: TrackerView | None) -> TrackingOut:
    if view is None or view.info is None:
        return TrackingOut(found=False, message=EMPTY_TRACKING_MESSAGE)

    info = view.info
    return TrackingOut(
        found=True,
        status=view.status,
        order_number=view.display_number,
        tracking_number=info.tracking_number,
        cancelled=view.cancelled,
        steps=[
            TrackingStepOut(key=s.key.value, label=s.label, completed=s.completed)
            for s in view.steps
        ],
        created_at=info.created_at,
        shipped_at=info.shipped_at,
        delivered_at=info.delivered_at,
        last_updated=view.last_updated,
    )


@router.get("/{order_id}/tracking", response_model=TrackingOut)
def track_order(
    order_id: int,
    client: OrderClient = Depends(get_client),
    trackers: dict = Depends(get_trackers),
):
    tracker = _tracker_for(trackers, ("id", order_id), client=client, order_id=order_id)
    tracker.refresh()
    return _tracking_out(tracker.view())


@router.post("/tracking", response_model=TrackingOut)
def track_order_by_number(
    payload: TrackByNumberIn,
    client: OrderClient = Depends(get_client),
    trackers: dict = Depends(get_trackers),
):
    key = ("number", payload.order_number, normalize_phone(payload.phone) or payload.phone)
    tracker = _tracker_for(
        trackers, key, client=client, order_number=payload.order_number, phone=payload.phone
    )
    tracker.refresh()
    return _tracking_out(tracker.view())


@router.get("/history", response_model=OrderHistoryOut)
def order_history(
    period: str = Query("all"),
    sort_by: str = Query("newest"),
    authorization: str | None = Header(None),
    client: OrderClient = Depends(get_client),
):
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Login required")

    user_client = OrderClient(
        base_url=client.base_url,
        timeout=client.timeout,
        session=client.session,
        token=authorization.split(" ", 1)[1].strip(),
    )
    svc = OrderHistoryService(user_client)
    orders = svc.load()

    try:
        shown = svc.sort_orders(svc.filter_orders(orders, period), sort_by)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return OrderHistoryOut(
        orders=shown,
        display_numbers=svc.display_numbers(orders),
        total_spent=svc.total_spent(orders),
    )
