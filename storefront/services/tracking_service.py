# storefront/services/tracking_service.py
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List

from requests import RequestException

from storefront.domain.schemas import TrackingInfo
from storefront.domain.stages import Step, is_cancelled, parse_status, steps_for
from storefront.services.order_client import OrderClient
from storefront.utils.formatting import format_datetime_kigali
from storefront.utils.settings import TRACK_POLL_INTERVAL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class PollHandle:
    """
    Recurring call on a daemon thread. ``cancel()`` stops it for good; a
    cancelled handle is never restarted, a new one is created instead.
    """

    def __init__(self, interval: float, fn: Callable[[], None], name: str = "order-tracker"):
        self.interval = interval
        self.fn = fn
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    def start(self) -> "PollHandle":
        self._thread.start()
        return self

    def _run(self) -> None:
        #wait() returns True as soon as cancel() is called
        while not self._stop.wait(self.interval):
            try:
                self.fn()
            except Exception as e:
                logger.error(f"Poll tick failed: {e}")

    def cancel(self) -> None:
        self._stop.set()

    @property
    def active(self) -> bool:
        return self._thread.is_alive() and not self._stop.is_set()


@dataclass
class TrackerView:
    loading: bool
    info: TrackingInfo | None = None
    status: str | None = None
    display_number: int | str | None = None
    steps: List[Step] = field(default_factory=list)
    cancelled: bool = False
    last_updated: datetime | None = None
    empty_message: str | None = None


class OrderTracker:
    """
    Polls the tracking endpoint for one order.

    The first fetch after subscribe shows the loading state, background polls
    do not. A failed poll keeps whatever was shown before.
    """

    def __init__(
        self,
        client: OrderClient,
        order_id: int | None = None,
        order_number: str | None = None,
        phone: str | None = None,
        poll_interval: float = TRACK_POLL_INTERVAL_SECONDS,
        empty_message: str | None = None,
        handle_factory: Callable[[float, Callable[[], None]], PollHandle] = PollHandle,
    ):
        self.client = client
        self.order_id = order_id
        self.order_number = order_number
        self.phone = phone
        self.poll_interval = poll_interval
        self.empty_message = empty_message
        self.handle_factory = handle_factory

        self._lock = threading.Lock()
        self._handle: PollHandle | None = None
        self._info: TrackingInfo | None = None
        self._loading = False
        self._last_updated: datetime | None = None
        #bumped on every target switch, answers for an old target are dropped
        self._generation = 0

    @property
    def can_track(self) -> bool:
        return bool(self.order_id or (self.order_number and self.phone))

    def _fetch(self) -> TrackingInfo:
        if self.order_id:
            return self.client.track_order(self.order_id)
        return self.client.track_order_by_number(self.order_number, self.phone)

    def refresh(self, show_loading: bool = False) -> None:
        if not self.can_track:
            return

        with self._lock:
            generation = self._generation
            if show_loading:
                self._loading = True
        try:
            info = self._fetch()
        except (RequestException, ValueError) as e:
            #order may simply not be trackable yet, keep last known state
            logger.warning(f"Failed to load tracking info: {e}")
            return
        finally:
            if show_loading:
                with self._lock:
                    self._loading = False

        with self._lock:
            if generation != self._generation:
                return
            previous = self._info.status if self._info else None
            self._info = info
            self._last_updated = datetime.now(timezone.utc)

        if info.status and info.status != previous:
            logger.info(
                f"Order {info.order_number or info.order_id} is {info.status} "
                f"(placed {format_datetime_kigali(info.created_at)})"
            )

    def subscribe(self) -> None:
        """Initial fetch, then poll until unsubscribe()."""
        self.unsubscribe()
        if not self.can_track:
            return

        self.refresh(show_loading=True)
        self._handle = self.handle_factory(self.poll_interval, self.refresh).start()
        logger.info(f"Tracking order {self.order_id or self.order_number} every {self.poll_interval}s")

    def unsubscribe(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def set_target(
        self,
        order_id: int | None = None,
        order_number: str | None = None,
        phone: str | None = None,
    ) -> None:
        """Switch to another order; the old poll is cancelled before a new one starts."""
        was_subscribed = self._handle is not None
        self.unsubscribe()

        self.order_id = order_id
        self.order_number = order_number
        self.phone = phone
        with self._lock:
            self._generation += 1
            self._info = None
            self._last_updated = None

        if was_subscribed:
            self.subscribe()

    @property
    def subscribed(self) -> bool:
        return self._handle is not None

    def view(self) -> TrackerView | None:
        with self._lock:
            info = self._info
            loading = self._loading
            last_updated = self._last_updated

        if loading:
            return TrackerView(loading=True)

        if info is None or not info.status:
            if self.empty_message:
                return TrackerView(loading=False, empty_message=self.empty_message)
            return None

        status = parse_status(info.status)
        return TrackerView(
            loading=False,
            info=info,
            status=status.value,
            display_number=info.order_number or info.order_id,
            steps=steps_for(status),
            cancelled=is_cancelled(status),
            last_updated=last_updated,
        )
