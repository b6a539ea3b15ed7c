# storefront/tasks/submit.py
from requests import RequestException

from storefront.celery_worker import celery_app
from storefront.services.order_client import OrderClient
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@celery_app.task(name="storefront.tasks.submit.submit_order_beacon_task")
def submit_order_beacon_task(body: str):
    """
    Queued variant of the order beacon. Single attempt, failures only logged;
    the customer already has the order in the WhatsApp handoff.
    """
    try:
        OrderClient().send_beacon(body)
    except RequestException as e:
        logger.warning(f"Queued order beacon failed: {e}")
        return {"status": "failed"}

    return {"status": "sent"}
