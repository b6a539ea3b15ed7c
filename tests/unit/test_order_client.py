"""
Unit tests for the orders REST client (requests session mocked).
"""

import json
from unittest.mock import MagicMock

import pytest
import requests

from storefront.services.order_client import OrderClient


def response(payload, status=200):
    resp = MagicMock()
    resp.json.return_value = payload
    resp.status_code = status
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} error", response=resp)
    return resp


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


def test_send_beacon_posts_plain_text(session):
    client = OrderClient(base_url="http://orders.test/api/", session=session)
    body = json.dumps({"customerPhone": "0788123456"})

    client.send_beacon(body)

    args, kwargs = session.post.call_args
    assert args[0] == "http://orders.test/api/orders/beacon"
    assert kwargs["data"] == body.encode("utf-8")
    assert kwargs["headers"]["Content-Type"] == "text/plain;charset=UTF-8"
    assert kwargs["timeout"] == client.beacon_timeout


def test_send_beacon_is_single_attempt(session):
    session.post.side_effect = requests.ConnectionError("refused")
    client = OrderClient(base_url="http://orders.test/api", session=session)

    with pytest.raises(requests.ConnectionError):
        client.send_beacon("{}")

    assert session.post.call_count == 1


def test_track_order(session):
    session.get.return_value = response({
        "orderId": 7,
        "orderNumber": 3,
        "status": "SHIPPED",
        "trackingNumber": "RW123",
        "createdAt": "2024-03-01T08:30:00",
        "shippedAt": None,
    })
    client = OrderClient(base_url="http://orders.test/api", session=session, token="jwt")

    info = client.track_order(7)

    assert info.status == "SHIPPED"
    assert info.order_number == 3
    assert info.tracking_number == "RW123"
    assert info.created_at.year == 2024
    args, kwargs = session.get.call_args
    assert args[0] == "http://orders.test/api/orders/7/track"
    assert kwargs["headers"] == {"Authorization": "Bearer jwt"}


def test_track_order_by_number_normalises_phone(session):
    session.post.return_value = response({"orderId": 7, "status": "PENDING"})
    client = OrderClient(base_url="http://orders.test/api", session=session)

    client.track_order_by_number("3", "0788 123 456")

    args, kwargs = session.post.call_args
    assert args[0] == "http://orders.test/api/orders/track"
    assert kwargs["json"] == {"orderNumber": "3", "phone": "250788123456"}


def test_track_order_http_error(session):
    session.get.return_value = response({}, status=404)
    client = OrderClient(base_url="http://orders.test/api", session=session)

    with pytest.raises(requests.HTTPError):
        client.track_order(99)


def test_my_orders(session):
    session.get.return_value = response([
        {"id": 1, "order_number": 4, "status": "DELIVERED", "subtotal": 15000, "delivery_fee": 2000},
    ])
    client = OrderClient(base_url="http://orders.test/api", session=session, token="jwt")

    orders = client.my_orders()

    assert orders[0].order_number == 4
    assert orders[0].total == 17000


def test_my_orders_non_list_body(session):
    session.get.return_value = response({"error": "nope"})
    client = OrderClient(base_url="http://orders.test/api", session=session, token="jwt")
    assert client.my_orders() == []


def test_beacon_timeout_is_configurable(session):
    client = OrderClient(base_url="http://orders.test/api", session=session, beacon_timeout=0.5)

    client.send_beacon("{}")

    assert session.post.call_args.kwargs["timeout"] == 0.5


def test_my_orders_expired_login_is_not_retried(session):
    session.get.return_value = response({}, status=401)
    client = OrderClient(base_url="http://orders.test/api", session=session, token="old")

    with pytest.raises(requests.HTTPError):
        client.my_orders()

    assert session.get.call_count == 1


def test_my_orders_retries_server_error(session):
    session.get.side_effect = [
        response({}, status=503),
        response([{"id": 1, "subtotal": 5000}]),
    ]
    client = OrderClient(base_url="http://orders.test/api", session=session, token="jwt")

    orders = client.my_orders()

    assert session.get.call_count == 2
    assert orders[0].id == 1


def test_my_orders_gives_up_after_three_connection_errors(session):
    session.get.side_effect = requests.ConnectionError("cold start")
    client = OrderClient(base_url="http://orders.test/api", session=session, token="jwt")

    with pytest.raises(requests.ConnectionError):
        client.my_orders()

    assert session.get.call_count == 3
