"""
Unit tests for order status classification.
"""

import pytest

from storefront.domain.stages import OrderStatus, Stage, classify, is_cancelled, steps_for


def completed(status):
    return [s.key.value for s in steps_for(status) if s.completed]


@pytest.mark.parametrize(
    "status, stage",
    [
        ("PENDING", Stage.PLACED),
        ("CONFIRMED", Stage.PROCESSING),
        ("PROCESSING", Stage.PROCESSING),
        ("SHIPPED", Stage.SHIPPED),
        ("DELIVERED", Stage.DELIVERED),
        ("CANCELLED", Stage.CANCELLED),
        (OrderStatus.SHIPPED, Stage.SHIPPED),
    ],
)
def test_classify(status, stage):
    assert classify(status) is stage


def test_unknown_status_reads_as_pending():
    assert classify("ON_HOLD") is Stage.PLACED
    assert classify(None) is Stage.PLACED


def test_lowercase_status_is_accepted():
    assert classify("shipped") is Stage.SHIPPED


def test_shipped_steps():
    assert completed("SHIPPED") == ["PENDING", "CONFIRMED", "PROCESSING", "SHIPPED"]


def test_confirmed_and_processing_complete_the_same_steps():
    assert completed("CONFIRMED") == completed("PROCESSING") == ["PENDING", "CONFIRMED", "PROCESSING"]


def test_pending_only_placed():
    assert completed("PENDING") == ["PENDING"]


def test_delivered_completes_everything():
    assert completed("DELIVERED") == ["PENDING", "CONFIRMED", "PROCESSING", "SHIPPED", "DELIVERED"]


def test_cancelled_is_separate_branch():
    assert is_cancelled("CANCELLED")
    assert not is_cancelled("DELIVERED")
    assert completed("CANCELLED") == ["PENDING"]


def test_step_labels_and_order():
    labels = [s.label for s in steps_for("PENDING")]
    assert labels == ["Order Placed", "Confirmed", "Processing", "Shipped", "Delivered"]
