from __future__ import annotations

import pytest

from preloved.domain.entities import Order
from preloved.domain.order_flow import (
    available_actions,
    can_perform,
    can_review,
    is_forward,
    progress_fraction,
)


def _order(status: str) -> Order:
    return Order(id=1, status=status)


@pytest.mark.parametrize(
    "status,expected",
    [
        ("pending", ["pay"]),
        ("confirmed", ["ship"]),
        ("shipped", ["receive"]),
        ("delivered", []),
        ("cancelled", []),
    ],
)
def test_available_actions_follow_predecessor_status(status, expected) -> None:
    assert available_actions(_order(status)) == expected


def test_available_actions_filtered_by_role() -> None:
    assert available_actions(_order("confirmed"), role="buyer") == []
    assert available_actions(_order("confirmed"), role="seller") == ["ship"]
    assert available_actions(_order("shipped"), role="seller") == []


def test_is_forward_only_allows_next_step() -> None:
    assert is_forward("pending", "confirmed")
    assert not is_forward("pending", "shipped")
    assert not is_forward("shipped", "confirmed")
    assert not is_forward("cancelled", "pending")


def test_review_only_when_delivered() -> None:
    assert can_review(_order("delivered"))
    assert not can_review(_order("shipped"))
    assert can_perform(_order("shipped"), "receive")
    assert not can_perform(_order("pending"), "receive")


def test_progress_fraction_quarters() -> None:
    assert progress_fraction("pending") == 0.25
    assert progress_fraction("shipped") == 0.75
    assert progress_fraction("delivered") == 1.0
    assert progress_fraction("cancelled") == 0.25
