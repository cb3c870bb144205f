"""
Order status lifecycle.

    pending -> preparing -> out-for-delivery -> delivered

Only three rules are enforced: a status must be one of the four above, a
request asking for `delivered` may not change an order, and an order can be
deleted only while it is still `pending`. Moves between the first three
states are not ordered, so an order may go back from `preparing` to
`pending`.
"""

from typing import Any

from grubdash.models import OrderStatus

ORDER_STATUSES: tuple[str, ...] = tuple(s.value for s in OrderStatus)

TERMINAL_STATUS = OrderStatus.DELIVERED.value
DELETABLE_STATUS = OrderStatus.PENDING.value


def is_legal_status(status: Any) -> bool:
    return isinstance(status, str) and status in ORDER_STATUSES


def is_terminal(status: Any) -> bool:
    return status == TERMINAL_STATUS


def can_delete(status: Any) -> bool:
    return status == DELETABLE_STATUS
