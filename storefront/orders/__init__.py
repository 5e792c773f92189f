"""
Orders — checkout, status transitions, reads.

    from storefront import orders as O

    creation = O.OrderCreation(db, catalog)
    result = await creation.create_order(store_id, [O.LineItem(product_id, 3)])

    machine = O.OrderStateMachine(db)
    match await machine.mark_paid(store_id, order_id):
        case Ok(O.Transition(order, changed)):
            ...
        case Error(err):
            ...
"""

from storefront.orders._types import (
    OrderStatus,
    Order,
    OrderItem,
    OrderDetail,
    LineItem,
    MAX_QUANTITY,
    Transition,
)
from storefront.orders._create import (
    OrderCreation,
    normalize_items,
)
from storefront.orders._state import (
    OrderStateMachine,
    load_order,
)
from storefront.orders._queries import (
    OrderQueries,
    clamp_limit,
    DEFAULT_LIST_LIMIT,
    MAX_LIST_LIMIT,
)

__all__ = (
    # Types
    "OrderStatus",
    "Order",
    "OrderItem",
    "OrderDetail",
    "LineItem",
    "MAX_QUANTITY",
    "Transition",
    # Checkout
    "OrderCreation",
    "normalize_items",
    # State machine
    "OrderStateMachine",
    "load_order",
    # Reads
    "OrderQueries",
    "clamp_limit",
    "DEFAULT_LIST_LIMIT",
    "MAX_LIST_LIMIT",
)
