from storefront.models.order import OrderStatus, PaymentStatus

ALLOWED_ORDER_TRANSITIONS = {
    OrderStatus.new: [OrderStatus.confirmed, OrderStatus.cancelled],
    OrderStatus.confirmed: [OrderStatus.packed, OrderStatus.cancelled],
    OrderStatus.packed: [OrderStatus.shipped, OrderStatus.cancelled],
    OrderStatus.shipped: [OrderStatus.delivered, OrderStatus.returned],
    OrderStatus.delivered: [OrderStatus.returned],
    OrderStatus.cancelled: [],
    OrderStatus.returned: [],
}

# partial = part of a paid order refunded
ALLOWED_PAYMENT_TRANSITIONS = {
    PaymentStatus.pending: [PaymentStatus.paid, PaymentStatus.failed],
    PaymentStatus.failed: [PaymentStatus.paid],
    PaymentStatus.paid: [PaymentStatus.refunded, PaymentStatus.partial],
    PaymentStatus.partial: [PaymentStatus.refunded, PaymentStatus.partial],
    PaymentStatus.refunded: [],
}

# payment_status values a verified gateway payment may move out of
PAYABLE_STATUSES = tuple(
    current
    for current, allowed in ALLOWED_PAYMENT_TRANSITIONS.items()
    if PaymentStatus.paid in allowed
)

REFUNDABLE_STATUSES = (PaymentStatus.paid, PaymentStatus.partial)

# what an admin may set by hand on a cash-on-delivery order
COD_SETTABLE_STATUSES = (PaymentStatus.pending, PaymentStatus.paid, PaymentStatus.failed)


def can_transition(current: PaymentStatus, target: PaymentStatus) -> bool:
    return target in ALLOWED_PAYMENT_TRANSITIONS.get(current, [])


def can_change_status(current: OrderStatus, target: OrderStatus) -> bool:
    return target in ALLOWED_ORDER_TRANSITIONS.get(current, [])
