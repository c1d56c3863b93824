"""Checkout and order lifecycle.

Checkout is driven by the client in two calls: ``create_order_from_cart``
turns the session's cart into an order, then ``confirm_payment`` charges
the stored total through the payment gateway.  Lifecycle status and
payment status are separate fields; paying an order never touches its
lifecycle status.
"""
import logging
from decimal import Decimal
from typing import List
from storefront.core.auth import AdminIdentity
from storefront.core.config import Settings
from storefront.core.errors import Conflict, InvalidInput, NotFound, PaymentDeclined
from storefront.schemas import OrderCreate, OrderStatus, PaymentStatus, PaymentSubmit, StatusChange
from storefront.store.base import Storage

log = logging.getLogger(__name__)

def create_order_from_cart(store: Storage, settings: Settings, session_id: str, payload: OrderCreate):
    cart = store.list_cart_items(session_id)
    if not cart:
        raise InvalidInput('Cart is empty')

    with store.transaction():
        order = store.create_order({
            **payload.model_dump(),
            'status': OrderStatus.PENDING.value,
            'payment_status': PaymentStatus.UNPAID.value,
        })
        computed = Decimal('0')
        for item in cart:
            product = store.get_product(item.product_id)
            if not product:
                continue
            if settings.INVENTORY_DECREMENT_ON_ORDER:
                if product.inventory < item.quantity:
                    raise Conflict(f'Insufficient stock for product_id {product.id}')
                store.update_product(product.id, {'inventory': product.inventory - item.quantity})
            store.add_order_item({
                'order_id': order.id,
                'product_id': product.id,
                'product_name': product.name,
                'price': product.price,
                'quantity': item.quantity,
            })
            computed += Decimal(product.price) * item.quantity
        store.clear_cart(session_id)

    # the client-supplied total is stored as-is
    if computed != payload.total_amount:
        log.warning('Order %s total %s differs from item total %s', order.id, payload.total_amount, computed)
    log.info('Order %s created from %d cart rows', order.id, len(cart))
    return order

def get_order_detail(store: Storage, order_id: int):
    order = store.get_order(order_id)
    if not order:
        raise NotFound('Order not found')
    return order, store.list_order_items(order.id)

def confirm_payment(store: Storage, gateway, order_id: int, payment: PaymentSubmit):
    order = store.get_order(order_id)
    if not order:
        raise NotFound('Order not found')
    if order.payment_status == PaymentStatus.PAID.value:
        raise Conflict('Order already paid')
    if payment.amount is not None and Decimal(payment.amount) != Decimal(order.total_amount):
        raise InvalidInput('Payment amount does not match order total')

    result = gateway.charge(payment.source_id, Decimal(order.total_amount), order.id, order.email)
    if not result.success:
        log.info('Payment for order %s failed: %s', order.id, result.error)
        raise PaymentDeclined(result.error or 'Payment processing failed')

    log.info('Order %s paid (%s)', order.id, result.payment_id)
    return store.update_order(order.id, {'payment_id': result.payment_id,
                                         'payment_status': PaymentStatus.PAID.value})

def change_status(store: Storage, admin: AdminIdentity, order_id: int, status: OrderStatus):
    # any lifecycle value is accepted from any other one
    order = store.get_order(order_id)
    if not order:
        raise NotFound('Order not found')
    previous = order.status
    updated = store.update_order(order_id, {'status': status.value})
    log.info('%s moved order %s from %s to %s', admin.username, order_id, previous, status.value)
    return updated

def bulk_change_status(store: Storage, admin: AdminIdentity, order_ids: List[int], status: OrderStatus) -> List[StatusChange]:
    changes = []
    with store.transaction():
        for order_id in dict.fromkeys(order_ids):
            order = store.get_order(order_id)
            if not order:
                raise NotFound(f'Order {order_id} not found')
            previous = order.status
            store.update_order(order_id, {'status': status.value})
            changes.append(StatusChange(order_id=order_id, previous_status=previous, status=status.value))
    log.info('%s moved %d orders to %s', admin.username, len(changes), status.value)
    return changes
