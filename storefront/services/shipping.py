"""Simulated shipping labels.

No carrier is contacted.  A label gets a made-up identifier and the
order moves to ``shipped``; that status change is the only real effect.
Storage is blocking, so its calls run in the threadpool and only the
configured delay is awaited on the event loop.
"""
import asyncio, logging, random, time
from decimal import Decimal
from fastapi.concurrency import run_in_threadpool
from storefront.core.auth import AdminIdentity
from storefront.core.config import Settings
from storefront.core.errors import InvalidInput
from storefront.schemas import OrderRead, OrderStatus, ShippingLabel, ShippingLabelRequest, ShipTo
from storefront.services.orders import change_status, get_order_detail
from storefront.store.base import Storage

log = logging.getLogger(__name__)

SHIPPING_SERVICES = {
    'usps_priority': ('USPS Priority Mail', Decimal('7.95'), '1-3'),
    'usps_priority_express': ('USPS Priority Mail Express', Decimal('26.95'), '1-2'),
    'usps_first_class': ('USPS First Class Package', Decimal('4.95'), '2-5'),
    'usps_ground_advantage': ('USPS Ground Advantage', Decimal('5.95'), '2-5'),
}

PACKAGE_WEIGHTS = {'small': Decimal('1'), 'medium': Decimal('3'), 'large': Decimal('5')}

def package_for(item_count: int):
    if item_count <= 1:
        return 'small', PACKAGE_WEIGHTS['small']
    if item_count <= 3:
        return 'medium', PACKAGE_WEIGHTS['medium']
    return 'large', PACKAGE_WEIGHTS['large']

def make_label_id(prefix: str) -> str:
    return f'{prefix}-{int(time.time() * 1000)}-{random.randint(0, 999)}'

async def create_shipping_label(store: Storage, settings: Settings, admin: AdminIdentity,
                                order_id: int, req: ShippingLabelRequest) -> ShippingLabel:
    if req.service not in SHIPPING_SERVICES:
        raise InvalidInput(f'Unknown shipping service {req.service}')
    if req.package_size is not None and req.package_size not in PACKAGE_WEIGHTS:
        raise InvalidInput(f'Unknown package size {req.package_size}')
    order, items = await run_in_threadpool(get_order_detail, store, order_id)

    size, weight = package_for(sum(it.quantity for it in items))
    if req.package_size:
        size = req.package_size
        weight = PACKAGE_WEIGHTS[size]
    if req.weight_lb is not None:
        weight = req.weight_lb

    if settings.SHIPPING_LABEL_DELAY_SECONDS > 0:
        await asyncio.sleep(settings.SHIPPING_LABEL_DELAY_SECONDS)
    label_id = make_label_id(settings.SHIPPING_LABEL_PREFIX)
    service_name, postage, days = SHIPPING_SERVICES[req.service]

    order = await run_in_threadpool(change_status, store, admin, order_id, OrderStatus.SHIPPED)
    log.info('%s created label %s for order %s', admin.username, label_id, order_id)
    return ShippingLabel(
        label_id=label_id,
        order_id=order.id,
        service=req.service,
        service_name=service_name,
        postage=postage,
        days_to_deliver=days,
        package_size=size,
        weight_lb=weight,
        signature=req.signature,
        insurance=req.insurance,
        ship_to=ShipTo(name=order.full_name, address=order.address, city=order.city,
                       state=order.state, zip_code=order.zip_code, phone=order.phone),
        order=OrderRead.model_validate(order),
    )
