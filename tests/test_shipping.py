import asyncio, threading
from decimal import Decimal
from conftest import make_settings
from storefront.core.auth import AdminIdentity
from storefront.schemas import ShippingLabelRequest
from storefront.services.shipping import create_shipping_label, package_for
from storefront.store.memory import MemoryStorage

class ThreadRecordingStorage(MemoryStorage):
    def __init__(self):
        super().__init__()
        self.threads = set()

    def get_order(self, order_id):
        self.threads.add(threading.get_ident())
        return super().get_order(order_id)

    def list_order_items(self, order_id):
        self.threads.add(threading.get_ident())
        return super().list_order_items(order_id)

    def update_order(self, order_id, changes):
        self.threads.add(threading.get_ident())
        return super().update_order(order_id, changes)

def test_storage_calls_stay_off_the_event_loop():
    store = ThreadRecordingStorage()
    order = store.create_order({'full_name': 'Jane', 'email': 'j@example.com', 'address': '1 Main St',
                                'city': 'Springfield', 'state': 'IL', 'zip_code': '62701',
                                'total_amount': Decimal('10')})
    store.add_order_item({'order_id': order.id, 'product_id': 1, 'product_name': 'Scope',
                          'price': Decimal('10'), 'quantity': 2})
    store.threads.clear()

    async def run():
        label = await create_shipping_label(store, make_settings('memory'), AdminIdentity(user_id=1, username='admin'),
                                            order.id, ShippingLabelRequest())
        return threading.get_ident(), label

    loop_thread, label = asyncio.run(run())
    assert label.order.status == 'shipped'
    assert label.package_size == 'medium'
    assert store.threads
    assert loop_thread not in store.threads

def test_package_sizes():
    assert package_for(0) == ('small', Decimal('1'))
    assert package_for(1) == ('small', Decimal('1'))
    assert package_for(3) == ('medium', Decimal('3'))
    assert package_for(4) == ('large', Decimal('5'))
