import threading
from decimal import Decimal
import pytest
from storefront.db.session import Base, build_engine, build_sessionmaker
from storefront.db import models  # noqa: F401
from storefront.services import cart as cart_service
from storefront.store.memory import MemoryStorage
from storefront.store.sql import SqlStorage

@pytest.fixture
def store(backend):
    if backend == 'memory':
        yield MemoryStorage()
        return
    engine = build_engine('sqlite://')
    Base.metadata.create_all(bind=engine)
    s = SqlStorage(build_sessionmaker(engine)())
    yield s
    s.close()
    engine.dispose()

def make_product(store, slug='widget'):
    category = store.get_category_by_slug('misc') or store.create_category({'name': 'Misc', 'slug': 'misc'})
    return store.create_product({'name': 'Widget', 'slug': slug, 'price': Decimal('5.00'),
                                 'category_id': category.id})

def test_defaults_match_between_backends(store):
    product = make_product(store)
    assert product.inventory == 0
    assert product.featured is False
    assert product.compare_at_price is None
    order = store.create_order({'full_name': 'A', 'email': 'a@example.com', 'address': 'x', 'city': 'c',
                                'state': 's', 'zip_code': 'z', 'total_amount': Decimal('1')})
    assert order.status == 'pending'
    assert order.payment_status == 'unpaid'
    assert order.created_at is not None

def test_transaction_rolls_back_every_step(store):
    make_product(store)
    store.add_cart_item('s1', 1, 2)
    with pytest.raises(RuntimeError):
        with store.transaction():
            store.clear_cart('s1')
            store.create_category({'name': 'Temp', 'slug': 'temp'})
            raise RuntimeError('abort')
    assert [i.quantity for i in store.list_cart_items('s1')] == [2]
    assert store.get_category_by_slug('temp') is None

def test_transaction_commits(store):
    with store.transaction():
        store.create_category({'name': 'Kept', 'slug': 'kept'})
        with store.transaction():
            store.create_category({'name': 'Nested', 'slug': 'nested'})
    assert {c.slug for c in store.list_categories()} == {'kept', 'nested'}

def test_cart_upsert_lookup(store):
    make_product(store)
    item = store.add_cart_item('s1', 1, 1)
    assert store.find_cart_item('s1', 1).id == item.id
    assert store.find_cart_item('s2', 1) is None
    assert store.set_cart_item_quantity(item.id, 4).quantity == 4
    assert store.set_cart_item_quantity(999, 4) is None
    assert store.clear_cart('s1') == 1

def test_delete_product_removes_dependents(store):
    product = make_product(store)
    store.add_product_specification(product.id, 'Weight', '1 lb')
    store.add_product_image(product.id, 'http://img', is_main=True)
    store.add_cart_item('s1', product.id, 1)
    assert store.delete_product(product.id) is True
    assert store.list_product_specifications(product.id) == []
    assert store.list_product_images(product.id) == []
    assert store.list_cart_items('s1') == []
    assert store.delete_product(product.id) is False

def test_returned_rows_are_detached_copies_in_memory():
    store = MemoryStorage()
    category = store.create_category({'name': 'Misc', 'slug': 'misc'})
    category.name = 'changed'
    assert store.get_category(category.id).name == 'Misc'

def test_memory_rollback_keeps_writes_made_by_other_threads():
    store = MemoryStorage()
    opened, release = threading.Event(), threading.Event()

    def failing_checkout():
        with pytest.raises(RuntimeError):
            with store.transaction():
                store.add_cart_item('s1', 1, 1)
                opened.set()
                release.wait(5)
                raise RuntimeError('abort')

    checkout = threading.Thread(target=failing_checkout)
    checkout.start()
    assert opened.wait(5)
    other = threading.Thread(target=store.add_cart_item, args=('other-session', 1, 3))
    other.start()
    # the open transaction holds the store
    other.join(0.2)
    assert other.is_alive()
    release.set()
    checkout.join(5)
    other.join(5)

    assert store.list_cart_items('s1') == []
    assert [i.quantity for i in store.list_cart_items('other-session')] == [3]

def test_duplicate_cart_row_is_refused(store):
    product = make_product(store)
    first = store.add_cart_item('s1', product.id, 1)
    assert store.add_cart_item('s1', product.id, 2) is None
    assert [(i.id, i.quantity) for i in store.list_cart_items('s1')] == [(first.id, 1)]
    # the store stays usable after the refused insert
    assert store.add_cart_item('s2', product.id, 2).quantity == 2

def test_add_to_cart_increments_when_insert_race_is_lost(store, monkeypatch):
    product = make_product(store)
    store.add_cart_item('s1', product.id, 1)
    real_find = store.find_cart_item
    calls = []

    def find_after_race(session_id, product_id):
        calls.append(product_id)
        # the first lookup runs before the other request's insert lands
        return None if len(calls) == 1 else real_find(session_id, product_id)

    monkeypatch.setattr(store, 'find_cart_item', find_after_race)
    item, created = cart_service.add_to_cart(store, 's1', product.id, 2)
    assert created is False
    assert item.quantity == 3
    assert len(store.list_cart_items('s1')) == 1
