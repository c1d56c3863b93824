import copy, functools, itertools, threading
from contextlib import contextmanager
from decimal import Decimal
from types import SimpleNamespace
from typing import Optional
from storefront.db.models import utcnow
from storefront.store.base import Storage

# column defaults the SQL backend gets from the model definitions
DEFAULTS = {
    'users': {'full_name': None, 'phone': None, 'address': None, 'is_admin': False},
    'categories': {'description': None, 'image_url': None},
    'products': {'description': '', 'compare_at_price': None, 'image_url': '', 'inventory': 0,
                 'featured': False, 'is_new': False, 'is_sale': False,
                 'rating': Decimal('0'), 'review_count': 0},
    'product_specifications': {},
    'product_images': {'is_main': False},
    'cart_items': {'quantity': 1},
    'orders': {'user_id': None, 'phone': None, 'status': 'pending', 'payment_status': 'unpaid',
               'payment_id': None, 'created_at': utcnow},
    'order_items': {},
    'contact_messages': {'phone': None, 'created_at': utcnow},
    'newsletter_subscribers': {'created_at': utcnow},
    'blog_posts': {'excerpt': None, 'cover_image_url': None, 'published': False, 'published_at': None,
                   'created_at': utcnow, 'updated_at': utcnow},
    'blog_categories': {},
    'blog_post_categories': {},
}

class Record(SimpleNamespace):
    pass

def locked(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper

class MemoryStorage(Storage):
    """Process-local storage keyed by incrementing integer ids.

    Shared by every request of one app instance.  Intended for tests and
    local development; nothing survives a restart.

    One re-entrant lock serializes access.  A transaction holds it from
    snapshot to commit or rollback, so restoring the snapshot can only
    undo its own writes.
    """

    def __init__(self):
        self._tables = {name: {} for name in DEFAULTS}
        self._ids = {name: itertools.count(1) for name in DEFAULTS}
        self._depth = 0
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self):
        with self._lock:
            snapshot = None
            if self._depth == 0:
                snapshot = copy.deepcopy(self._tables)
            self._depth += 1
            try:
                yield
            except BaseException:
                if snapshot is not None:
                    self._tables = snapshot
                raise
            finally:
                self._depth -= 1

    # helpers
    def _out(self, row):
        return Record(**row) if row is not None else None

    def _rows(self, table, pred=lambda r: True, key=lambda r: r['id'], reverse=False):
        with self._lock:
            rows = [r for r in self._tables[table].values() if pred(r)]
            rows.sort(key=key, reverse=reverse)
            return [self._out(r) for r in rows]

    def _first(self, table, pred):
        with self._lock:
            for row in self._tables[table].values():
                if pred(row):
                    return self._out(row)
            return None

    def _insert(self, table, data: dict):
        row = {}
        for k, v in DEFAULTS[table].items():
            row[k] = v() if callable(v) else v
        row.update({k: v for k, v in data.items() if v is not None or k not in row})
        with self._lock:
            row['id'] = next(self._ids[table])
            self._tables[table][row['id']] = row
            return self._out(row)

    def _get(self, table, pk):
        with self._lock:
            return self._out(self._tables[table].get(pk))

    def _patch(self, table, pk, changes: dict):
        with self._lock:
            row = self._tables[table].get(pk)
            if row is None:
                return None
            row.update(changes)
            return self._out(row)

    def _remove(self, table, pred) -> int:
        with self._lock:
            doomed = [pk for pk, r in self._tables[table].items() if pred(r)]
            for pk in doomed:
                del self._tables[table][pk]
            return len(doomed)

    # users
    def get_user(self, user_id):
        return self._get('users', user_id)

    def get_user_by_username(self, username):
        return self._first('users', lambda r: r['username'] == username)

    def get_user_by_email(self, email):
        return self._first('users', lambda r: r['email'] == email)

    def create_user(self, data):
        return self._insert('users', data)

    @locked
    def count_users(self):
        return len(self._tables['users'])

    # catalog
    def get_product(self, product_id):
        return self._get('products', product_id)

    def get_product_by_slug(self, slug):
        return self._first('products', lambda r: r['slug'] == slug)

    def list_products(self, category_id: Optional[int] = None, featured: Optional[bool] = None):
        return self._rows('products', lambda r: (category_id is None or r['category_id'] == category_id)
                          and (featured is None or r['featured'] == featured))

    def create_product(self, data):
        return self._insert('products', data)

    def update_product(self, product_id, changes):
        return self._patch('products', product_id, changes)

    @locked
    def delete_product(self, product_id):
        if product_id not in self._tables['products']:
            return False
        for table in ('cart_items', 'product_specifications', 'product_images'):
            self._remove(table, lambda r: r['product_id'] == product_id)
        del self._tables['products'][product_id]
        return True

    def list_product_specifications(self, product_id):
        return self._rows('product_specifications', lambda r: r['product_id'] == product_id)

    def add_product_specification(self, product_id, key, value):
        return self._insert('product_specifications', {'product_id': product_id, 'key': key, 'value': value})

    def list_product_images(self, product_id):
        return self._rows('product_images', lambda r: r['product_id'] == product_id)

    def add_product_image(self, product_id, url, is_main=False):
        return self._insert('product_images', {'product_id': product_id, 'url': url, 'is_main': is_main})

    def get_category(self, category_id):
        return self._get('categories', category_id)

    def get_category_by_slug(self, slug):
        return self._first('categories', lambda r: r['slug'] == slug)

    def list_categories(self):
        return self._rows('categories')

    def create_category(self, data):
        return self._insert('categories', data)

    # cart
    def list_cart_items(self, session_id):
        return self._rows('cart_items', lambda r: r['session_id'] == session_id)

    def get_cart_item(self, item_id):
        return self._get('cart_items', item_id)

    def find_cart_item(self, session_id, product_id):
        return self._first('cart_items', lambda r: r['session_id'] == session_id and r['product_id'] == product_id)

    @locked
    def add_cart_item(self, session_id, product_id, quantity):
        # same rule as the unique (session_id, product_id) constraint
        if self.find_cart_item(session_id, product_id):
            return None
        return self._insert('cart_items', {'session_id': session_id, 'product_id': product_id, 'quantity': quantity})

    def set_cart_item_quantity(self, item_id, quantity):
        return self._patch('cart_items', item_id, {'quantity': quantity})

    def remove_cart_item(self, item_id):
        return self._remove('cart_items', lambda r: r['id'] == item_id) > 0

    def clear_cart(self, session_id):
        return self._remove('cart_items', lambda r: r['session_id'] == session_id)

    # orders
    def create_order(self, data):
        return self._insert('orders', data)

    def get_order(self, order_id):
        return self._get('orders', order_id)

    def list_orders(self):
        return self._rows('orders', key=lambda r: (r['created_at'], r['id']), reverse=True)

    def update_order(self, order_id, changes):
        return self._patch('orders', order_id, changes)

    def add_order_item(self, data):
        return self._insert('order_items', data)

    def list_order_items(self, order_id):
        return self._rows('order_items', lambda r: r['order_id'] == order_id)

    # inbound messages
    def create_contact_message(self, data):
        return self._insert('contact_messages', data)

    def list_contact_messages(self):
        return self._rows('contact_messages', key=lambda r: (r['created_at'], r['id']), reverse=True)

    def get_subscriber_by_email(self, email):
        return self._first('newsletter_subscribers', lambda r: r['email'] == email)

    def add_subscriber(self, email):
        return self._insert('newsletter_subscribers', {'email': email})

    # blog
    def get_blog_post(self, post_id):
        return self._get('blog_posts', post_id)

    def get_blog_post_by_slug(self, slug):
        return self._first('blog_posts', lambda r: r['slug'] == slug)

    @locked
    def list_blog_posts(self, published_only=False, category_id=None):
        tagged = None
        if category_id is not None:
            tagged = {r['post_id'] for r in self._tables['blog_post_categories'].values()
                      if r['category_id'] == category_id}
        return self._rows('blog_posts',
                          lambda r: (not published_only or r['published']) and (tagged is None or r['id'] in tagged),
                          key=lambda r: (r['created_at'], r['id']), reverse=True)

    def create_blog_post(self, data):
        return self._insert('blog_posts', data)

    def update_blog_post(self, post_id, changes):
        return self._patch('blog_posts', post_id, changes)

    @locked
    def delete_blog_post(self, post_id):
        if post_id not in self._tables['blog_posts']:
            return False
        self._remove('blog_post_categories', lambda r: r['post_id'] == post_id)
        del self._tables['blog_posts'][post_id]
        return True

    def get_blog_category(self, category_id):
        return self._get('blog_categories', category_id)

    def get_blog_category_by_slug(self, slug):
        return self._first('blog_categories', lambda r: r['slug'] == slug)

    def list_blog_categories(self):
        return self._rows('blog_categories', key=lambda r: r['name'])

    def create_blog_category(self, data):
        return self._insert('blog_categories', data)

    def update_blog_category(self, category_id, changes):
        return self._patch('blog_categories', category_id, changes)

    @locked
    def delete_blog_category(self, category_id):
        if category_id not in self._tables['blog_categories']:
            return False
        self._remove('blog_post_categories', lambda r: r['category_id'] == category_id)
        del self._tables['blog_categories'][category_id]
        return True

    @locked
    def add_category_to_post(self, post_id, category_id):
        existing = self._first('blog_post_categories',
                               lambda r: r['post_id'] == post_id and r['category_id'] == category_id)
        return existing or self._insert('blog_post_categories', {'post_id': post_id, 'category_id': category_id})

    def remove_category_from_post(self, post_id, category_id):
        return self._remove('blog_post_categories',
                            lambda r: r['post_id'] == post_id and r['category_id'] == category_id) > 0

    @locked
    def list_post_categories(self, post_id):
        ids = {r['category_id'] for r in self._tables['blog_post_categories'].values() if r['post_id'] == post_id}
        return self._rows('blog_categories', lambda r: r['id'] in ids, key=lambda r: r['name'])
