from typing import List, Tuple
from storefront.core.errors import InvalidInput, NotFound
from storefront.schemas import CartLine, ProductRead
from storefront.store.base import Storage

def cart_lines(store: Storage, session_id: str) -> List[CartLine]:
    lines = []
    for item in store.list_cart_items(session_id):
        product = store.get_product(item.product_id)
        line = CartLine.model_validate(item)
        line.product = ProductRead.model_validate(product) if product else None
        lines.append(line)
    return lines

def add_to_cart(store: Storage, session_id: str, product_id: int, quantity: int) -> Tuple[object, bool]:
    """Add ``quantity`` of a product, merging into an existing row.

    Returns the row and whether it was newly created.  There is no upper
    bound and no check against the product's inventory.  When a concurrent
    add inserts the row first, this add increments it instead; the
    read-then-write increment can still lose an update.
    """
    if not store.get_product(product_id):
        raise NotFound('Product not found')
    existing = store.find_cart_item(session_id, product_id)
    if not existing:
        item = store.add_cart_item(session_id, product_id, quantity)
        if item:
            return item, True
        existing = store.find_cart_item(session_id, product_id)
        if not existing:
            raise NotFound('Product not found')
    return store.set_cart_item_quantity(existing.id, existing.quantity + quantity), False

def set_quantity(store: Storage, item_id: int, quantity: int):
    if quantity < 1:
        raise InvalidInput('Invalid quantity')
    item = store.set_cart_item_quantity(item_id, quantity)
    if not item:
        raise NotFound('Cart item not found')
    return item

def remove_item(store: Storage, item_id: int):
    if not store.remove_cart_item(item_id):
        raise NotFound('Cart item not found')

def clear(store: Storage, session_id: str) -> int:
    return store.clear_cart(session_id)
