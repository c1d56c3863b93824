import logging
from storefront.core.auth import AdminIdentity
from storefront.core.errors import InvalidInput, NotFound
from storefront.store.base import Storage

log = logging.getLogger(__name__)

def set_inventory(store: Storage, admin: AdminIdentity, product_id: int, inventory: int):
    """Overwrite a product's stock count with an absolute value.

    Last write wins; concurrent edits are not detected.
    """
    if inventory < 0:
        raise InvalidInput('Inventory cannot be negative')
    product = store.get_product(product_id)
    if not product:
        raise NotFound('Product not found')
    previous = product.inventory
    updated = store.update_product(product_id, {'inventory': inventory})
    log.info('%s set inventory of product %s (%s) from %s to %s',
             admin.username, product_id, updated.slug, previous, inventory)
    return updated
