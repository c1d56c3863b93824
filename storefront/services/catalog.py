import logging
from typing import Optional
from storefront.core.auth import AdminIdentity
from storefront.core.errors import Conflict, NotFound
from storefront.schemas import CategoryCreate, ProductCreate, ProductUpdate
from storefront.store.base import Storage

log = logging.getLogger(__name__)

def list_products(store: Storage, category_slug: Optional[str] = None, featured: bool = False):
    if category_slug:
        category = store.get_category_by_slug(category_slug)
        return store.list_products(category_id=category.id) if category else []
    if featured:
        return store.list_products(featured=True)
    return store.list_products()

def product_detail(store: Storage, slug: str):
    product = store.get_product_by_slug(slug)
    if not product:
        raise NotFound('Product not found')
    return {
        'product': product,
        'specifications': store.list_product_specifications(product.id),
        'images': store.list_product_images(product.id),
        'category': store.get_category(product.category_id),
    }

def category_detail(store: Storage, slug: str):
    category = store.get_category_by_slug(slug)
    if not category:
        raise NotFound('Category not found')
    return {'category': category, 'products': store.list_products(category_id=category.id)}

def _check_category(store: Storage, category_id: int):
    if not store.get_category(category_id):
        raise NotFound('Category not found')

def create_product(store: Storage, admin: AdminIdentity, payload: ProductCreate):
    if store.get_product_by_slug(payload.slug):
        raise Conflict('Product slug already exists')
    _check_category(store, payload.category_id)
    product = store.create_product(payload.model_dump())
    log.info('%s created product %s (%s)', admin.username, product.id, product.slug)
    return product

def update_product(store: Storage, admin: AdminIdentity, product_id: int, payload: ProductUpdate):
    product = store.get_product(product_id)
    if not product:
        raise NotFound('Product not found')
    changes = payload.model_dump(exclude_unset=True)
    # explicit nulls are ignored except for the one nullable column
    changes = {k: v for k, v in changes.items() if v is not None or k == 'compare_at_price'}
    if 'slug' in changes:
        clash = store.get_product_by_slug(changes['slug'])
        if clash and clash.id != product_id:
            raise Conflict('Product slug already exists')
    if 'category_id' in changes:
        _check_category(store, changes['category_id'])
    updated = store.update_product(product_id, changes)
    log.info('%s updated product %s: %s', admin.username, product_id, ', '.join(sorted(changes)) or 'no fields')
    return updated

def delete_product(store: Storage, admin: AdminIdentity, product_id: int):
    if not store.delete_product(product_id):
        raise NotFound('Product not found')
    log.info('%s deleted product %s', admin.username, product_id)

def create_category(store: Storage, admin: AdminIdentity, payload: CategoryCreate):
    if store.get_category_by_slug(payload.slug):
        raise Conflict('Category already exists')
    category = store.create_category(payload.model_dump())
    log.info('%s created category %s (%s)', admin.username, category.id, category.slug)
    return category
