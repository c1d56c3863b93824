from fastapi import APIRouter, Depends, Response
from storefront.api.deps import get_settings, get_storage
from storefront.core.auth import AdminIdentity, require_admin
from storefront.core.config import Settings
from storefront.schemas import (
    BulkStatusResult, BulkStatusUpdate, CategoryCreate, CategoryEnvelope, ContactList,
    InventoryUpdate, OrderDetail, OrderEnvelope, OrderList, ProductCreate, ProductEnvelope,
    ProductList, ProductUpdate, ShippingLabel, ShippingLabelRequest, StatusUpdate,
)
from storefront.services import catalog, inventory, orders as order_service, shipping
from storefront.store.base import Storage

router = APIRouter()

# orders
@router.get('/orders', response_model=OrderList)
def list_orders(admin: AdminIdentity = Depends(require_admin), store: Storage = Depends(get_storage)):
    return {'orders': store.list_orders()}

@router.get('/orders/{order_id}', response_model=OrderDetail)
def get_order(order_id: int, admin: AdminIdentity = Depends(require_admin), store: Storage = Depends(get_storage)):
    order, items = order_service.get_order_detail(store, order_id)
    return {'order': order, 'items': items}

@router.put('/orders/status', response_model=BulkStatusResult)
def bulk_update_status(payload: BulkStatusUpdate, admin: AdminIdentity = Depends(require_admin),
                       store: Storage = Depends(get_storage)):
    return {'updated': order_service.bulk_change_status(store, admin, payload.order_ids, payload.status)}

@router.put('/orders/{order_id}/status', response_model=OrderEnvelope)
def update_status(order_id: int, payload: StatusUpdate, admin: AdminIdentity = Depends(require_admin),
                  store: Storage = Depends(get_storage)):
    return {'order': order_service.change_status(store, admin, order_id, payload.status)}

@router.post('/orders/{order_id}/shipping-label', response_model=ShippingLabel, status_code=201)
async def create_shipping_label(order_id: int, payload: ShippingLabelRequest,
                                admin: AdminIdentity = Depends(require_admin),
                                store: Storage = Depends(get_storage), settings: Settings = Depends(get_settings)):
    return await shipping.create_shipping_label(store, settings, admin, order_id, payload)

# products / inventory
@router.get('/products', response_model=ProductList)
def list_products(admin: AdminIdentity = Depends(require_admin), store: Storage = Depends(get_storage)):
    return {'products': store.list_products()}

@router.post('/products', response_model=ProductEnvelope, status_code=201)
def create_product(payload: ProductCreate, admin: AdminIdentity = Depends(require_admin),
                   store: Storage = Depends(get_storage)):
    return {'product': catalog.create_product(store, admin, payload)}

@router.api_route('/products/{product_id}', methods=['PUT', 'PATCH'], response_model=ProductEnvelope)
def update_product(product_id: int, payload: ProductUpdate, admin: AdminIdentity = Depends(require_admin),
                   store: Storage = Depends(get_storage)):
    return {'product': catalog.update_product(store, admin, product_id, payload)}

@router.delete('/products/{product_id}', status_code=204, response_class=Response)
def delete_product(product_id: int, admin: AdminIdentity = Depends(require_admin),
                   store: Storage = Depends(get_storage)):
    catalog.delete_product(store, admin, product_id)
    return Response(status_code=204)

@router.put('/products/{product_id}/inventory', response_model=ProductEnvelope)
def set_inventory(product_id: int, payload: InventoryUpdate, admin: AdminIdentity = Depends(require_admin),
                  store: Storage = Depends(get_storage)):
    return {'product': inventory.set_inventory(store, admin, product_id, payload.inventory)}

# categories
@router.post('/categories', response_model=CategoryEnvelope, status_code=201)
def create_category(payload: CategoryCreate, admin: AdminIdentity = Depends(require_admin),
                    store: Storage = Depends(get_storage)):
    return {'category': catalog.create_category(store, admin, payload)}

# inbound messages
@router.get('/contact-messages', response_model=ContactList)
def list_contact_messages(admin: AdminIdentity = Depends(require_admin), store: Storage = Depends(get_storage)):
    return {'messages': store.list_contact_messages()}
