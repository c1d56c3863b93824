from fastapi import APIRouter, Depends
from storefront.api.deps import get_gateway, get_settings, get_storage, require_session_id
from storefront.core.config import Settings
from storefront.schemas import OrderCreate, OrderDetail, OrderEnvelope, PaymentSubmit
from storefront.services import orders as order_service
from storefront.store.base import Storage

router = APIRouter()

@router.post('', response_model=OrderEnvelope, status_code=201)
def create_order(payload: OrderCreate, session_id: str = Depends(require_session_id),
                 store: Storage = Depends(get_storage), settings: Settings = Depends(get_settings)):
    return {'order': order_service.create_order_from_cart(store, settings, session_id, payload)}

@router.get('/{order_id}', response_model=OrderDetail)
def get_order(order_id: int, store: Storage = Depends(get_storage)):
    order, items = order_service.get_order_detail(store, order_id)
    return {'order': order, 'items': items}

@router.put('/{order_id}/payment', response_model=OrderEnvelope)
def pay_order(order_id: int, payload: PaymentSubmit, store: Storage = Depends(get_storage),
              gateway=Depends(get_gateway)):
    return {'order': order_service.confirm_payment(store, gateway, order_id, payload)}
