from fastapi import APIRouter, Depends, Response
from storefront.api.deps import get_storage, require_session_id
from storefront.schemas import CartItemAdd, CartItemEnvelope, CartItemUpdate, CartRead
from storefront.services import cart as cart_service
from storefront.store.base import Storage

router = APIRouter()

@router.get('', response_model=CartRead)
def get_cart(session_id: str = Depends(require_session_id), store: Storage = Depends(get_storage)):
    return {'items': cart_service.cart_lines(store, session_id)}

@router.post('', response_model=CartItemEnvelope, status_code=201)
def add_item(payload: CartItemAdd, response: Response,
             session_id: str = Depends(require_session_id), store: Storage = Depends(get_storage)):
    item, created = cart_service.add_to_cart(store, session_id, payload.product_id, payload.quantity)
    if not created:
        response.status_code = 200
    return {'item': item}

@router.put('/{item_id}', response_model=CartItemEnvelope)
def update_item(item_id: int, payload: CartItemUpdate, store: Storage = Depends(get_storage)):
    return {'item': cart_service.set_quantity(store, item_id, payload.quantity)}

@router.delete('/{item_id}', status_code=204, response_class=Response)
def remove_item(item_id: int, store: Storage = Depends(get_storage)):
    cart_service.remove_item(store, item_id)
    return Response(status_code=204)

@router.delete('', status_code=204, response_class=Response)
def clear_cart(session_id: str = Depends(require_session_id), store: Storage = Depends(get_storage)):
    cart_service.clear(store, session_id)
    return Response(status_code=204)
