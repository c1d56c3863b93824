from fastapi import Header, Request
from typing import Iterator, Optional
from storefront.core.config import Settings
from storefront.core.errors import InvalidInput
from storefront.store.base import Storage

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_storage(request: Request) -> Iterator[Storage]:
    store = request.app.state.storage_factory()
    try:
        yield store
    finally:
        store.close()

def get_gateway(request: Request):
    return request.app.state.payment_gateway

def require_session_id(x_session_id: Optional[str] = Header(default=None, alias='X-Session-ID')) -> str:
    if not x_session_id:
        raise InvalidInput('Session ID required')
    return x_session_id
