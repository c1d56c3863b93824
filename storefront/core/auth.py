from fastapi import Depends, Request
import jwt
from pydantic import BaseModel
from typing import Optional
from storefront.api.deps import get_settings, get_storage
from storefront.core.config import Settings
from storefront.core.errors import Unauthorized
from storefront.core.security import decode_token
from storefront.store.base import Storage

class AdminIdentity(BaseModel):
    user_id: int
    username: str

def read_session(request: Request, settings: Settings) -> Optional[dict]:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None
    try:
        payload = decode_token(settings, token)
    except jwt.PyJWTError:
        return None
    if payload.get('type') != 'session':
        return None
    return payload

def require_admin(request: Request, settings: Settings = Depends(get_settings),
                  store: Storage = Depends(get_storage)) -> AdminIdentity:
    payload = read_session(request, settings)
    if not payload:
        raise Unauthorized('Not authenticated')
    if payload.get('role') != 'admin':
        raise Unauthorized('Admin only')
    user = store.get_user(payload.get('uid'))
    if not user or not user.is_admin:
        raise Unauthorized('Admin only')
    return AdminIdentity(user_id=user.id, username=user.username)
