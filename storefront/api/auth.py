from fastapi import APIRouter, Depends, Request, Response
from storefront.api.deps import get_settings, get_storage
from storefront.core.auth import read_session
from storefront.core.config import Settings
from storefront.core.security import create_session_token
from storefront.schemas import AuthStatus, LoginPayload, UserEnvelope, UserRead, UserRegister
from storefront.services import accounts
from storefront.store.base import Storage

router = APIRouter()

@router.post('/login', response_model=UserEnvelope)
def login(payload: LoginPayload, response: Response, store: Storage = Depends(get_storage),
          settings: Settings = Depends(get_settings)):
    user = accounts.authenticate_admin(store, payload.username, payload.password)
    token, _ = create_session_token(settings, user.id, user.username, 'admin')
    response.set_cookie(
        settings.SESSION_COOKIE_NAME, token,
        max_age=settings.SESSION_MAX_AGE_SECONDS,
        httponly=True, samesite='lax', secure=settings.SESSION_COOKIE_SECURE,
    )
    return {'user': user}

@router.post('/logout')
def logout(response: Response, settings: Settings = Depends(get_settings)):
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {'status': 'ok'}

@router.get('/auth/status', response_model=AuthStatus)
def auth_status(request: Request, store: Storage = Depends(get_storage), settings: Settings = Depends(get_settings)):
    payload = read_session(request, settings)
    user = store.get_user(payload.get('uid')) if payload else None
    if not user or not user.is_admin:
        return AuthStatus(authenticated=False)
    return AuthStatus(authenticated=True, user=UserRead.model_validate(user))

@router.post('/users', response_model=UserEnvelope, status_code=201)
def register(payload: UserRegister, store: Storage = Depends(get_storage)):
    return {'user': accounts.register_user(store, payload)}
