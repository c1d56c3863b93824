import logging
from storefront.core.config import Settings
from storefront.core.errors import Conflict, Unauthorized
from storefront.core.security import hash_password, verify_password
from storefront.schemas import UserRegister
from storefront.store.base import Storage

log = logging.getLogger(__name__)

def register_user(store: Storage, payload: UserRegister):
    if store.get_user_by_username(payload.username):
        raise Conflict('Username already taken')
    if store.get_user_by_email(str(payload.email)):
        raise Conflict('Email already registered')
    data = payload.model_dump()
    data['email'] = str(payload.email)
    data['password'] = hash_password(payload.password)
    data['is_admin'] = False
    return store.create_user(data)

def authenticate_admin(store: Storage, username: str, password: str):
    user = store.get_user_by_username(username)
    if not user or not verify_password(password, user.password):
        raise Unauthorized('Invalid credentials')
    if not user.is_admin:
        raise Unauthorized('Not authorized')
    return user

def ensure_admin(store: Storage, settings: Settings):
    existing = store.get_user_by_username(settings.ADMIN_USERNAME)
    if existing:
        return existing
    log.info('Creating admin account %s', settings.ADMIN_USERNAME)
    return store.create_user({
        'username': settings.ADMIN_USERNAME,
        'password': hash_password(settings.ADMIN_PASSWORD),
        'email': settings.ADMIN_EMAIL,
        'full_name': 'Admin User',
        'is_admin': True,
    })
