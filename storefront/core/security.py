from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
import jwt
from typing import Tuple
from storefront.core.config import Settings

pwd_ctx = CryptContext(schemes=['bcrypt'], deprecated='auto')

def hash_password(p: str) -> str: return pwd_ctx.hash(p)

def verify_password(p: str, h: str) -> bool: return pwd_ctx.verify(p, h)

def now_utc() -> datetime: return datetime.now(timezone.utc)

def create_session_token(settings: Settings, user_id: int, username: str, role: str) -> Tuple[str, datetime]:
    exp = now_utc() + timedelta(seconds=settings.SESSION_MAX_AGE_SECONDS)
    payload = {'sub': username, 'uid': user_id, 'role': role, 'exp': exp, 'type': 'session'}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM), exp

def decode_token(settings: Settings, token: str) -> dict:
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
