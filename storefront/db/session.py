from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

class Base(DeclarativeBase): pass

def build_engine(url: str):
    if url.startswith('sqlite'):
        # a single shared connection keeps ':memory:' databases alive across threads
        return create_engine(url, connect_args={'check_same_thread': False}, poolclass=StaticPool)
    return create_engine(url, pool_pre_ping=True)

def build_sessionmaker(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)
