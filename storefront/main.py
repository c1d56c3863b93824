import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator
from storefront.version import VERSION
from storefront.api import admin, auth, blog, cart, categories, inbound, orders, products
from storefront.core.config import Settings, settings as default_settings
from storefront.core.errors import register_error_handlers
from storefront.core.log import configure_logging, install_request_logging
from storefront.services.payments import build_gateway
from storefront.services.seed import seed
from storefront.store.base import Storage

log = logging.getLogger(__name__)

def build_storage_factory(settings: Settings) -> Callable[[], Storage]:
    if settings.STORAGE_BACKEND == 'memory':
        from storefront.store.memory import MemoryStorage
        shared = MemoryStorage()
        return lambda: shared

    from storefront.db.session import Base, build_engine, build_sessionmaker
    from storefront.db import models  # noqa: F401  registers the tables on Base
    from storefront.store.sql import SqlStorage
    engine = build_engine(settings.DATABASE_URL)
    if settings.CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
    SessionLocal = build_sessionmaker(engine)
    return lambda: SqlStorage(SessionLocal())

def create_app(settings: Optional[Settings] = None, storage_factory: Optional[Callable[[], Storage]] = None,
               gateway=None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.SEED_DATA:
            store = app.state.storage_factory()
            try:
                seed(store, settings)
            finally:
                store.close()
        for route in app.routes:
            if hasattr(route, 'methods') and hasattr(route, 'path'):
                log.debug('%s %s', sorted(route.methods), route.path)
        yield

    app = FastAPI(title='Storefront', version=VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.storage_factory = storage_factory or build_storage_factory(settings)
    app.state.payment_gateway = gateway or build_gateway(settings)

    if settings.METRICS_ENABLED:
        Instrumentator().instrument(app).expose(
            app,
            include_in_schema=False,
            endpoint='/metrics',
            should_gzip=True,
        )

    origins = [o.strip() for o in settings.CORS_ORIGINS.split(',') if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials='*' not in origins,
        allow_methods=['*'],
        allow_headers=['*'],
    )
    register_error_handlers(app)
    install_request_logging(app)

    @app.get('/health')
    def health(): return {'status': 'ok'}

    @app.get('/v1/_info')
    def info(): return {'service': 'storefront', 'version': VERSION}

    app.include_router(products.router,   prefix='/api/products',   tags=['products'])
    app.include_router(categories.router, prefix='/api/categories', tags=['categories'])
    app.include_router(cart.router,       prefix='/api/cart',       tags=['cart'])
    app.include_router(orders.router,     prefix='/api/orders',     tags=['orders'])
    app.include_router(inbound.router,    prefix='/api',            tags=['inbound'])
    app.include_router(auth.router,       prefix='/api',            tags=['auth'])
    app.include_router(admin.router,      prefix='/api/admin',      tags=['admin'])
    app.include_router(blog.router,       prefix='/api/blog',       tags=['blog'])
    app.include_router(blog.admin_router, prefix='/api/admin/blog', tags=['admin', 'blog'])
    return app

app = create_app()
