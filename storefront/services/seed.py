import logging
from decimal import Decimal
from storefront.core.config import Settings
from storefront.services.accounts import ensure_admin
from storefront.store.base import Storage

log = logging.getLogger(__name__)

CATEGORIES = [
    {'name': 'Rifle Scopes', 'slug': 'rifle-scopes',
     'description': 'High-quality precision rifle scopes for tactical and hunting applications.',
     'image_url': 'https://images.unsplash.com/photo-1595590424283-b8f17842773f'},
    {'name': 'Red Dot Sights', 'slug': 'red-dot-sights',
     'description': 'Fast target acquisition red dot sights for close to medium range shooting.',
     'image_url': 'https://images.unsplash.com/photo-1595590424283-b8f17842773f'},
    {'name': 'Tactical Gear', 'slug': 'tactical-gear',
     'description': 'Professional-grade tactical equipment for law enforcement and security.',
     'image_url': 'https://images.unsplash.com/photo-1595590424283-b8f17842773f'},
]

PRODUCTS = [
    {'category': 'rifle-scopes',
     'name': 'Leupold Mark 4 Circle Dot Scope', 'slug': 'leupold-mark-4-circle-dot-scope',
     'description': ('A 1-3x variable power tactical scope with an illuminated Circle Dot reticle '
                     'for close to medium range engagements.'),
     'price': Decimal('1299.99'), 'compare_at_price': Decimal('1499.99'),
     'image_url': 'https://images.unsplash.com/photo-1584226761916-25b55339fdb7',
     'inventory': 15, 'featured': True, 'is_new': True, 'is_sale': True,
     'rating': Decimal('4.8'), 'review_count': 24,
     'specifications': [('Magnification', '1-3x'), ('Reticle', 'Circle Dot'), ('Illumination', 'Yes')]},
    {'category': 'red-dot-sights',
     'name': 'Compact Reflex Red Dot', 'slug': 'compact-reflex-red-dot',
     'description': 'A 3 MOA reflex sight with 50,000 hour battery life.',
     'price': Decimal('249.99'), 'compare_at_price': None,
     'image_url': 'https://images.unsplash.com/photo-1595590424283-b8f17842773f',
     'inventory': 40, 'featured': True, 'is_new': False, 'is_sale': False,
     'rating': Decimal('4.5'), 'review_count': 12,
     'specifications': [('Dot Size', '3 MOA'), ('Battery', 'CR2032')]},
    {'category': 'tactical-gear',
     'name': 'Modular Plate Carrier', 'slug': 'modular-plate-carrier',
     'description': 'Low-profile MOLLE plate carrier with quick-release cummerbund.',
     'price': Decimal('189.00'), 'compare_at_price': Decimal('219.00'),
     'image_url': 'https://images.unsplash.com/photo-1585421514284-efb74320d621',
     'inventory': 25, 'featured': False, 'is_new': True, 'is_sale': True,
     'rating': Decimal('4.2'), 'review_count': 7,
     'specifications': [('Material', '500D Cordura'), ('Sizes', 'M / L / XL')]},
]

def seed(store: Storage, settings: Settings) -> bool:
    """Load the admin account and demo catalog into an empty store."""
    if store.count_users() > 0:
        log.info('Store already has data, skipping seed')
        return False
    log.info('Seeding store with initial data')
    with store.transaction():
        ensure_admin(store, settings)
        by_slug = {}
        for data in CATEGORIES:
            by_slug[data['slug']] = store.create_category(dict(data))
        for data in PRODUCTS:
            data = dict(data)
            specs = data.pop('specifications')
            data['category_id'] = by_slug[data.pop('category')].id
            product = store.create_product(data)
            store.add_product_image(product.id, product.image_url, is_main=True)
            for key, value in specs:
                store.add_product_specification(product.id, key, value)
    return True
