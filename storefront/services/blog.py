import logging
from typing import List, Optional
from storefront.core.auth import AdminIdentity
from storefront.core.errors import Conflict, NotFound
from storefront.db.models import utcnow
from storefront.schemas import BlogCategoryCreate, BlogCategoryUpdate, BlogPostCreate, BlogPostUpdate
from storefront.store.base import Storage

log = logging.getLogger(__name__)

def list_posts(store: Storage, published_only: bool = True, category_slug: Optional[str] = None):
    category_id = None
    if category_slug:
        category = store.get_blog_category_by_slug(category_slug)
        if not category:
            return []
        category_id = category.id
    return store.list_blog_posts(published_only=published_only, category_id=category_id)

def post_detail(store: Storage, slug: str, include_drafts: bool = False):
    post = store.get_blog_post_by_slug(slug)
    if not post or (not post.published and not include_drafts):
        raise NotFound('Post not found')
    return post, store.list_post_categories(post.id)

def get_post(store: Storage, post_id: int):
    post = store.get_blog_post(post_id)
    if not post:
        raise NotFound('Post not found')
    return post

def _set_categories(store: Storage, post_id: int, category_ids: List[int]):
    for cid in category_ids:
        if not store.get_blog_category(cid):
            raise NotFound(f'Blog category {cid} not found')
    current = {c.id for c in store.list_post_categories(post_id)}
    wanted = set(category_ids)
    for cid in current - wanted:
        store.remove_category_from_post(post_id, cid)
    for cid in wanted - current:
        store.add_category_to_post(post_id, cid)

def create_post(store: Storage, admin: AdminIdentity, payload: BlogPostCreate):
    if store.get_blog_post_by_slug(payload.slug):
        raise Conflict('Post slug already exists')
    data = payload.model_dump(exclude={'category_ids'})
    now = utcnow()
    data.update(author_id=admin.user_id, created_at=now, updated_at=now,
                published_at=now if payload.published else None)
    with store.transaction():
        post = store.create_blog_post(data)
        _set_categories(store, post.id, payload.category_ids)
    log.info('%s created post %s (%s)', admin.username, post.id, post.slug)
    return post

def update_post(store: Storage, admin: AdminIdentity, post_id: int, payload: BlogPostUpdate):
    post = get_post(store, post_id)
    changes = payload.model_dump(exclude_unset=True, exclude={'category_ids'})
    changes = {k: v for k, v in changes.items() if v is not None or k in ('excerpt', 'cover_image_url')}
    if 'slug' in changes:
        clash = store.get_blog_post_by_slug(changes['slug'])
        if clash and clash.id != post_id:
            raise Conflict('Post slug already exists')
    if changes.get('published') and not post.published_at:
        changes['published_at'] = utcnow()
    changes['updated_at'] = utcnow()
    with store.transaction():
        updated = store.update_blog_post(post_id, changes)
        if payload.category_ids is not None:
            _set_categories(store, post_id, payload.category_ids)
    log.info('%s updated post %s', admin.username, post_id)
    return updated

def delete_post(store: Storage, admin: AdminIdentity, post_id: int):
    if not store.delete_blog_post(post_id):
        raise NotFound('Post not found')
    log.info('%s deleted post %s', admin.username, post_id)

def create_category(store: Storage, admin: AdminIdentity, payload: BlogCategoryCreate):
    if store.get_blog_category_by_slug(payload.slug):
        raise Conflict('Blog category already exists')
    return store.create_blog_category(payload.model_dump())

def update_category(store: Storage, admin: AdminIdentity, category_id: int, payload: BlogCategoryUpdate):
    if not store.get_blog_category(category_id):
        raise NotFound('Blog category not found')
    changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
    if 'slug' in changes:
        clash = store.get_blog_category_by_slug(changes['slug'])
        if clash and clash.id != category_id:
            raise Conflict('Blog category already exists')
    return store.update_blog_category(category_id, changes)

def delete_category(store: Storage, admin: AdminIdentity, category_id: int):
    if not store.delete_blog_category(category_id):
        raise NotFound('Blog category not found')

def attach_category(store: Storage, admin: AdminIdentity, post_id: int, category_id: int):
    get_post(store, post_id)
    if not store.get_blog_category(category_id):
        raise NotFound('Blog category not found')
    store.add_category_to_post(post_id, category_id)
    return store.list_post_categories(post_id)

def detach_category(store: Storage, admin: AdminIdentity, post_id: int, category_id: int):
    get_post(store, post_id)
    if not store.remove_category_from_post(post_id, category_id):
        raise NotFound('Category not attached to post')
    return store.list_post_categories(post_id)
