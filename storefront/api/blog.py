from fastapi import APIRouter, Depends, Response
from typing import Optional
from storefront.api.deps import get_storage
from storefront.core.auth import AdminIdentity, require_admin
from storefront.schemas import (
    BlogCategoryCreate, BlogCategoryEnvelope, BlogCategoryList, BlogCategoryUpdate,
    BlogPostCreate, BlogPostDetail, BlogPostList, BlogPostUpdate,
)
from storefront.services import blog
from storefront.store.base import Storage

router = APIRouter()
admin_router = APIRouter()

@router.get('/posts', response_model=BlogPostList)
def list_posts(category: Optional[str] = None, store: Storage = Depends(get_storage)):
    return {'posts': blog.list_posts(store, published_only=True, category_slug=category)}

@router.get('/posts/{slug}', response_model=BlogPostDetail)
def get_post(slug: str, store: Storage = Depends(get_storage)):
    post, categories = blog.post_detail(store, slug)
    return {'post': post, 'categories': categories}

@router.get('/categories', response_model=BlogCategoryList)
def list_categories(store: Storage = Depends(get_storage)):
    return {'categories': store.list_blog_categories()}

# admin
@admin_router.get('/posts', response_model=BlogPostList)
def admin_list_posts(admin: AdminIdentity = Depends(require_admin), store: Storage = Depends(get_storage)):
    return {'posts': blog.list_posts(store, published_only=False)}

@admin_router.get('/posts/{post_id}', response_model=BlogPostDetail)
def admin_get_post(post_id: int, admin: AdminIdentity = Depends(require_admin), store: Storage = Depends(get_storage)):
    post = blog.get_post(store, post_id)
    return {'post': post, 'categories': store.list_post_categories(post_id)}

@admin_router.post('/posts', response_model=BlogPostDetail, status_code=201)
def admin_create_post(payload: BlogPostCreate, admin: AdminIdentity = Depends(require_admin),
                      store: Storage = Depends(get_storage)):
    post = blog.create_post(store, admin, payload)
    return {'post': post, 'categories': store.list_post_categories(post.id)}

@admin_router.put('/posts/{post_id}', response_model=BlogPostDetail)
def admin_update_post(post_id: int, payload: BlogPostUpdate, admin: AdminIdentity = Depends(require_admin),
                      store: Storage = Depends(get_storage)):
    post = blog.update_post(store, admin, post_id, payload)
    return {'post': post, 'categories': store.list_post_categories(post_id)}

@admin_router.delete('/posts/{post_id}', status_code=204, response_class=Response)
def admin_delete_post(post_id: int, admin: AdminIdentity = Depends(require_admin),
                      store: Storage = Depends(get_storage)):
    blog.delete_post(store, admin, post_id)
    return Response(status_code=204)

@admin_router.post('/posts/{post_id}/categories/{category_id}', response_model=BlogCategoryList)
def admin_attach_category(post_id: int, category_id: int, admin: AdminIdentity = Depends(require_admin),
                          store: Storage = Depends(get_storage)):
    return {'categories': blog.attach_category(store, admin, post_id, category_id)}

@admin_router.delete('/posts/{post_id}/categories/{category_id}', response_model=BlogCategoryList)
def admin_detach_category(post_id: int, category_id: int, admin: AdminIdentity = Depends(require_admin),
                          store: Storage = Depends(get_storage)):
    return {'categories': blog.detach_category(store, admin, post_id, category_id)}

@admin_router.post('/categories', response_model=BlogCategoryEnvelope, status_code=201)
def admin_create_category(payload: BlogCategoryCreate, admin: AdminIdentity = Depends(require_admin),
                          store: Storage = Depends(get_storage)):
    return {'category': blog.create_category(store, admin, payload)}

@admin_router.put('/categories/{category_id}', response_model=BlogCategoryEnvelope)
def admin_update_category(category_id: int, payload: BlogCategoryUpdate, admin: AdminIdentity = Depends(require_admin),
                          store: Storage = Depends(get_storage)):
    return {'category': blog.update_category(store, admin, category_id, payload)}

@admin_router.delete('/categories/{category_id}', status_code=204, response_class=Response)
def admin_delete_category(category_id: int, admin: AdminIdentity = Depends(require_admin),
                          store: Storage = Depends(get_storage)):
    blog.delete_category(store, admin, category_id)
    return Response(status_code=204)
