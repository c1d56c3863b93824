from fastapi import APIRouter, Depends
from typing import Optional
from storefront.api.deps import get_storage
from storefront.schemas import ProductDetail, ProductList
from storefront.services import catalog
from storefront.store.base import Storage

router = APIRouter()

@router.get('', response_model=ProductList)
def list_products(category: Optional[str] = None, featured: bool = False, store: Storage = Depends(get_storage)):
    return {'products': catalog.list_products(store, category_slug=category, featured=featured)}

@router.get('/{slug}', response_model=ProductDetail)
def get_product(slug: str, store: Storage = Depends(get_storage)):
    return catalog.product_detail(store, slug)
