from fastapi import APIRouter, Depends
from storefront.api.deps import get_storage
from storefront.schemas import CategoryDetail, CategoryList
from storefront.services import catalog
from storefront.store.base import Storage

router = APIRouter()

@router.get('', response_model=CategoryList)
def list_categories(store: Storage = Depends(get_storage)):
    return {'categories': store.list_categories()}

@router.get('/{slug}', response_model=CategoryDetail)
def get_category(slug: str, store: Storage = Depends(get_storage)):
    return catalog.category_detail(store, slug)
