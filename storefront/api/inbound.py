from fastapi import APIRouter, Depends
from storefront.api.deps import get_storage
from storefront.schemas import ContactCreate, ContactEnvelope, NewsletterSubscribe, SubscriberEnvelope
from storefront.services import inbound
from storefront.store.base import Storage

router = APIRouter()

@router.post('/contact', response_model=ContactEnvelope, status_code=201)
def contact(payload: ContactCreate, store: Storage = Depends(get_storage)):
    return {'message': inbound.submit_contact(store, payload)}

@router.post('/newsletter', response_model=SubscriberEnvelope, status_code=201)
def newsletter(payload: NewsletterSubscribe, store: Storage = Depends(get_storage)):
    return {'subscriber': inbound.subscribe(store, str(payload.email))}
