from storefront.core.errors import Conflict
from storefront.schemas import ContactCreate
from storefront.store.base import Storage

def submit_contact(store: Storage, payload: ContactCreate):
    data = payload.model_dump()
    data['email'] = str(payload.email)
    return store.create_contact_message(data)

def subscribe(store: Storage, email: str):
    email = email.strip().lower()
    if store.get_subscriber_by_email(email):
        raise Conflict('Email already subscribed')
    return store.add_subscriber(email)
