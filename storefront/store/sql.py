from contextlib import contextmanager
from typing import Optional
from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from storefront.db import models
from storefront.store.base import Storage

class SqlStorage(Storage):
    """Storage over one SQLAlchemy session; one instance per request."""

    def __init__(self, db: Session):
        self.db = db
        self._depth = 0

    @contextmanager
    def transaction(self):
        self._depth += 1
        try:
            yield
        except BaseException:
            if self._depth == 1:
                self.db.rollback()
            raise
        else:
            if self._depth == 1:
                self.db.commit()
        finally:
            self._depth -= 1

    def close(self):
        self.db.close()

    def _save(self, *objs):
        for obj in objs:
            self.db.add(obj)
        if self._depth:
            self.db.flush()
        else:
            self.db.commit()
        return objs[0] if objs else None

    def _delete(self, obj):
        self.db.delete(obj)
        if self._depth:
            self.db.flush()
        else:
            self.db.commit()

    def _patch(self, model, pk, changes: dict):
        obj = self.db.get(model, pk)
        if not obj:
            return None
        for k, v in changes.items():
            setattr(obj, k, v)
        return self._save(obj)

    # users
    def get_user(self, user_id):
        return self.db.get(models.User, user_id) if user_id is not None else None

    def get_user_by_username(self, username):
        return self.db.execute(select(models.User).where(models.User.username == username)).scalar_one_or_none()

    def get_user_by_email(self, email):
        return self.db.execute(select(models.User).where(models.User.email == email)).scalar_one_or_none()

    def create_user(self, data):
        return self._save(models.User(**data))

    def count_users(self):
        return self.db.execute(select(func.count()).select_from(models.User)).scalar_one()

    # catalog
    def get_product(self, product_id):
        return self.db.get(models.Product, product_id)

    def get_product_by_slug(self, slug):
        return self.db.execute(select(models.Product).where(models.Product.slug == slug)).scalar_one_or_none()

    def list_products(self, category_id: Optional[int] = None, featured: Optional[bool] = None):
        stmt = select(models.Product)
        if category_id is not None: stmt = stmt.where(models.Product.category_id == category_id)
        if featured is not None: stmt = stmt.where(models.Product.featured == featured)
        return list(self.db.execute(stmt.order_by(models.Product.id)).scalars().all())

    def create_product(self, data):
        return self._save(models.Product(**data))

    def update_product(self, product_id, changes):
        return self._patch(models.Product, product_id, changes)

    def delete_product(self, product_id):
        obj = self.db.get(models.Product, product_id)
        if not obj:
            return False
        # sqlite does not enforce ON DELETE CASCADE unless asked to
        for dependent in (models.CartItem, models.ProductSpecification, models.ProductImage):
            self.db.execute(delete(dependent).where(dependent.product_id == product_id))
        self._delete(obj)
        return True

    def list_product_specifications(self, product_id):
        stmt = select(models.ProductSpecification).where(models.ProductSpecification.product_id == product_id)
        return list(self.db.execute(stmt.order_by(models.ProductSpecification.id)).scalars().all())

    def add_product_specification(self, product_id, key, value):
        return self._save(models.ProductSpecification(product_id=product_id, key=key, value=value))

    def list_product_images(self, product_id):
        stmt = select(models.ProductImage).where(models.ProductImage.product_id == product_id)
        return list(self.db.execute(stmt.order_by(models.ProductImage.id)).scalars().all())

    def add_product_image(self, product_id, url, is_main=False):
        return self._save(models.ProductImage(product_id=product_id, url=url, is_main=is_main))

    def get_category(self, category_id):
        return self.db.get(models.Category, category_id)

    def get_category_by_slug(self, slug):
        return self.db.execute(select(models.Category).where(models.Category.slug == slug)).scalar_one_or_none()

    def list_categories(self):
        return list(self.db.execute(select(models.Category).order_by(models.Category.id)).scalars().all())

    def create_category(self, data):
        return self._save(models.Category(**data))

    # cart
    def list_cart_items(self, session_id):
        stmt = select(models.CartItem).where(models.CartItem.session_id == session_id)
        return list(self.db.execute(stmt.order_by(models.CartItem.id)).scalars().all())

    def get_cart_item(self, item_id):
        return self.db.get(models.CartItem, item_id)

    def find_cart_item(self, session_id, product_id):
        stmt = select(models.CartItem).where(models.CartItem.session_id == session_id,
                                             models.CartItem.product_id == product_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def add_cart_item(self, session_id, product_id, quantity):
        try:
            return self._save(models.CartItem(session_id=session_id, product_id=product_id, quantity=quantity))
        except IntegrityError:
            if self._depth:
                raise
            # another request inserted the (session, product) row first
            self.db.rollback()
            return None

    def set_cart_item_quantity(self, item_id, quantity):
        return self._patch(models.CartItem, item_id, {'quantity': quantity})

    def remove_cart_item(self, item_id):
        obj = self.db.get(models.CartItem, item_id)
        if not obj:
            return False
        self._delete(obj)
        return True

    def clear_cart(self, session_id):
        result = self.db.execute(delete(models.CartItem).where(models.CartItem.session_id == session_id))
        self._save()
        return result.rowcount or 0

    # orders
    def create_order(self, data):
        return self._save(models.Order(**data))

    def get_order(self, order_id):
        return self.db.get(models.Order, order_id)

    def list_orders(self):
        stmt = select(models.Order).order_by(models.Order.created_at.desc(), models.Order.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def update_order(self, order_id, changes):
        return self._patch(models.Order, order_id, changes)

    def add_order_item(self, data):
        return self._save(models.OrderItem(**data))

    def list_order_items(self, order_id):
        stmt = select(models.OrderItem).where(models.OrderItem.order_id == order_id)
        return list(self.db.execute(stmt.order_by(models.OrderItem.id)).scalars().all())

    # inbound messages
    def create_contact_message(self, data):
        return self._save(models.ContactMessage(**data))

    def list_contact_messages(self):
        stmt = select(models.ContactMessage).order_by(models.ContactMessage.created_at.desc(), models.ContactMessage.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def get_subscriber_by_email(self, email):
        stmt = select(models.NewsletterSubscriber).where(models.NewsletterSubscriber.email == email)
        return self.db.execute(stmt).scalar_one_or_none()

    def add_subscriber(self, email):
        return self._save(models.NewsletterSubscriber(email=email))

    # blog
    def get_blog_post(self, post_id):
        return self.db.get(models.BlogPost, post_id)

    def get_blog_post_by_slug(self, slug):
        return self.db.execute(select(models.BlogPost).where(models.BlogPost.slug == slug)).scalar_one_or_none()

    def list_blog_posts(self, published_only=False, category_id=None):
        stmt = select(models.BlogPost)
        if published_only:
            stmt = stmt.where(models.BlogPost.published.is_(True))
        if category_id is not None:
            stmt = stmt.join(models.BlogPostCategory, models.BlogPostCategory.post_id == models.BlogPost.id) \
                       .where(models.BlogPostCategory.category_id == category_id)
        stmt = stmt.order_by(models.BlogPost.created_at.desc(), models.BlogPost.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def create_blog_post(self, data):
        return self._save(models.BlogPost(**data))

    def update_blog_post(self, post_id, changes):
        return self._patch(models.BlogPost, post_id, changes)

    def delete_blog_post(self, post_id):
        obj = self.db.get(models.BlogPost, post_id)
        if not obj:
            return False
        self.db.execute(delete(models.BlogPostCategory).where(models.BlogPostCategory.post_id == post_id))
        self._delete(obj)
        return True

    def get_blog_category(self, category_id):
        return self.db.get(models.BlogCategory, category_id)

    def get_blog_category_by_slug(self, slug):
        return self.db.execute(select(models.BlogCategory).where(models.BlogCategory.slug == slug)).scalar_one_or_none()

    def list_blog_categories(self):
        return list(self.db.execute(select(models.BlogCategory).order_by(models.BlogCategory.name)).scalars().all())

    def create_blog_category(self, data):
        return self._save(models.BlogCategory(**data))

    def update_blog_category(self, category_id, changes):
        return self._patch(models.BlogCategory, category_id, changes)

    def delete_blog_category(self, category_id):
        obj = self.db.get(models.BlogCategory, category_id)
        if not obj:
            return False
        self.db.execute(delete(models.BlogPostCategory).where(models.BlogPostCategory.category_id == category_id))
        self._delete(obj)
        return True

    def add_category_to_post(self, post_id, category_id):
        stmt = select(models.BlogPostCategory).where(models.BlogPostCategory.post_id == post_id,
                                                     models.BlogPostCategory.category_id == category_id)
        existing = self.db.execute(stmt).scalar_one_or_none()
        if existing:
            return existing
        return self._save(models.BlogPostCategory(post_id=post_id, category_id=category_id))

    def remove_category_from_post(self, post_id, category_id):
        result = self.db.execute(delete(models.BlogPostCategory).where(models.BlogPostCategory.post_id == post_id,
                                                                       models.BlogPostCategory.category_id == category_id))
        self._save()
        return bool(result.rowcount)

    def list_post_categories(self, post_id):
        stmt = select(models.BlogCategory) \
            .join(models.BlogPostCategory, models.BlogPostCategory.category_id == models.BlogCategory.id) \
            .where(models.BlogPostCategory.post_id == post_id) \
            .order_by(models.BlogCategory.name)
        return list(self.db.execute(stmt).scalars().all())
