"""Storage capability shared by the SQL and in-memory backends.

Records come back as objects exposing the column names of
``storefront.db.models`` as attributes.  Every mutation goes through a
method here; callers never assign to a returned record.

Methods that write commit immediately unless they run inside
``transaction()``, in which case the whole block commits or rolls back
together.
"""
from abc import ABC, abstractmethod
from typing import Any, ContextManager, List, Optional

class Storage(ABC):

    @abstractmethod
    def transaction(self) -> ContextManager[None]: ...

    def close(self):
        pass

    # users
    @abstractmethod
    def get_user(self, user_id: int) -> Optional[Any]: ...
    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[Any]: ...
    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[Any]: ...
    @abstractmethod
    def create_user(self, data: dict) -> Any: ...
    @abstractmethod
    def count_users(self) -> int: ...

    # catalog
    @abstractmethod
    def get_product(self, product_id: int) -> Optional[Any]: ...
    @abstractmethod
    def get_product_by_slug(self, slug: str) -> Optional[Any]: ...
    @abstractmethod
    def list_products(self, category_id: Optional[int] = None, featured: Optional[bool] = None) -> List[Any]: ...
    @abstractmethod
    def create_product(self, data: dict) -> Any: ...
    @abstractmethod
    def update_product(self, product_id: int, changes: dict) -> Optional[Any]: ...
    @abstractmethod
    def delete_product(self, product_id: int) -> bool: ...
    @abstractmethod
    def list_product_specifications(self, product_id: int) -> List[Any]: ...
    @abstractmethod
    def add_product_specification(self, product_id: int, key: str, value: str) -> Any: ...
    @abstractmethod
    def list_product_images(self, product_id: int) -> List[Any]: ...
    @abstractmethod
    def add_product_image(self, product_id: int, url: str, is_main: bool = False) -> Any: ...
    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Any]: ...
    @abstractmethod
    def get_category_by_slug(self, slug: str) -> Optional[Any]: ...
    @abstractmethod
    def list_categories(self) -> List[Any]: ...
    @abstractmethod
    def create_category(self, data: dict) -> Any: ...

    # cart
    @abstractmethod
    def list_cart_items(self, session_id: str) -> List[Any]: ...
    @abstractmethod
    def get_cart_item(self, item_id: int) -> Optional[Any]: ...
    @abstractmethod
    def find_cart_item(self, session_id: str, product_id: int) -> Optional[Any]: ...
    @abstractmethod
    def add_cart_item(self, session_id: str, product_id: int, quantity: int) -> Optional[Any]:
        """Insert a cart row; None if the session already has a row for the product."""
    @abstractmethod
    def set_cart_item_quantity(self, item_id: int, quantity: int) -> Optional[Any]: ...
    @abstractmethod
    def remove_cart_item(self, item_id: int) -> bool: ...
    @abstractmethod
    def clear_cart(self, session_id: str) -> int: ...

    # orders
    @abstractmethod
    def create_order(self, data: dict) -> Any: ...
    @abstractmethod
    def get_order(self, order_id: int) -> Optional[Any]: ...
    @abstractmethod
    def list_orders(self) -> List[Any]: ...
    @abstractmethod
    def update_order(self, order_id: int, changes: dict) -> Optional[Any]: ...
    @abstractmethod
    def add_order_item(self, data: dict) -> Any: ...
    @abstractmethod
    def list_order_items(self, order_id: int) -> List[Any]: ...

    # inbound messages
    @abstractmethod
    def create_contact_message(self, data: dict) -> Any: ...
    @abstractmethod
    def list_contact_messages(self) -> List[Any]: ...
    @abstractmethod
    def get_subscriber_by_email(self, email: str) -> Optional[Any]: ...
    @abstractmethod
    def add_subscriber(self, email: str) -> Any: ...

    # blog
    @abstractmethod
    def get_blog_post(self, post_id: int) -> Optional[Any]: ...
    @abstractmethod
    def get_blog_post_by_slug(self, slug: str) -> Optional[Any]: ...
    @abstractmethod
    def list_blog_posts(self, published_only: bool = False, category_id: Optional[int] = None) -> List[Any]: ...
    @abstractmethod
    def create_blog_post(self, data: dict) -> Any: ...
    @abstractmethod
    def update_blog_post(self, post_id: int, changes: dict) -> Optional[Any]: ...
    @abstractmethod
    def delete_blog_post(self, post_id: int) -> bool: ...
    @abstractmethod
    def get_blog_category(self, category_id: int) -> Optional[Any]: ...
    @abstractmethod
    def get_blog_category_by_slug(self, slug: str) -> Optional[Any]: ...
    @abstractmethod
    def list_blog_categories(self) -> List[Any]: ...
    @abstractmethod
    def create_blog_category(self, data: dict) -> Any: ...
    @abstractmethod
    def update_blog_category(self, category_id: int, changes: dict) -> Optional[Any]: ...
    @abstractmethod
    def delete_blog_category(self, category_id: int) -> bool: ...
    @abstractmethod
    def add_category_to_post(self, post_id: int, category_id: int) -> Any: ...
    @abstractmethod
    def remove_category_from_post(self, post_id: int, category_id: int) -> bool: ...
    @abstractmethod
    def list_post_categories(self, post_id: int) -> List[Any]: ...
