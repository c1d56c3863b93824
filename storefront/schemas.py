from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel
from typing import Annotated, Optional, List
from decimal import Decimal
from datetime import datetime
from enum import Enum

SLUG_PATTERN = r'^[a-z0-9]+(?:-[a-z0-9]+)*$'
Money = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]

class OrderStatus(str, Enum):
    PENDING = 'pending'
    PROCESSING = 'processing'
    SHIPPED = 'shipped'
    DELIVERED = 'delivered'
    CANCELLED = 'cancelled'
    REFUNDED = 'refunded'

class PaymentStatus(str, Enum):
    UNPAID = 'unpaid'
    PAID = 'paid'

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

# users / auth
class UserRegister(CamelModel):
    username: str = Field(min_length=3, max_length=120)
    password: str = Field(min_length=8)
    email: EmailStr
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None

class UserRead(CamelModel):
    id: int
    username: str
    email: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    is_admin: bool = False

class UserEnvelope(CamelModel):
    user: UserRead

class LoginPayload(CamelModel):
    username: str
    password: str

class AuthStatus(CamelModel):
    authenticated: bool
    user: Optional[UserRead] = None

# catalog
class CategoryCreate(CamelModel):
    name: str = Field(min_length=1, max_length=120)
    slug: str = Field(pattern=SLUG_PATTERN, max_length=160)
    description: Optional[str] = None
    image_url: Optional[str] = None

class CategoryRead(CategoryCreate):
    id: int
    slug: str

class ProductBase(CamelModel):
    name: str = Field(min_length=1, max_length=240)
    slug: str = Field(pattern=SLUG_PATTERN, max_length=240)
    description: str = ''
    price: Money
    compare_at_price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    image_url: str = ''
    category_id: int
    inventory: int = Field(default=0, ge=0)
    featured: bool = False
    is_new: bool = False
    is_sale: bool = False
    rating: Decimal = Field(default=Decimal('0'), ge=0, le=5, max_digits=3, decimal_places=2)
    review_count: int = Field(default=0, ge=0)

class ProductCreate(ProductBase): pass

class ProductUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=240)
    slug: Optional[str] = Field(default=None, pattern=SLUG_PATTERN, max_length=240)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    compare_at_price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    image_url: Optional[str] = None
    category_id: Optional[int] = None
    inventory: Optional[int] = Field(default=None, ge=0)
    featured: Optional[bool] = None
    is_new: Optional[bool] = None
    is_sale: Optional[bool] = None
    rating: Optional[Decimal] = Field(default=None, ge=0, le=5, max_digits=3, decimal_places=2)
    review_count: Optional[int] = Field(default=None, ge=0)

class ProductRead(ProductBase):
    id: int
    slug: str
    name: str
    price: Decimal
    rating: Decimal

class ProductSpecificationRead(CamelModel):
    id: int
    product_id: int
    key: str
    value: str

class ProductImageRead(CamelModel):
    id: int
    product_id: int
    url: str
    is_main: bool = False

class ProductList(CamelModel):
    products: List[ProductRead] = []

class ProductEnvelope(CamelModel):
    product: ProductRead

class ProductDetail(CamelModel):
    product: ProductRead
    specifications: List[ProductSpecificationRead] = []
    images: List[ProductImageRead] = []
    category: Optional[CategoryRead] = None

class CategoryList(CamelModel):
    categories: List[CategoryRead] = []

class CategoryEnvelope(CamelModel):
    category: CategoryRead

class CategoryDetail(CamelModel):
    category: CategoryRead
    products: List[ProductRead] = []

class InventoryUpdate(CamelModel):
    inventory: int = Field(ge=0)

# cart
class CartItemAdd(CamelModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)

class CartItemUpdate(CamelModel):
    quantity: int

class CartItemRead(CamelModel):
    id: int
    session_id: str
    product_id: int
    quantity: int

class CartLine(CartItemRead):
    product: Optional[ProductRead] = None

class CartRead(CamelModel):
    items: List[CartLine] = []

class CartItemEnvelope(CamelModel):
    item: CartItemRead

# orders
class OrderCreate(CamelModel):
    user_id: Optional[int] = None
    full_name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = None
    address: str = Field(min_length=1)
    city: str = Field(min_length=1, max_length=120)
    state: str = Field(min_length=1, max_length=64)
    zip_code: str = Field(min_length=1, max_length=32)
    total_amount: Money

class OrderRead(CamelModel):
    id: int
    user_id: Optional[int] = None
    full_name: str
    email: str
    phone: Optional[str] = None
    address: str
    city: str
    state: str
    zip_code: str
    total_amount: Decimal
    status: str
    payment_status: str
    payment_id: Optional[str] = None
    created_at: datetime

class OrderItemRead(CamelModel):
    id: int
    order_id: int
    product_id: int
    product_name: str
    price: Decimal
    quantity: int

class OrderEnvelope(CamelModel):
    order: OrderRead

class OrderDetail(CamelModel):
    order: OrderRead
    items: List[OrderItemRead] = []

class OrderList(CamelModel):
    orders: List[OrderRead] = []

class PaymentSubmit(CamelModel):
    # single-use card token from the gateway's client library
    source_id: str = Field(min_length=1, validation_alias=AliasChoices('sourceId', 'paymentId', 'source_id'))
    amount: Optional[Decimal] = Field(default=None, ge=0)
    currency_code: Optional[str] = None

class StatusUpdate(CamelModel):
    status: OrderStatus

class BulkStatusUpdate(CamelModel):
    order_ids: List[int] = Field(min_length=1)
    status: OrderStatus

class StatusChange(CamelModel):
    order_id: int
    previous_status: str
    status: str

class BulkStatusResult(CamelModel):
    updated: List[StatusChange] = []

class ShippingLabelRequest(CamelModel):
    service: str = 'usps_priority'
    package_size: Optional[str] = None
    weight_lb: Optional[Decimal] = Field(default=None, gt=0)
    signature: bool = False
    insurance: bool = False

class ShipTo(CamelModel):
    name: str
    address: str
    city: str
    state: str
    zip_code: str
    phone: Optional[str] = None

class ShippingLabel(CamelModel):
    label_id: str
    order_id: int
    service: str
    service_name: str
    postage: Decimal
    days_to_deliver: str
    package_size: str
    weight_lb: Decimal
    signature: bool
    insurance: bool
    ship_to: ShipTo
    order: OrderRead

# inbound messages
class ContactCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = None
    message: str = Field(min_length=1)

class ContactMessageRead(CamelModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    message: str
    created_at: datetime

class ContactEnvelope(CamelModel):
    message: ContactMessageRead

class ContactList(CamelModel):
    messages: List[ContactMessageRead] = []

class NewsletterSubscribe(CamelModel):
    email: EmailStr

class SubscriberRead(CamelModel):
    id: int
    email: str
    created_at: datetime

class SubscriberEnvelope(CamelModel):
    subscriber: SubscriberRead

# blog
class BlogCategoryCreate(CamelModel):
    name: str = Field(min_length=1, max_length=120)
    slug: str = Field(pattern=SLUG_PATTERN, max_length=160)

class BlogCategoryUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    slug: Optional[str] = Field(default=None, pattern=SLUG_PATTERN, max_length=160)

class BlogCategoryRead(CamelModel):
    id: int
    name: str
    slug: str

class BlogCategoryEnvelope(CamelModel):
    category: BlogCategoryRead

class BlogCategoryList(CamelModel):
    categories: List[BlogCategoryRead] = []

class BlogPostCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    slug: str = Field(pattern=SLUG_PATTERN, max_length=255)
    content: str = Field(min_length=1)
    excerpt: Optional[str] = None
    cover_image_url: Optional[str] = None
    published: bool = False
    category_ids: List[int] = []

class BlogPostUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    slug: Optional[str] = Field(default=None, pattern=SLUG_PATTERN, max_length=255)
    content: Optional[str] = Field(default=None, min_length=1)
    excerpt: Optional[str] = None
    cover_image_url: Optional[str] = None
    published: Optional[bool] = None
    category_ids: Optional[List[int]] = None

class BlogPostRead(CamelModel):
    id: int
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    cover_image_url: Optional[str] = None
    author_id: int
    published: bool
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

class BlogPostDetail(CamelModel):
    post: BlogPostRead
    categories: List[BlogCategoryRead] = []

class BlogPostList(CamelModel):
    posts: List[BlogPostRead] = []
