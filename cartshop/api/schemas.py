# cartshop/api/schemas.py
# Pydantic-схемы запросов и ответов API. Отделены от моделей SQLAlchemy.
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------
class RegisterRequest(BaseModel):
    # Пустые значения допускаются схемой, их проверяет сервис с понятным сообщением
    username: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = ""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "username": "testuser",
                    "email": "test@example.com",
                    "password": "password123",
                    "confirm_password": "password123",
                }
            ]
        }
    }


class UserResponse(ORMModel):
    id: int
    username: str
    email: str
    role: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------
class ProductResponse(ORMModel):
    id: int
    name: str
    description: str | None = None
    price: Decimal
    stock: int
    image_url: str | None = None
    in_stock: bool
    created_at: datetime


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: int
    quantity: int = 1


class UpdateCartQuantityRequest(BaseModel):
    quantity: int


class CartLineResponse(ORMModel):
    id: int
    product_id: int
    quantity: int
    subtotal: Decimal
    product: ProductResponse


class CartResponse(BaseModel):
    lines: list[CartLineResponse]
    total: Decimal
    item_count: int
    empty: bool


class CheckoutSummaryResponse(BaseModel):
    lines: list[CartLineResponse]
    total: Decimal


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderLineResponse(ORMModel):
    id: int
    product_id: int
    quantity: int = Field(ge=1)
    price_at_purchase: Decimal
    subtotal: Decimal


class OrderResponse(ORMModel):
    id: int
    user_id: int
    total_price: Decimal
    status: str
    created_at: datetime
    items: list[OrderLineResponse]


class OrderStatsResponse(BaseModel):
    order_count: int
    total_spent: Decimal
