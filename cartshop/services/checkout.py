# cartshop/services/checkout.py
# Оформление заказа: корзина -> заказ + списание остатков + очистка корзины.
# Всё выполняется в одной транзакции: при любой ошибке откатываем сессию целиком.
import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import update
from sqlalchemy.orm import Session

from cartshop.core.errors import (
    CheckoutConflictError,
    EmptyCartError,
    InsufficientStockError,
    ShopError,
)
from cartshop.models.cart import CartItem
from cartshop.models.order import Order, OrderItem, OrderStatus
from cartshop.models.product import Product
from cartshop.services import cart as cart_service
from cartshop.services import orders as order_service

logger = logging.getLogger(__name__)


@dataclass
class CheckoutSummary:
    lines: list[CartItem]
    total: Decimal


def validate_cart(lines: list[CartItem]) -> None:
    """Корзина не пуста и остатка хватает на каждую строку. Проверяются все строки до изменений."""
    if not lines:
        raise EmptyCartError()
    for line in lines:
        product = line.product
        if not product.has_stock(line.quantity):
            raise InsufficientStockError(product.id, product.name, product.stock, line.quantity)


def snapshot_cart(user_id: int, lines: list[CartItem]) -> Order:
    """
    Строит новый заказ из строк корзины, ничего не записывая в сессию.
    price_at_purchase = текущая цена товара, total_price = сумма подытогов.
    """
    items = [
        OrderItem(
            product_id=line.product_id,
            quantity=line.quantity,
            price_at_purchase=line.product.price,
        )
        for line in lines
    ]
    total = sum((item.subtotal for item in items), Decimal("0.00"))
    return Order(
        user_id=user_id,
        status=OrderStatus.pending.value,
        total_price=total,
        items=items,
    )


def decrement_stock(db: Session, product_id: int, quantity: int) -> bool:
    """
    Списывает остаток условным UPDATE. Возвращает False, если остатка уже не хватает:
    значит, параллельный заказ успел списать его после предпроверки.
    """
    result = db.execute(
        update(Product)
        .where(Product.id == product_id, Product.stock >= quantity)
        .values(stock=Product.stock - quantity)
    )
    return result.rowcount == 1


def checkout_summary(db: Session, user_id: int) -> CheckoutSummary:
    """Данные для страницы подтверждения. Ничего не меняет."""
    lines = cart_service.get_cart_lines(db, user_id)
    validate_cart(lines)
    total = sum((line.subtotal for line in lines), Decimal("0.00"))
    return CheckoutSummary(lines=lines, total=total)


def checkout(db: Session, user_id: int) -> Order:
    """
    Превращает корзину пользователя в заказ.

    Порядок: предпроверка (пустая корзина, остатки) -> снимок цен ->
    списание остатков с повторной проверкой -> сохранение заказа -> очистка корзины.
    """
    try:
        lines = cart_service.get_cart_lines(db, user_id)
        validate_cart(lines)

        order = snapshot_cart(user_id, lines)

        # Списываем в порядке product_id, чтобы параллельные заказы брали строки в одном порядке
        for line in sorted(lines, key=lambda l: l.product_id):
            if not decrement_stock(db, line.product_id, line.quantity):
                raise CheckoutConflictError(line.product_id, line.product.name)

        db.add(order)
        cart_service.delete_cart_lines(db, user_id)
        db.commit()
    except ShopError as e:
        db.rollback()
        logger.warning(f"Checkout failed for user {user_id}: {e.message}")
        raise
    except Exception:
        db.rollback()
        logger.exception(f"Checkout for user {user_id} rolled back")
        raise

    logger.info(f"Order {order.id} created for user {user_id}, total {order.total_price}")
    return order_service.load_order(db, order.id)
