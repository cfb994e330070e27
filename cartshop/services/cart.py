# cartshop/services/cart.py
# Операции с корзиной. Остаток здесь не проверяется и не резервируется,
# он проверяется только при оформлении заказа.
import logging
from decimal import Decimal

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from cartshop.core.errors import NotFoundError, ShopValidationError
from cartshop.models.cart import CartItem
from cartshop.services import catalog

logger = logging.getLogger(__name__)


def get_cart_lines(db: Session, user_id: int) -> list[CartItem]:
    stmt = select(CartItem).where(CartItem.user_id == user_id).order_by(CartItem.id)
    return list(db.execute(stmt).scalars())


def _get_own_line(db: Session, user_id: int, line_id: int) -> CartItem:
    line = db.get(CartItem, line_id)
    # Чужая строка выглядит для пользователя так же, как несуществующая
    if line is None or line.user_id != user_id:
        raise NotFoundError("Cart item not found")
    return line


def add_to_cart(db: Session, user_id: int, product_id: int, quantity: int = 1) -> CartItem:
    """Добавляет товар в корзину или увеличивает количество в существующей строке."""
    if quantity <= 0:
        raise ShopValidationError("Quantity must be greater than 0")

    product = catalog.get_product(db, product_id)

    stmt = select(CartItem).where(CartItem.user_id == user_id, CartItem.product_id == product.id)
    line = db.execute(stmt).scalar_one_or_none()
    if line is not None:
        line.quantity = line.quantity + quantity
    else:
        line = CartItem(user_id=user_id, product_id=product.id, quantity=quantity)
        db.add(line)

    db.commit()
    db.refresh(line)
    logger.debug(f"Cart of user {user_id}: product {product.id} -> qty {line.quantity}")
    return line


def update_quantity(db: Session, user_id: int, line_id: int, quantity: int) -> CartItem | None:
    """Задаёт количество; при quantity <= 0 строка удаляется и возвращается None."""
    line = _get_own_line(db, user_id, line_id)

    if quantity <= 0:
        db.delete(line)
        db.commit()
        return None

    line.quantity = quantity
    db.commit()
    db.refresh(line)
    return line


def remove_from_cart(db: Session, user_id: int, line_id: int) -> None:
    line = _get_own_line(db, user_id, line_id)
    db.delete(line)
    db.commit()


def cart_total(db: Session, user_id: int) -> Decimal:
    return sum((line.subtotal for line in get_cart_lines(db, user_id)), Decimal("0.00"))


def cart_item_count(db: Session, user_id: int) -> int:
    stmt = select(func.count(CartItem.id)).where(CartItem.user_id == user_id)
    return db.execute(stmt).scalar_one()


def delete_cart_lines(db: Session, user_id: int) -> int:
    """Удаляет строки корзины без commit — для использования внутри чужой транзакции."""
    result = db.execute(delete(CartItem).where(CartItem.user_id == user_id))
    return result.rowcount


def clear_cart(db: Session, user_id: int) -> None:
    delete_cart_lines(db, user_id)
    db.commit()
