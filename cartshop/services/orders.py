# cartshop/services/orders.py
# История заказов. Заказ всегда читается вместе со своими строками.
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from cartshop.core.errors import NotAuthorizedError, NotFoundError
from cartshop.models.order import Order


def _with_items():
    return select(Order).options(selectinload(Order.items))


def load_order(db: Session, order_id: int) -> Order | None:
    return db.execute(_with_items().where(Order.id == order_id)).scalar_one_or_none()


def get_order(db: Session, user_id: int, order_id: int) -> Order:
    """Заказ со строками. Чужой заказ -> NotAuthorizedError, а не NotFoundError."""
    order = load_order(db, order_id)
    if order is None:
        raise NotFoundError("Order not found")
    if order.user_id != user_id:
        raise NotAuthorizedError("You are not allowed to view this order")
    return order


def list_orders(db: Session, user_id: int) -> list[Order]:
    stmt = (
        _with_items()
        .where(Order.user_id == user_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
    )
    return list(db.execute(stmt).scalars())


def count_orders(db: Session, user_id: int) -> int:
    return db.execute(select(func.count(Order.id)).where(Order.user_id == user_id)).scalar_one()


def total_spent(db: Session, user_id: int) -> Decimal:
    stmt = select(func.coalesce(func.sum(Order.total_price), 0)).where(Order.user_id == user_id)
    return Decimal(str(db.execute(stmt).scalar_one())).quantize(Decimal("0.01"))
