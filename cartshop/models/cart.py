# cartshop/models/cart.py
# Модель CartItem — строки корзины пользователя, одна строка на пару (user, product).
from decimal import Decimal

from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from cartshop.db.base import Base


class CartItem(Base):
    __tablename__ = "cart_items"
    __table_args__ = (UniqueConstraint("user_id", "product_id", name="uq_cart_items_user_product"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)

    user = relationship("User")
    product = relationship("Product", lazy="joined")

    @property
    def subtotal(self) -> Decimal:
        if self.product is None or self.product.price is None or self.quantity is None:
            return Decimal("0.00")
        return self.product.price * self.quantity
