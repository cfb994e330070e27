# cartshop/models/product.py
# Модель Product — позиция каталога с ценой и остатком на складе.
from sqlalchemy import CheckConstraint, Column, Integer, String, Numeric, DateTime, Text
from datetime import datetime
from cartshop.db.base import Base


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),)

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    image_url = Column(String(500), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    @property
    def in_stock(self) -> bool:
        return self.stock is not None and self.stock > 0

    def has_stock(self, quantity: int) -> bool:
        return self.stock is not None and self.stock >= quantity

    def __repr__(self):
        return f"<Product {self.name}>"
