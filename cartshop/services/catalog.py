# cartshop/services/catalog.py
# Запросы к каталогу товаров. Только чтение, кроме save_product.
from decimal import Decimal

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from cartshop.core.errors import NotFoundError
from cartshop.models.product import Product


def list_products(db: Session) -> list[Product]:
    return list(db.execute(select(Product).order_by(Product.id)).scalars())


def list_products_sorted(db: Session) -> list[Product]:
    return list(db.execute(select(Product).order_by(Product.name.asc(), Product.id)).scalars())


def find_product(db: Session, product_id: int) -> Product | None:
    return db.get(Product, product_id)


def get_product(db: Session, product_id: int) -> Product:
    product = find_product(db, product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return product


def search_products(db: Session, keyword: str | None) -> list[Product]:
    """Поиск подстроки без учёта регистра по имени и описанию. Пустой запрос = все товары."""
    if keyword is None or not keyword.strip():
        return list_products(db)
    pattern = f"%{keyword.strip().lower()}%"
    stmt = (
        select(Product)
        .where(
            or_(
                func.lower(Product.name).like(pattern),
                func.lower(Product.description).like(pattern),
            )
        )
        .order_by(Product.id)
    )
    return list(db.execute(stmt).scalars())


def find_by_name(db: Session, name: str) -> list[Product]:
    stmt = select(Product).where(Product.name.ilike(f"%{name}%")).order_by(Product.id)
    return list(db.execute(stmt).scalars())


def in_stock_products(db: Session) -> list[Product]:
    return list(db.execute(select(Product).where(Product.stock > 0).order_by(Product.id)).scalars())


def products_in_price_range(db: Session, min_price: Decimal, max_price: Decimal) -> list[Product]:
    # Границы включительно
    stmt = select(Product).where(Product.price.between(min_price, max_price)).order_by(Product.id)
    return list(db.execute(stmt).scalars())


def has_stock(db: Session, product_id: int, quantity: int) -> bool:
    product = find_product(db, product_id)
    return product is not None and product.has_stock(quantity)


def save_product(db: Session, product: Product) -> Product:
    db.add(product)
    db.commit()
    db.refresh(product)
    return product
