# cartshop/api/products.py
# Публичные роуты каталога: список, поиск, фильтры, карточка товара.
from decimal import Decimal

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cartshop.api.schemas import ProductResponse
from cartshop.core import security
from cartshop.services import catalog

router = APIRouter()

MAX_PRICE = Decimal("99999999.99")


@router.get("", response_model=list[ProductResponse])
def list_products(
    search: str | None = None,
    min_price: Decimal | None = None,
    max_price: Decimal | None = None,
    in_stock: bool = False,
    db: Session = Depends(security.get_db),
):
    """
    Фильтры не комбинируются, приоритет: search, затем диапазон цен, затем in_stock.
    Без параметров — все товары, отсортированные по имени.
    """
    if search is not None and search.strip():
        return catalog.search_products(db, search)
    if min_price is not None or max_price is not None:
        return catalog.products_in_price_range(
            db,
            min_price if min_price is not None else Decimal("0"),
            max_price if max_price is not None else MAX_PRICE,
        )
    if in_stock:
        return catalog.in_stock_products(db)
    return catalog.list_products_sorted(db)


@router.get("/{product_id}", response_model=ProductResponse)
def product_detail(product_id: int, db: Session = Depends(security.get_db)):
    return catalog.get_product(db, product_id)
