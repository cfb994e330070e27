# cartshop/api/cart.py
# Роуты корзины. Все требуют авторизации, пользователь берётся из токена.
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from cartshop.api.schemas import (
    AddToCartRequest,
    CartLineResponse,
    CartResponse,
    UpdateCartQuantityRequest,
)
from cartshop.core import security
from cartshop.models.user import User
from cartshop.services import cart as cart_service

router = APIRouter()


@router.get("", response_model=CartResponse)
def view_cart(
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(security.get_db),
):
    lines = cart_service.get_cart_lines(db, current_user.id)
    return {
        "lines": lines,
        "total": cart_service.cart_total(db, current_user.id),
        "item_count": cart_service.cart_item_count(db, current_user.id),
        "empty": not lines,
    }


@router.post("/items", status_code=status.HTTP_201_CREATED, response_model=CartLineResponse)
def add_to_cart(
    body: AddToCartRequest,
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(security.get_db),
):
    return cart_service.add_to_cart(db, current_user.id, body.product_id, body.quantity)


@router.put("/items/{line_id}", response_model=CartLineResponse)
def update_cart_item(
    line_id: int,
    body: UpdateCartQuantityRequest,
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(security.get_db),
):
    """Количество <= 0 удаляет строку — в этом случае ответ 204 без тела."""
    line = cart_service.update_quantity(db, current_user.id, line_id, body.quantity)
    if line is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return line


@router.delete("/items/{line_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_from_cart(
    line_id: int,
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(security.get_db),
):
    cart_service.remove_from_cart(db, current_user.id, line_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
