# cartshop/api/orders.py
# Роуты оформления заказа и истории заказов.
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cartshop.api.schemas import CheckoutSummaryResponse, OrderResponse, OrderStatsResponse
from cartshop.core import security
from cartshop.models.user import User
from cartshop.services import checkout as checkout_service
from cartshop.services import orders as order_service

checkout_router = APIRouter()
router = APIRouter()


@checkout_router.get("", response_model=CheckoutSummaryResponse)
def checkout_summary(
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(security.get_db),
):
    """Сводка перед оформлением: 409 при пустой корзине или нехватке остатка."""
    summary = checkout_service.checkout_summary(db, current_user.id)
    return {"lines": summary.lines, "total": summary.total}


@checkout_router.post("", status_code=status.HTTP_201_CREATED, response_model=OrderResponse)
def process_checkout(
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(security.get_db),
):
    return checkout_service.checkout(db, current_user.id)


@router.get("", response_model=list[OrderResponse])
def order_history(
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(security.get_db),
):
    return order_service.list_orders(db, current_user.id)


@router.get("/stats", response_model=OrderStatsResponse)
def order_stats(
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(security.get_db),
):
    return {
        "order_count": order_service.count_orders(db, current_user.id),
        "total_spent": order_service.total_spent(db, current_user.id),
    }


@router.get("/{order_id}", response_model=OrderResponse)
def order_detail(
    order_id: int,
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(security.get_db),
):
    return order_service.get_order(db, current_user.id, order_id)
