from fastapi import APIRouter, Depends, HTTPException, status, Query, Request
from sqlalchemy.orm import Session
from typing import Optional
from app.core.database import get_db
from app.core.config import settings
from app.api.auth.auth import get_current_user
from app.models.user import User
from app.schemas.order import (
    OrderCreate, OrderUpdate, OrderBatchCreate,
    OrderResponse, OrderListResponse, OrderBatchResponse, WeeklyOrdersResponse
)
from app.services.order_service import OrderService
from app.services.weekly_view import build_weekly_orders
from app.middleware.rate_limit import limiter

router = APIRouter()

@router.get("", response_model=OrderListResponse)
async def get_orders(
    user_name: Optional[str] = Query(None),
    order_date: Optional[str] = Query(None),
    meal_type: Optional[str] = Query(None),
    order_status: Optional[str] = Query(None, alias="status"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    order_service = OrderService(db)
    orders = order_service.list_orders(
        user_name=user_name,
        order_date=order_date,
        meal_type=meal_type,
        status=order_status
    )
    return {"orders": orders}

@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.ORDER_RATE_LIMIT)
async def create_order(
    order: OrderCreate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    order_service = OrderService(db)
    return {"order": order_service.create_order(order)}

@router.post("/batch", response_model=OrderBatchResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.ORDER_RATE_LIMIT)
async def create_order_batch(
    batch: OrderBatchCreate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Submit a multi-dish order; the response carries the confirmation details."""
    order_service = OrderService(db)
    return order_service.create_order_batch(batch)

@router.get("/week", response_model=WeeklyOrdersResponse)
async def get_week_orders(
    start_date: str = Query(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    order_service = OrderService(db)
    orders = order_service.get_week_orders(start_date)
    return {"weeklyOrders": build_weekly_orders(start_date, orders)}

@router.put("", response_model=OrderResponse)
@limiter.limit(settings.ORDER_RATE_LIMIT)
async def update_order(
    order_update: OrderUpdate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    order_service = OrderService(db)
    order = order_service.update_order(order_update)
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found"
        )
    return {"order": order}

@router.delete("")
@limiter.limit(settings.ORDER_RATE_LIMIT)
async def delete_order(
    request: Request,
    id: str = Query(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    order_service = OrderService(db)
    order_service.delete_order(id)
    return {"message": "Order deleted successfully"}
