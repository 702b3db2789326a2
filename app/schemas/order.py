from pydantic import BaseModel
from typing import Optional, List, Dict
from datetime import datetime, date
from app.models.enums import MealType, OrderStatus

class OrderBase(BaseModel):
    user_name: str
    order_date: str  # YYYY-MM-DD, validated by OrderService
    meal_type: str
    dish_name: str
    people_count: int
    notes: Optional[str] = None

class OrderCreate(OrderBase):
    pass

class OrderUpdate(BaseModel):
    id: str
    user_name: Optional[str] = None
    order_date: Optional[str] = None
    meal_type: Optional[str] = None
    dish_name: Optional[str] = None
    people_count: Optional[int] = None
    notes: Optional[str] = None
    status: Optional[str] = None

class Order(BaseModel):
    id: str
    user_name: str
    order_date: date
    meal_type: MealType
    dish_name: str
    people_count: int
    notes: Optional[str] = None
    status: OrderStatus
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class OrderResponse(BaseModel):
    order: Order

class OrderListResponse(BaseModel):
    orders: List[Order]

# Batch submission: one customer, one date and meal, several dishes
class OrderInfo(BaseModel):
    user_name: str
    order_date: str
    meal_type: str
    people_count: int
    notes: Optional[str] = None

class OrderItem(BaseModel):
    dish_name: str
    quantity: int = 1

class OrderBatchCreate(BaseModel):
    order_info: OrderInfo
    items: List[OrderItem]

class OrderConfirmation(BaseModel):
    """Everything the confirmation step needs, returned with the submission"""
    order_ids: List[str]
    order_info: OrderInfo
    order_items: List[OrderItem]
    total_items: int

class OrderBatchResponse(BaseModel):
    orders: List[Order]
    confirmation: OrderConfirmation

# Weekly order overview
class OrderDetails(BaseModel):
    id: str
    user_name: str
    people_count: int
    notes: Optional[str] = None
    status: OrderStatus
    created_at: Optional[datetime] = None

class OrderGroup(BaseModel):
    dish_name: str
    orders: List[OrderDetails] = []
    total_people: int = 0
    total_orders: int = 0

class WeeklyOrders(BaseModel):
    week_start: str
    days: Dict[str, Dict[str, List[OrderGroup]]]

class WeeklyOrdersResponse(BaseModel):
    weeklyOrders: WeeklyOrders
