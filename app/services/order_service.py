from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Optional, Dict, Any
from datetime import date
import logging
import re

from app.core.exceptions import ValidationError, NotFoundError
from app.models.enums import MealType, OrderStatus, ORDER_MEAL_TYPES, OPEN_ORDER_STATUSES
from app.models.order import Order
from app.schemas.order import OrderCreate, OrderUpdate, OrderBatchCreate, OrderInfo
from app.utils.date_utils import parse_date, week_dates

logger = logging.getLogger(__name__)

STRICT_DATE = re.compile(r'^\d{4}-\d{2}-\d{2}$')

class OrderService:
    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _validate_order_date(value: str) -> date:
        if not value or not STRICT_DATE.match(value):
            raise ValidationError("order_date must be in YYYY-MM-DD format")
        return parse_date(value, "order_date")

    @staticmethod
    def _validate_meal_type(value: str) -> MealType:
        meal = (value or "").strip().lower()
        if meal not in {m.value for m in ORDER_MEAL_TYPES}:
            raise ValidationError("meal_type must be breakfast, lunch, or dinner")
        return MealType(meal)

    @staticmethod
    def _validate_people_count(value: int) -> int:
        if value is None or value <= 0:
            raise ValidationError("people_count must be greater than 0")
        return value

    @staticmethod
    def _validate_status(value: str) -> OrderStatus:
        try:
            return OrderStatus((value or "").strip().lower())
        except ValueError:
            raise ValidationError("status must be pending, confirmed, or completed")

    def _build_order(self, data: OrderCreate) -> Order:
        if not data.user_name or not data.dish_name:
            raise ValidationError(
                "user_name, order_date, meal_type, dish_name, and people_count are required"
            )
        return Order(
            user_name=data.user_name.strip(),
            order_date=self._validate_order_date(data.order_date),
            meal_type=self._validate_meal_type(data.meal_type),
            dish_name=data.dish_name.strip(),
            people_count=self._validate_people_count(data.people_count),
            notes=data.notes or None,
            status=OrderStatus.pending
        )

    def create_order(self, order_data: OrderCreate) -> Order:
        order = self._build_order(order_data)
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        logger.info(f"Created order {order.id} for {order.user_name} on {order.order_date}")
        return order

    def create_order_batch(self, batch: OrderBatchCreate) -> Dict[str, Any]:
        """
        Submit one order per unit of each item, all or nothing.

        Returns the created orders together with the confirmation payload the
        client shows after submission.
        """
        if not batch.items:
            raise ValidationError("At least one order item is required")

        info: OrderInfo = batch.order_info
        orders = []
        for item in batch.items:
            if item.quantity <= 0:
                raise ValidationError("Item quantity must be greater than 0")
            for _ in range(item.quantity):
                orders.append(self._build_order(OrderCreate(
                    user_name=info.user_name,
                    order_date=info.order_date,
                    meal_type=info.meal_type,
                    dish_name=item.dish_name,
                    people_count=info.people_count,
                    notes=info.notes
                )))

        self.db.add_all(orders)
        self.db.commit()
        for order in orders:
            self.db.refresh(order)

        logger.info(f"Created {len(orders)} orders for {info.user_name} on {info.order_date}")
        confirmation = {
            "order_ids": [order.id for order in orders],
            "order_info": info.model_dump(),
            "order_items": [item.model_dump() for item in batch.items],
            "total_items": sum(item.quantity for item in batch.items)
        }
        return {"orders": orders, "confirmation": confirmation}

    def get_order(self, order_id: str) -> Optional[Order]:
        return self.db.query(Order).filter(Order.id == order_id).first()

    def list_orders(
        self,
        user_name: Optional[str] = None,
        order_date: Optional[str] = None,
        meal_type: Optional[str] = None,
        status: Optional[str] = None
    ) -> List[Order]:
        query = self.db.query(Order)

        if user_name:
            query = query.filter(Order.user_name == user_name)
        if order_date:
            query = query.filter(Order.order_date == self._validate_order_date(order_date))
        if meal_type:
            query = query.filter(Order.meal_type == self._validate_meal_type(meal_type))
        if status:
            query = query.filter(Order.status == self._validate_status(status))

        return query.order_by(Order.order_date, Order.meal_type, Order.created_at).all()

    def get_week_orders(self, week_start: str) -> List[Order]:
        dates = week_dates(week_start)
        return (
            self.db.query(Order)
            .filter(Order.order_date >= dates[0], Order.order_date <= dates[-1])
            .order_by(Order.order_date, Order.meal_type, Order.dish_name, Order.created_at)
            .all()
        )

    def get_open_orders(self, user_name: str, start: date, end: date) -> List[Order]:
        """Pending and confirmed orders of one customer in an inclusive date range"""
        return (
            self.db.query(Order)
            .filter(
                Order.user_name == user_name,
                Order.order_date >= start,
                Order.order_date <= end,
                Order.status.in_(OPEN_ORDER_STATUSES)
            )
            .order_by(Order.order_date, Order.meal_type, Order.created_at)
            .all()
        )

    def check_customer(self, user_name: str) -> Dict[str, Any]:
        """Whether a customer name has ordered before, matched case-insensitively."""
        if not user_name or not user_name.strip():
            raise ValidationError("user_name parameter is required")

        row = (
            self.db.query(
                Order.user_name,
                func.count(Order.id).label("order_count"),
                func.max(Order.created_at).label("last_order")
            )
            .filter(func.lower(Order.user_name) == user_name.strip().lower())
            .group_by(Order.user_name)
            .first()
        )
        if not row:
            return {"exists": False, "user_data": None}

        return {
            "exists": True,
            "user_data": {
                "user_name": row.user_name,
                "order_count": row.order_count,
                "last_order": row.last_order
            }
        }

    def update_order(self, order_update: OrderUpdate) -> Optional[Order]:
        order = self.get_order(order_update.id)
        if not order:
            return None

        update_data = order_update.model_dump(exclude_unset=True, exclude={'id'})
        if not update_data:
            raise ValidationError("No fields to update")

        # Validate everything before touching the row
        changes = {}
        for field, value in update_data.items():
            if field == 'order_date':
                changes[field] = self._validate_order_date(value)
            elif field == 'meal_type':
                changes[field] = self._validate_meal_type(value)
            elif field == 'people_count':
                changes[field] = self._validate_people_count(value)
            elif field == 'status':
                changes[field] = self._validate_status(value)
            elif field in ('user_name', 'dish_name'):
                if not value:
                    raise ValidationError(f"{field} cannot be empty")
                changes[field] = value.strip()
            else:
                changes[field] = value

        for field, value in changes.items():
            setattr(order, field, value)

        self.db.commit()
        self.db.refresh(order)
        return order

    def delete_order(self, order_id: str) -> bool:
        order = self.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")

        self.db.delete(order)
        self.db.commit()
        return True
