from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError
from typing import Any, Dict, List, Optional
import logging

from app.core.exceptions import ConstraintViolationError, ValidationError
from app.models.meal_plan import MealPlan, MealItem
from app.models.order import Order
from app.models.enums import OrderStatus
from app.services.dish_resolver import DishResolver, get_dish_resolver
from app.services.order_service import OrderService
from app.services.weekly_view import serialize_meal_item
from app.utils.date_utils import normalize_date, parse_date

logger = logging.getLogger(__name__)

PERIOD_TYPES = ("day", "week")

class MenuGenerationService:
    """Turns a customer's open orders into meal plans with meal items"""

    def __init__(self, db: Session, resolver: Optional[DishResolver] = None):
        self.db = db
        self.resolver = resolver or get_dish_resolver(db)

    @staticmethod
    def _empty_result(user_name: str, period_type: str, start: str, end: str) -> Dict[str, Any]:
        return {
            "user_name": user_name,
            "period_type": period_type,
            "start_date": start,
            "end_date": end,
            "generated_meal_plans": [],
            "orders_processed": [],
            "summary": {
                "total_orders": 0,
                "total_meals_generated": 0,
                "total_people_served": 0
            }
        }

    @staticmethod
    def _serialize_order(order: Order) -> Dict[str, Any]:
        return {
            "id": order.id,
            "user_name": order.user_name,
            "order_date": normalize_date(order.order_date),
            "meal_type": order.meal_type.value,
            "dish_name": order.dish_name,
            "people_count": order.people_count,
            "notes": order.notes,
            "status": order.status.value,
            "created_at": order.created_at
        }

    @staticmethod
    def _item_notes(order: Order) -> str:
        notes = f"Generated from order: {order.dish_name} for {order.people_count} people"
        if order.notes:
            notes += f". Notes: {order.notes}"
        return notes

    def _find_meal_plan(self, user_name: str, plan_date, meal_name: str) -> Optional[MealPlan]:
        return self.db.query(MealPlan).filter(
            MealPlan.user_name == user_name,
            MealPlan.date == plan_date,
            MealPlan.meal_name == meal_name
        ).first()

    def _get_or_create_meal_plan(self, user_name: str, plan_date, meal_name: str) -> MealPlan:
        """
        Reuse the plan for (user, date, meal) or insert it.

        Must be called with no pending changes in the session: losing the insert
        race rolls the transaction back before re-reading the winner's row.
        """
        meal_plan = self._find_meal_plan(user_name, plan_date, meal_name)
        if meal_plan:
            return meal_plan

        meal_plan = MealPlan(user_name=user_name, date=plan_date, meal_name=meal_name)
        self.db.add(meal_plan)
        try:
            self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Meal plan for {user_name} {plan_date} {meal_name} created concurrently: {str(e)}")
            meal_plan = self._find_meal_plan(user_name, plan_date, meal_name)
            if not meal_plan:
                raise ConstraintViolationError("Meal plan was modified concurrently, please retry")

        return meal_plan

    def generate_menu(self, user_name: str, start_date: str, end_date: str, period_type: str) -> Dict[str, Any]:
        """
        Materialise pending and confirmed orders in a date range into meal plans.

        Orders are grouped by (date, meal type); each group gets one MealPlan,
        reused if it already exists. Each order whose dish name resolves to a
        catalog dish becomes a MealItem and is marked completed. Orders that do
        not resolve are logged and left open.

        Each group is committed on its own, so a failure part way through
        leaves earlier groups materialised. Re-running is safe because
        completed orders are never picked up again.

        Raises:
            ValidationError: missing fields, malformed dates or unknown period type
        """
        if not user_name or not start_date or not end_date or not period_type:
            raise ValidationError("user_name, start_date, end_date, and period_type are required")

        start = normalize_date(start_date, "start_date")
        end = normalize_date(end_date, "end_date")

        if period_type not in PERIOD_TYPES:
            raise ValidationError('period_type must be "day" or "week"')

        orders = OrderService(self.db).get_open_orders(user_name, parse_date(start), parse_date(end))
        if not orders:
            logger.info(f"No open orders for {user_name} between {start} and {end}")
            return self._empty_result(user_name, period_type, start, end)

        orders_processed = [self._serialize_order(order) for order in orders]

        groups: Dict[tuple, List[Order]] = {}
        for order in orders:
            key = (normalize_date(order.order_date), order.meal_type.value)
            groups.setdefault(key, []).append(order)

        generated_meal_plans = []
        total_people_served = 0

        for (plan_date, meal_type), meal_orders in groups.items():
            people_count = sum(order.people_count for order in meal_orders)
            total_people_served += people_count

            meal_plan = self._get_or_create_meal_plan(user_name, parse_date(plan_date), meal_type)

            for order in meal_orders:
                dish = self.resolver.resolve(order.dish_name)
                if not dish:
                    logger.warning(f"No matching dish found for \"{order.dish_name}\" in order {order.id}")
                    continue

                self.db.add(MealItem(
                    meal_plan_id=meal_plan.id,
                    dish_id=dish.id,
                    servings=order.people_count,
                    notes=self._item_notes(order)
                ))
                order.status = OrderStatus.completed

            self.db.commit()

            generated_meal_plans.append({
                "meal_plan_id": meal_plan.id,
                "date": plan_date,
                "meal_type": meal_type,
                "people_count": people_count,
                "orders_count": len(meal_orders),
                "dishes": [
                    {
                        "dish_name": order.dish_name,
                        "people_count": order.people_count,
                        "notes": order.notes
                    }
                    for order in meal_orders
                ]
            })

        logger.info(
            f"Generated {len(generated_meal_plans)} meal plans from {len(orders)} orders "
            f"for {user_name} ({start} to {end})"
        )

        return {
            "user_name": user_name,
            "period_type": period_type,
            "start_date": start,
            "end_date": end,
            "generated_meal_plans": generated_meal_plans,
            "orders_processed": orders_processed,
            "summary": {
                "total_orders": len(orders),
                "total_meals_generated": len(generated_meal_plans),
                "total_people_served": total_people_served
            }
        }

    def get_generated_menus(self, user_name: str, date: Optional[str] = None) -> List[Dict[str, Any]]:
        """Meal plans of one customer, newest date first, with their items."""
        if not user_name:
            raise ValidationError("user_name parameter is required")

        query = self.db.query(MealPlan).options(
            joinedload(MealPlan.items).joinedload(MealItem.dish)
        ).filter(MealPlan.user_name == user_name)

        if date:
            query = query.filter(MealPlan.date == parse_date(date))

        meal_plans = query.order_by(MealPlan.date.desc(), MealPlan.meal_name).all()

        return [
            {
                "id": meal_plan.id,
                "user_name": meal_plan.user_name,
                "date": normalize_date(meal_plan.date),
                "meal_name": meal_plan.meal_name,
                "created_at": meal_plan.created_at,
                "meal_items_count": len(meal_plan.items),
                "meal_items": [serialize_meal_item(item) for item in meal_plan.items]
            }
            for meal_plan in meal_plans
        ]
