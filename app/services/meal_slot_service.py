from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Any, Dict, List, Optional
import logging

from app.core.exceptions import ValidationError, NotFoundError, ConstraintViolationError
from app.models.dish import Dish
from app.models.enums import MealType, SLOT_MEAL_TYPES
from app.models.weekly_plan import WeeklyMealPlan, DailyMealPlan, MealSlot, MealSlotDish
from app.utils.date_utils import DAYS_IN_WEEK

logger = logging.getLogger(__name__)

# Only the first slot of each meal is used; higher orders are reserved
DEFAULT_SLOT_ORDER = 1

class MealSlotService:
    """Places dishes into a user's (day of week, meal type) slots"""

    def __init__(self, db: Session):
        self.db = db

    def initialize_user_plan(self, user_id: str) -> WeeklyMealPlan:
        """Create the weekly plan with its 7 daily plans. Called once, when the user is created."""
        weekly_plan = WeeklyMealPlan(user_id=user_id)
        self.db.add(weekly_plan)
        self.db.flush()

        for day in range(1, DAYS_IN_WEEK + 1):
            self.db.add(DailyMealPlan(weekly_plan_id=weekly_plan.id, day_of_week=day))

        self.db.flush()
        return weekly_plan

    @staticmethod
    def validate_slot_request(day_of_week: int, meal_type: str, serving_size: float = 1.0) -> MealType:
        if not isinstance(day_of_week, int) or day_of_week < 1 or day_of_week > DAYS_IN_WEEK:
            raise ValidationError("Invalid day of week (must be 1-7)")

        try:
            meal = MealType(meal_type)
        except ValueError:
            meal = None
        if meal not in SLOT_MEAL_TYPES:
            raise ValidationError(
                f"Invalid meal type. Must be one of: {', '.join(m.value for m in SLOT_MEAL_TYPES)}"
            )

        if serving_size is None or serving_size <= 0:
            raise ValidationError("Serving size must be greater than 0")

        return meal

    def get_daily_plan(self, user_id: str, day_of_week: int) -> DailyMealPlan:
        daily_plan = (
            self.db.query(DailyMealPlan)
            .join(WeeklyMealPlan, WeeklyMealPlan.id == DailyMealPlan.weekly_plan_id)
            .filter(
                WeeklyMealPlan.user_id == user_id,
                DailyMealPlan.day_of_week == day_of_week
            )
            .first()
        )
        if not daily_plan:
            raise NotFoundError("Daily meal plan not found")
        return daily_plan

    def _get_or_create_slot(self, daily_plan_id: str, meal_type: MealType) -> MealSlot:
        slot = self.db.query(MealSlot).filter(
            MealSlot.daily_plan_id == daily_plan_id,
            MealSlot.meal_type == meal_type,
            MealSlot.slot_order == DEFAULT_SLOT_ORDER
        ).first()

        if not slot:
            slot = MealSlot(
                daily_plan_id=daily_plan_id,
                meal_type=meal_type,
                slot_order=DEFAULT_SLOT_ORDER
            )
            self.db.add(slot)
            self.db.flush()

        return slot

    def add_dish_to_slot(
        self,
        user_id: str,
        day_of_week: int,
        meal_type: str,
        dish_id: str,
        serving_size: float = 1.0,
        customizations: Optional[Dict[str, Any]] = None
    ) -> MealSlotDish:
        """
        Put a dish into the user's slot for a day and meal.

        Re-adding a dish already in the slot replaces its serving size (last write wins).

        Raises:
            ValidationError: bad day, meal type or serving size
            NotFoundError: the user has no daily plan for that day
            ConstraintViolationError: a concurrent write created the same slot or row
        """
        meal = self.validate_slot_request(day_of_week, meal_type, serving_size)
        daily_plan = self.get_daily_plan(user_id, day_of_week)

        try:
            slot = self._get_or_create_slot(daily_plan.id, meal)
            slot_dish = self.db.merge(MealSlotDish(
                slot_id=slot.id,
                dish_id=dish_id,
                serving_size=serving_size,
                customizations=customizations
            ))
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Slot write conflict for user {user_id}, day {day_of_week}, {meal.value}: {str(e)}")
            raise ConstraintViolationError("Meal slot was modified concurrently, please retry")

        self.db.refresh(slot_dish)
        logger.info(f"Set dish {dish_id} x{serving_size} in {meal.value} slot of day {day_of_week} for user {user_id}")
        return slot_dish

    def remove_dish_from_slot(self, user_id: str, day_of_week: int, meal_type: str, dish_id: str) -> bool:
        meal = self.validate_slot_request(day_of_week, meal_type)
        daily_plan = self.get_daily_plan(user_id, day_of_week)

        slot_dish = (
            self.db.query(MealSlotDish)
            .join(MealSlot, MealSlot.id == MealSlotDish.slot_id)
            .filter(
                MealSlot.daily_plan_id == daily_plan.id,
                MealSlot.meal_type == meal,
                MealSlotDish.dish_id == dish_id
            )
            .first()
        )
        if not slot_dish:
            return False

        self.db.delete(slot_dish)
        self.db.commit()
        return True

    def get_user_plan_rows(self, user_id: str) -> List[Dict[str, Any]]:
        """Flat rows of the user's week, one per slot dish, ordered by day, meal and slot."""
        rows = (
            self.db.query(
                DailyMealPlan.day_of_week,
                MealSlot.id.label("slot_id"),
                MealSlot.meal_type,
                MealSlot.slot_order,
                MealSlotDish.dish_id,
                Dish.name.label("dish_name"),
                MealSlotDish.serving_size
            )
            .join(WeeklyMealPlan, WeeklyMealPlan.id == DailyMealPlan.weekly_plan_id)
            .join(MealSlot, MealSlot.daily_plan_id == DailyMealPlan.id)
            .join(MealSlotDish, MealSlotDish.slot_id == MealSlot.id)
            .join(Dish, Dish.id == MealSlotDish.dish_id)
            .filter(WeeklyMealPlan.user_id == user_id)
            .order_by(DailyMealPlan.day_of_week, MealSlot.meal_type, MealSlot.slot_order, Dish.name)
            .all()
        )
        return [dict(row._mapping) for row in rows]
