from sqlalchemy.orm import Session, joinedload
from sqlalchemy import and_
from typing import List
import logging

from app.core.exceptions import NotFoundError, ValidationError
from app.models.dish import Dish
from app.models.meal_plan import MealPlan, MealItem
from app.schemas.meal_plan import MealItemCreate, MealItemUpdate
from app.utils.date_utils import week_dates

logger = logging.getLogger(__name__)

class MealPlanService:
    def __init__(self, db: Session):
        self.db = db

    def get_meal_plan(self, meal_plan_id: str) -> MealPlan:
        meal_plan = self.db.query(MealPlan).filter(MealPlan.id == meal_plan_id).first()
        if not meal_plan:
            raise NotFoundError("Meal plan not found")
        return meal_plan

    def get_week_plans(self, week_start: str) -> List[MealPlan]:
        """Every meal plan dated within the seven days from ``week_start``, items and dishes loaded."""
        dates = week_dates(week_start)
        return self.db.query(MealPlan).options(
            joinedload(MealPlan.items).joinedload(MealItem.dish)
        ).filter(
            and_(MealPlan.date >= dates[0], MealPlan.date <= dates[-1])
        ).order_by(MealPlan.date, MealPlan.meal_name).all()

    def get_meal_items(self, meal_plan_id: str) -> List[MealItem]:
        self.get_meal_plan(meal_plan_id)
        return self.db.query(MealItem).options(
            joinedload(MealItem.dish)
        ).join(Dish, Dish.id == MealItem.dish_id).filter(
            MealItem.meal_plan_id == meal_plan_id
        ).order_by(Dish.name).all()

    def _get_meal_item(self, meal_plan_id: str, item_id: str) -> MealItem:
        meal_item = self.db.query(MealItem).filter(
            and_(MealItem.id == item_id, MealItem.meal_plan_id == meal_plan_id)
        ).first()
        if not meal_item:
            raise NotFoundError("Meal item not found")
        return meal_item

    def _ensure_dish_exists(self, dish_id: str):
        if not self.db.query(Dish.id).filter(Dish.id == dish_id).first():
            raise NotFoundError("Dish not found")

    def add_meal_item(self, meal_plan_id: str, item_data: MealItemCreate) -> MealItem:
        self.get_meal_plan(meal_plan_id)
        self._ensure_dish_exists(item_data.dish_id)

        meal_item = MealItem(**item_data.model_dump(), meal_plan_id=meal_plan_id)
        self.db.add(meal_item)
        self.db.commit()
        self.db.refresh(meal_item)
        logger.info(f"Added dish {meal_item.dish_id} to meal plan {meal_plan_id}")
        return meal_item

    def update_meal_item(self, meal_plan_id: str, item_update: MealItemUpdate) -> MealItem:
        meal_item = self._get_meal_item(meal_plan_id, item_update.id)

        update_data = item_update.model_dump(exclude_unset=True, exclude={'id'})
        if not update_data:
            raise ValidationError("No fields to update")
        if 'dish_id' in update_data:
            self._ensure_dish_exists(update_data['dish_id'])

        for field, value in update_data.items():
            setattr(meal_item, field, value)

        self.db.commit()
        self.db.refresh(meal_item)
        return meal_item

    def remove_meal_item(self, meal_plan_id: str, item_id: str) -> bool:
        meal_item = self._get_meal_item(meal_plan_id, item_id)
        self.db.delete(meal_item)
        self.db.commit()
        return True
