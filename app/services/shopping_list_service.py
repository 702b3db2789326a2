"""
Weekly shopping list built from the order-driven meal plans.

Quantities are summed per (ingredient, unit) pair. Units are never converted:
the same ingredient measured in two units yields two line items.
"""
import json
import logging
from typing import Any, Dict, List, Tuple

from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import ValidationError
from app.models.dish import Dish, DishIngredient
from app.models.ingredient import Ingredient
from app.models.meal_plan import MealPlan, MealItem
from app.utils.date_utils import week_dates

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"

EXPORT_FORMATS = {
    "json": ("application/json", "json"),
    "text": ("text/plain", "txt"),
}


class ShoppingListService:
    def __init__(self, db: Session):
        self.db = db

    def _week_meal_items(self, week_start: str) -> List[MealItem]:
        dates = week_dates(week_start)
        return (
            self.db.query(MealItem)
            .join(MealPlan, MealPlan.id == MealItem.meal_plan_id)
            .join(Dish, Dish.id == MealItem.dish_id)
            .options(
                joinedload(MealItem.dish)
                .joinedload(Dish.ingredients)
                .joinedload(DishIngredient.ingredient)
                .joinedload(Ingredient.default_unit),
                joinedload(MealItem.dish)
                .joinedload(Dish.ingredients)
                .joinedload(DishIngredient.unit),
            )
            .filter(MealPlan.date >= dates[0], MealPlan.date <= dates[-1])
            .order_by(MealPlan.date, MealPlan.meal_name, MealItem.id)
            .all()
        )

    def build_shopping_list(self, week_start: str) -> Dict[str, Any]:
        """
        Aggregate every ingredient needed by the week's meal items.

        ``total_quantity`` adds ``dish quantity x item servings`` for each use.
        ``dishes`` records the dish name once per meal item, so a dish planned
        twice appears twice.
        """
        dates = week_dates(week_start)
        aggregated: Dict[Tuple[str, Any], Dict[str, Any]] = {}

        for meal_item in self._week_meal_items(week_start):
            dish = meal_item.dish
            for dish_ingredient in dish.ingredients:
                ingredient = dish_ingredient.ingredient
                unit = dish_ingredient.unit or ingredient.default_unit
                unit_id = unit.id if unit else None

                key = (ingredient.id, unit_id)
                line = aggregated.get(key)
                if line is None:
                    line = {
                        "ingredient_id": ingredient.id,
                        "ingredient_name": ingredient.name,
                        "total_quantity": 0.0,
                        "unit_id": unit_id,
                        "unit_name": unit.name if unit else None,
                        "unit_abbreviation": unit.abbreviation if unit else None,
                        "category": ingredient.category,
                        "dishes": []
                    }
                    aggregated[key] = line

                line["total_quantity"] += dish_ingredient.quantity * meal_item.servings
                line["dishes"].append(dish.name)

        shopping_list = sorted(
            aggregated.values(),
            key=lambda line: (line["category"] or "", line["ingredient_name"])
        )

        summary_by_category: Dict[str, int] = {}
        for line in shopping_list:
            category = line["category"] or UNCATEGORIZED
            summary_by_category[category] = summary_by_category.get(category, 0) + 1

        return {
            "week_start": dates[0].isoformat(),
            "week_end": dates[-1].isoformat(),
            "total_items": len(shopping_list),
            "shopping_list": shopping_list,
            "summary_by_category": summary_by_category
        }

    @staticmethod
    def _format_quantity(quantity: float) -> str:
        return f"{quantity:g}"

    def _render_text(self, shopping_list: Dict[str, Any]) -> str:
        lines = []
        for line in shopping_list["shopping_list"]:
            parts = [self._format_quantity(line["total_quantity"])]
            if line["unit_abbreviation"]:
                parts.append(line["unit_abbreviation"])
            parts.append(line["ingredient_name"])
            lines.append(f"• {' '.join(parts)} (for {', '.join(line['dishes'])})")
        return f"Shopping List for Week of {shopping_list['week_start']}\n\n" + "\n".join(lines)

    def export_shopping_list(self, week_start: str, export_format: str = "json") -> Tuple[str, str, str]:
        """
        Render the week's shopping list as a downloadable file.

        Returns:
            Tuple of (body, content type, filename).

        Raises:
            ValidationError: unsupported export format or bad start date
        """
        if export_format not in EXPORT_FORMATS:
            raise ValidationError("Invalid export format. Supported: json, text")

        shopping_list = self.build_shopping_list(week_start)
        content_type, extension = EXPORT_FORMATS[export_format]

        if export_format == "json":
            body = json.dumps(jsonable_encoder(shopping_list), indent=2)
        else:
            body = self._render_text(shopping_list)

        filename = f"shopping-list-{shopping_list['week_start']}.{extension}"
        logger.info(f"Exported shopping list for week of {shopping_list['week_start']} as {export_format}")
        return body, content_type, filename
