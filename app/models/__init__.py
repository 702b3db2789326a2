from app.core.database import Base
from .enums import MealType, DishVisibility, OrderStatus, DishTagName, CustomizationType
from .user import User
from .ingredient import Ingredient, IngredientUnit, Category
from .dish import Dish, DishIngredient, DishShare, DishTag
from .customization import CustomizationGroup, CustomizationOption
from .weekly_plan import WeeklyMealPlan, DailyMealPlan, MealSlot, MealSlotDish
from .order import Order
from .meal_plan import MealPlan, MealItem

__all__ = [
    "Base", "MealType", "DishVisibility", "OrderStatus", "DishTagName", "CustomizationType",
    "User", "Ingredient", "IngredientUnit", "Category",
    "Dish", "DishIngredient", "DishShare", "DishTag",
    "CustomizationGroup", "CustomizationOption",
    "WeeklyMealPlan", "DailyMealPlan", "MealSlot", "MealSlotDish",
    "Order", "MealPlan", "MealItem"
]
