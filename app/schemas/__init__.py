from .user import User, UserCreate, UserUpdate
from .dish import Dish, DishCreate, DishUpdate, DishWithIngredients, DishShare, DishShareCreate
from .ingredient import Ingredient, IngredientCreate, IngredientUnit, Category
from .order import Order, OrderCreate, OrderUpdate, OrderConfirmation, WeeklyOrders
from .meal_plan import (
    MealItem, MealItemCreate, MealPlanWithItems, WeeklyMealPlans,
    MenuGenerationRequest, MenuGenerationResult
)
from .shopping_list import ShoppingListItem, ShoppingListResponse

__all__ = [
    "User", "UserCreate", "UserUpdate",
    "Dish", "DishCreate", "DishUpdate", "DishWithIngredients", "DishShare", "DishShareCreate",
    "Ingredient", "IngredientCreate", "IngredientUnit", "Category",
    "Order", "OrderCreate", "OrderUpdate", "OrderConfirmation", "WeeklyOrders",
    "MealItem", "MealItemCreate", "MealPlanWithItems", "WeeklyMealPlans",
    "MenuGenerationRequest", "MenuGenerationResult",
    "ShoppingListItem", "ShoppingListResponse"
]
