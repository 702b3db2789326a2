import enum
from sqlalchemy import Enum


class MealType(str, enum.Enum):
    """Single meal-type vocabulary shared by every planning flow"""
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"
    dessert = "dessert"
    snack = "snack"


# Each flow accepts a fixed subset of MealType
ORDER_MEAL_TYPES = (MealType.breakfast, MealType.lunch, MealType.dinner)
SLOT_MEAL_TYPES = (MealType.breakfast, MealType.lunch, MealType.dinner, MealType.dessert)
PLAN_MEAL_TYPES = (MealType.breakfast, MealType.lunch, MealType.dinner, MealType.snack)


class DishVisibility(str, enum.Enum):
    private = "private"
    shared = "shared"
    public = "public"


class DishTagName(str, enum.Enum):
    """Closed tag vocabulary for browsing dishes"""
    drink = "drink"
    dessert = "dessert"
    vegetable = "vegetable"
    meat = "meat"
    carbohydrate = "carbohydrate"


class CustomizationType(str, enum.Enum):
    single = "single"
    multiple = "multiple"
    quantity = "quantity"


class OrderStatus(str, enum.Enum):
    pending = "pending"
    confirmed = "confirmed"
    completed = "completed"


# Orders still waiting to be materialised into a meal plan
OPEN_ORDER_STATUSES = (OrderStatus.pending, OrderStatus.confirmed)


# Shared column types so each named database enum is declared once
meal_type_enum = Enum(MealType, name='meal_type_enum')
dish_visibility_enum = Enum(DishVisibility, name='dish_visibility_enum')
order_status_enum = Enum(OrderStatus, name='order_status_enum')
dish_tag_enum = Enum(DishTagName, name='dish_tag_enum')
customization_type_enum = Enum(CustomizationType, name='customization_type_enum')
