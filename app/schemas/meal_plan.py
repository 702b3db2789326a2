from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime

# Slot-based personal weekly plan
class SlotDishAssign(BaseModel):
    dish_id: str
    meal_type: str
    serving_size: float = 1.0
    customizations: Optional[Dict[str, Any]] = None

class SlotDishEntry(BaseModel):
    dish_id: str
    dish_name: Optional[str] = None
    serving_size: float
    slot_id: str

class SlotAssignmentResult(BaseModel):
    message: str
    day_of_week: int
    meal_type: str
    dish: Dict[str, Any]
    serving_size: float

class UserWeeklyPlan(BaseModel):
    meal_plan: Dict[int, Dict[str, List[SlotDishEntry]]]

# Order-driven meal plans
class MealItemBase(BaseModel):
    dish_id: str
    servings: int = Field(1, gt=0)
    customizations: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None

class MealItemCreate(MealItemBase):
    pass

class MealItemUpdate(BaseModel):
    id: str
    dish_id: Optional[str] = None
    servings: Optional[int] = Field(None, gt=0)
    customizations: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None

class MealItem(MealItemBase):
    id: str
    meal_plan_id: str

    class Config:
        from_attributes = True

class MealItemWithDish(BaseModel):
    id: str
    dish_id: str
    dish_name: Optional[str] = None
    servings: int
    customizations: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None
    calories: Optional[float] = None
    prep_time: Optional[int] = None

class MealPlanWithItems(BaseModel):
    id: str
    meal_name: str
    date: str
    created_at: Optional[datetime] = None
    items: List[MealItemWithDish] = []

class WeeklyMealPlans(BaseModel):
    week_start: str
    days: Dict[str, Dict[str, MealPlanWithItems]]

class WeeklyMealPlansResponse(BaseModel):
    weeklyMealPlan: WeeklyMealPlans

# Menu generation
class MenuGenerationRequest(BaseModel):
    user_name: str
    start_date: str
    end_date: str
    period_type: str

class GeneratedDish(BaseModel):
    dish_name: str
    people_count: int
    notes: Optional[str] = None

class GeneratedMealPlan(BaseModel):
    meal_plan_id: str
    date: str
    meal_type: str
    people_count: int
    orders_count: int
    dishes: List[GeneratedDish] = []

class MenuGenerationSummary(BaseModel):
    total_orders: int = 0
    total_meals_generated: int = 0
    total_people_served: int = 0

class MenuGenerationResult(BaseModel):
    user_name: str
    period_type: str
    start_date: str
    end_date: str
    generated_meal_plans: List[GeneratedMealPlan] = []
    orders_processed: List[Dict[str, Any]] = []
    summary: MenuGenerationSummary

class MealPlanHistoryEntry(BaseModel):
    id: str
    user_name: str
    date: str
    meal_name: str
    created_at: Optional[datetime] = None
    meal_items_count: int
    meal_items: List[MealItemWithDish] = []

class MealPlanHistoryResponse(BaseModel):
    meal_plans: List[MealPlanHistoryEntry]

class MealItemResponse(BaseModel):
    mealItem: MealItem

class MealItemListResponse(BaseModel):
    mealItems: List[MealItemWithDish]
