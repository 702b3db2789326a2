from fastapi import APIRouter, Depends, HTTPException, status, Query, Request
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.config import settings
from app.api.auth.auth import get_current_user
from app.models.user import User
from app.schemas.meal_plan import (
    SlotDishAssign, SlotAssignmentResult, UserWeeklyPlan, WeeklyMealPlansResponse,
    MealItemCreate, MealItemUpdate, MealItemResponse, MealItemListResponse
)
from app.services.dish_access_service import DishAccessService
from app.services.meal_plan_service import MealPlanService
from app.services.meal_slot_service import MealSlotService
from app.services.weekly_view import build_weekly_meal_plans, organize_slot_plan, serialize_meal_item
from app.middleware.rate_limit import limiter

router = APIRouter()

@router.get("", response_model=UserWeeklyPlan)
async def get_weekly_plan(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """The current user's slot week, every day and meal present"""
    slot_service = MealSlotService(db)
    rows = slot_service.get_user_plan_rows(current_user.id)
    return {"meal_plan": organize_slot_plan(rows)}

@router.get("/week", response_model=WeeklyMealPlansResponse)
async def get_week_meal_plans(
    start_date: str = Query(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    meal_plan_service = MealPlanService(db)
    meal_plans = meal_plan_service.get_week_plans(start_date)
    return {"weeklyMealPlan": build_weekly_meal_plans(start_date, meal_plans)}

@router.post("/{day_of_week}", response_model=SlotAssignmentResult, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.MEAL_PLAN_RATE_LIMIT)
async def add_dish_to_slot(
    day_of_week: int,
    assignment: SlotDishAssign,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    slot_service = MealSlotService(db)
    meal = slot_service.validate_slot_request(day_of_week, assignment.meal_type, assignment.serving_size)
    dish = DishAccessService(db).get_accessible_dish(current_user.id, assignment.dish_id)

    slot_dish = slot_service.add_dish_to_slot(
        user_id=current_user.id,
        day_of_week=day_of_week,
        meal_type=meal.value,
        dish_id=dish.id,
        serving_size=assignment.serving_size,
        customizations=assignment.customizations
    )
    return {
        "message": "Dish added to meal plan successfully",
        "day_of_week": day_of_week,
        "meal_type": meal.value,
        "dish": {"id": dish.id, "name": dish.name},
        "serving_size": slot_dish.serving_size
    }

@router.delete("/{day_of_week}")
@limiter.limit(settings.MEAL_PLAN_RATE_LIMIT)
async def remove_dish_from_slot(
    day_of_week: int,
    request: Request,
    meal_type: str = Query(...),
    dish_id: str = Query(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    slot_service = MealSlotService(db)
    removed = slot_service.remove_dish_from_slot(current_user.id, day_of_week, meal_type, dish_id)
    if not removed:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Dish not found in this meal slot"
        )
    return {"message": "Dish removed from meal plan successfully"}

@router.get("/{plan_id}/items", response_model=MealItemListResponse)
async def get_meal_items(
    plan_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    meal_plan_service = MealPlanService(db)
    items = meal_plan_service.get_meal_items(plan_id)
    return {"mealItems": [serialize_meal_item(item) for item in items]}

@router.post("/{plan_id}/items", response_model=MealItemResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.MEAL_PLAN_RATE_LIMIT)
async def add_meal_item(
    plan_id: str,
    item: MealItemCreate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    meal_plan_service = MealPlanService(db)
    return {"mealItem": meal_plan_service.add_meal_item(plan_id, item)}

@router.put("/{plan_id}/items", response_model=MealItemResponse)
@limiter.limit(settings.MEAL_PLAN_RATE_LIMIT)
async def update_meal_item(
    plan_id: str,
    item_update: MealItemUpdate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    meal_plan_service = MealPlanService(db)
    return {"mealItem": meal_plan_service.update_meal_item(plan_id, item_update)}

@router.delete("/{plan_id}/items")
@limiter.limit(settings.MEAL_PLAN_RATE_LIMIT)
async def remove_meal_item(
    plan_id: str,
    request: Request,
    item_id: str = Query(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    meal_plan_service = MealPlanService(db)
    meal_plan_service.remove_meal_item(plan_id, item_id)
    return {"message": "Meal item removed successfully"}
