from fastapi import APIRouter, Depends, status, Query, Request
from sqlalchemy.orm import Session
from typing import Optional
from app.core.database import get_db
from app.core.config import settings
from app.api.auth.auth import get_current_user
from app.models.user import User
from app.schemas.meal_plan import MenuGenerationRequest, MenuGenerationResult, MealPlanHistoryResponse
from app.services.menu_generation_service import MenuGenerationService
from app.middleware.rate_limit import limiter

router = APIRouter()

@router.post("", response_model=MenuGenerationResult, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.MENU_GENERATION_RATE_LIMIT)
async def generate_menu(
    generation_request: MenuGenerationRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Turn a customer's open orders in a date range into meal plans"""
    menu_service = MenuGenerationService(db)
    return menu_service.generate_menu(
        user_name=generation_request.user_name,
        start_date=generation_request.start_date,
        end_date=generation_request.end_date,
        period_type=generation_request.period_type
    )

@router.get("", response_model=MealPlanHistoryResponse)
async def get_generated_menus(
    user_name: str = Query(...),
    date: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    menu_service = MenuGenerationService(db)
    return {"meal_plans": menu_service.get_generated_menus(user_name, date)}
