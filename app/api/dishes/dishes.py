from fastapi import APIRouter, Depends, status, Query, Request
from sqlalchemy.orm import Session
from typing import List, Optional
from app.core.database import get_db
from app.core.config import settings
from app.api.auth.auth import get_current_user
from app.models.user import User
from app.schemas.dish import (
    DishCreate, DishUpdate, DishWithIngredients,
    DishIngredient as DishIngredientSchema, DishIngredientCreate, DishIngredientUpdate,
    DishShare as DishShareSchema, DishShareCreate,
    DishTagCreate, DishTags, DishTagAdded, DishTagRemoved
)
from app.services.dish_service import DishService
from app.middleware.rate_limit import limiter

router = APIRouter()

@router.get("", response_model=List[DishWithIngredients])
async def get_my_dishes(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    dish_service = DishService(db)
    return [dish_service.serialize_dish(dish) for dish in dish_service.get_user_dishes(current_user.id)]

@router.post("", response_model=DishWithIngredients, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.DISH_RATE_LIMIT)
async def create_dish(
    dish: DishCreate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    dish_service = DishService(db)
    return dish_service.serialize_dish(dish_service.create_dish(dish, current_user.id))

@router.get("/public", response_model=List[DishWithIngredients])
async def get_public_dishes(
    tag: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    dish_service = DishService(db)
    return [dish_service.serialize_dish(dish) for dish in dish_service.get_public_dishes(tag)]

@router.get("/shared", response_model=List[DishWithIngredients])
async def get_shared_dishes(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Dishes other users have shared with the current user"""
    dish_service = DishService(db)
    return [dish_service.serialize_dish(dish) for dish in dish_service.get_shared_dishes(current_user.id)]

@router.get("/{dish_id}", response_model=DishWithIngredients)
async def get_dish(
    dish_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    dish_service = DishService(db)
    return dish_service.serialize_dish(dish_service.get_dish(dish_id, current_user.id))

@router.put("/{dish_id}", response_model=DishWithIngredients)
@limiter.limit(settings.DISH_RATE_LIMIT)
async def update_dish(
    dish_id: str,
    dish_update: DishUpdate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    dish_service = DishService(db)
    return dish_service.serialize_dish(dish_service.update_dish(dish_id, dish_update, current_user.id))

@router.delete("/{dish_id}")
@limiter.limit(settings.DISH_RATE_LIMIT)
async def delete_dish(
    dish_id: str,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    dish_service = DishService(db)
    dish_service.delete_dish(dish_id, current_user.id)
    return {"message": "Dish deleted successfully"}

@router.get("/{dish_id}/ingredients", response_model=List[DishIngredientSchema])
async def get_dish_ingredients(
    dish_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    dish_service = DishService(db)
    return [
        dish_service.serialize_dish_ingredient(item)
        for item in dish_service.get_dish_ingredients(dish_id, current_user.id)
    ]

@router.post("/{dish_id}/ingredients", response_model=DishIngredientSchema, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.DISH_RATE_LIMIT)
async def add_dish_ingredient(
    dish_id: str,
    item: DishIngredientCreate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    dish_service = DishService(db)
    return dish_service.serialize_dish_ingredient(
        dish_service.add_dish_ingredient(dish_id, item, current_user.id)
    )

@router.put("/{dish_id}/ingredients/{ingredient_id}", response_model=DishIngredientSchema)
@limiter.limit(settings.DISH_RATE_LIMIT)
async def update_dish_ingredient(
    dish_id: str,
    ingredient_id: str,
    item_update: DishIngredientUpdate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    dish_service = DishService(db)
    return dish_service.serialize_dish_ingredient(
        dish_service.update_dish_ingredient(dish_id, ingredient_id, item_update, current_user.id)
    )

@router.delete("/{dish_id}/ingredients/{ingredient_id}")
@limiter.limit(settings.DISH_RATE_LIMIT)
async def remove_dish_ingredient(
    dish_id: str,
    ingredient_id: str,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    dish_service = DishService(db)
    dish_service.remove_dish_ingredient(dish_id, ingredient_id, current_user.id)
    return {"message": "Ingredient removed from dish"}

@router.post("/{dish_id}/share", response_model=DishShareSchema, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.DISH_RATE_LIMIT)
async def share_dish(
    dish_id: str,
    share: DishShareCreate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    dish_service = DishService(db)
    return dish_service.share_dish(dish_id, share, current_user.id)

@router.get("/{dish_id}/share", response_model=List[DishShareSchema])
async def get_dish_shares(
    dish_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    dish_service = DishService(db)
    return dish_service.get_dish_shares(dish_id, current_user.id)

@router.get("/{dish_id}/tags", response_model=DishTags)
async def get_dish_tags(
    dish_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    dish_service = DishService(db)
    return dish_service.get_dish_tags(dish_id, current_user.id)

@router.post("/{dish_id}/tags", response_model=DishTagAdded, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.DISH_RATE_LIMIT)
async def add_dish_tag(
    dish_id: str,
    tag_data: DishTagCreate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    dish_service = DishService(db)
    return dish_service.add_dish_tag(dish_id, tag_data.tag, current_user.id)

@router.delete("/{dish_id}/tags/{tag}", response_model=DishTagRemoved)
@limiter.limit(settings.DISH_RATE_LIMIT)
async def remove_dish_tag(
    dish_id: str,
    tag: str,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    dish_service = DishService(db)
    return dish_service.remove_dish_tag(dish_id, tag, current_user.id)
