from fastapi import APIRouter, Depends, HTTPException, status, Query, Request
from sqlalchemy.orm import Session
from typing import List, Optional
from app.core.database import get_db
from app.core.config import settings
from app.api.auth.auth import get_current_user
from app.models.user import User
from app.schemas.ingredient import (
    Ingredient as IngredientSchema, IngredientCreate,
    IngredientUnit as IngredientUnitSchema, IngredientUnitCreate, IngredientsByCategory
)
from app.services.ingredient_service import IngredientService
from app.middleware.rate_limit import limiter

router = APIRouter()

@router.get("", response_model=List[IngredientSchema])
async def get_ingredients(
    language: Optional[str] = Query(None, description="Language code, defaults to DEFAULT_LANGUAGE"),
    q: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    ingredient_service = IngredientService(db)
    return ingredient_service.get_ingredients(language_code=language, search=q, category=category)

@router.post("", response_model=IngredientSchema, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.CATALOG_RATE_LIMIT)
async def create_ingredient(
    ingredient: IngredientCreate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    ingredient_service = IngredientService(db)
    return ingredient_service.create_ingredient(ingredient)

@router.get("/categories", response_model=IngredientsByCategory)
async def get_ingredients_by_category(
    language: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    ingredient_service = IngredientService(db)
    return {"categories": ingredient_service.get_ingredients_by_category(language)}

@router.get("/units", response_model=List[IngredientUnitSchema])
async def get_units(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    ingredient_service = IngredientService(db)
    return ingredient_service.get_units()

@router.post("/units", response_model=IngredientUnitSchema, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.CATALOG_RATE_LIMIT)
async def create_unit(
    unit: IngredientUnitCreate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    ingredient_service = IngredientService(db)
    return ingredient_service.create_unit(unit)

@router.get("/key/{ingredient_key}", response_model=IngredientSchema)
async def get_ingredient_by_key(
    ingredient_key: str,
    language: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    ingredient_service = IngredientService(db)
    return ingredient_service.get_ingredient_by_key(ingredient_key, language)

@router.get("/{ingredient_id}", response_model=IngredientSchema)
async def get_ingredient(
    ingredient_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    ingredient_service = IngredientService(db)
    ingredient = ingredient_service.get_ingredient(ingredient_id)
    if not ingredient:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Ingredient not found"
        )
    return ingredient
