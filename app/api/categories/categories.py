from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.orm import Session
from typing import List
from app.core.database import get_db
from app.core.config import settings
from app.api.auth.auth import get_current_user
from app.models.user import User
from app.schemas.ingredient import (
    Category as CategorySchema, CategoryCreate, CategoryUpdate, CategoryWithCount
)
from app.services.category_service import CategoryService
from app.middleware.rate_limit import limiter

router = APIRouter()

@router.get("", response_model=List[CategoryWithCount])
async def get_categories(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    category_service = CategoryService(db)
    return category_service.get_categories()

@router.post("", response_model=CategorySchema, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.CATALOG_RATE_LIMIT)
async def create_category(
    category: CategoryCreate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    category_service = CategoryService(db)
    return category_service.create_category(category)

@router.put("/{category_id}", response_model=CategorySchema)
@limiter.limit(settings.CATALOG_RATE_LIMIT)
async def update_category(
    category_id: str,
    category_update: CategoryUpdate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    category_service = CategoryService(db)
    category = category_service.update_category(category_id, category_update)
    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found"
        )
    return category

@router.delete("/{category_id}")
@limiter.limit(settings.CATALOG_RATE_LIMIT)
async def delete_category(
    category_id: str,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    category_service = CategoryService(db)
    success = category_service.delete_category(category_id)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found"
        )
    return {"message": "Category deleted successfully"}
