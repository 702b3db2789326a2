from fastapi import APIRouter, Depends, status, Query, Request
from sqlalchemy.orm import Session
from typing import Optional
from app.core.database import get_db
from app.core.config import settings
from app.api.auth.auth import get_current_user
from app.models.user import User
from app.schemas.customization import (
    CustomizationGroupCreate, CustomizationGroupResponse, CustomizationGroupList
)
from app.services.customization_service import CustomizationService
from app.middleware.rate_limit import limiter

router = APIRouter()

@router.get("", response_model=CustomizationGroupList)
async def get_customization_groups(
    dish_id: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    customization_service = CustomizationService(db)
    groups = customization_service.get_groups(current_user.id, dish_id)
    return {"groups": [customization_service.serialize_group(group) for group in groups]}

@router.post("", response_model=CustomizationGroupResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.DISH_RATE_LIMIT)
async def create_customization_group(
    group: CustomizationGroupCreate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    customization_service = CustomizationService(db)
    created = customization_service.create_group(group, current_user.id)
    return {"group": customization_service.serialize_group(created)}

@router.delete("/{group_id}")
@limiter.limit(settings.DISH_RATE_LIMIT)
async def delete_customization_group(
    group_id: str,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    customization_service = CustomizationService(db)
    customization_service.delete_group(group_id, current_user.id)
    return {"message": "Customization group deleted successfully"}
