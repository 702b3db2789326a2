from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from app.models.enums import CustomizationType

class CustomizationOptionCreate(BaseModel):
    ingredient_id: str
    name: str = Field(..., min_length=1, max_length=255)
    default_quantity: Optional[float] = Field(None, ge=0)
    unit_id: Optional[str] = None
    display_order: int = 0

class CustomizationGroupCreate(BaseModel):
    dish_id: str
    name: str = Field(..., min_length=1, max_length=255)
    type: CustomizationType
    is_required: bool = False
    display_order: int = 0
    options: List[CustomizationOptionCreate] = []

class CustomizationOption(BaseModel):
    id: str
    ingredient_id: str
    ingredient_name: str
    name: str
    default_quantity: Optional[float] = None
    unit_id: Optional[str] = None
    unit_name: Optional[str] = None
    unit_abbreviation: Optional[str] = None
    display_order: int

class CustomizationGroup(BaseModel):
    id: str
    dish_id: str
    name: str
    type: CustomizationType
    is_required: bool
    display_order: int
    created_at: Optional[datetime] = None
    options: List[CustomizationOption] = []

class CustomizationGroupResponse(BaseModel):
    group: CustomizationGroup

class CustomizationGroupList(BaseModel):
    groups: List[CustomizationGroup]
