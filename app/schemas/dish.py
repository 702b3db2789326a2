from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from app.models.enums import MealType, DishVisibility, DishTagName

class DishBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    meal: MealType
    calories: Optional[int] = Field(None, ge=0)
    prep_time: Optional[int] = Field(None, ge=0)
    cook_time: Optional[int] = Field(None, ge=0)
    visibility: DishVisibility = DishVisibility.private
    category_id: Optional[str] = None

class DishIngredientCreate(BaseModel):
    ingredient_id: str
    quantity: float = Field(..., gt=0)
    unit_id: Optional[str] = None

class DishIngredientUpdate(BaseModel):
    quantity: float = Field(..., gt=0)
    unit_id: Optional[str] = None

class DishIngredient(BaseModel):
    ingredient_id: str
    ingredient_name: str
    quantity: float
    unit_id: Optional[str] = None
    unit_name: Optional[str] = None
    calories_per_unit: Optional[float] = None

class DishCreate(DishBase):
    ingredients: List[DishIngredientCreate] = []

class DishUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    meal: Optional[MealType] = None
    calories: Optional[int] = Field(None, ge=0)
    prep_time: Optional[int] = Field(None, ge=0)
    cook_time: Optional[int] = Field(None, ge=0)
    visibility: Optional[DishVisibility] = None
    category_id: Optional[str] = None

class Dish(DishBase):
    id: str
    owner_id: str
    effective_calories: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class DishWithIngredients(Dish):
    ingredients: List[DishIngredient] = []
    tags: List[DishTagName] = []

class DishShareCreate(BaseModel):
    user_email: str
    can_reshare: bool = False

class DishShare(BaseModel):
    id: str
    dish_id: str
    shared_by: str
    shared_with: str
    can_reshare: bool
    shared_date: Optional[datetime] = None

    class Config:
        from_attributes = True

class DishTagCreate(BaseModel):
    # Validated against DishTagName by the service for a readable error
    tag: Optional[str] = None

class DishTags(BaseModel):
    dish_id: str
    dish_name: str
    tags: List[DishTagName]
    total_tags: int

class DishTagAdded(BaseModel):
    dish_id: str
    dish_name: str
    added_tag: DishTagName
    all_tags: List[DishTagName]

class DishTagRemoved(BaseModel):
    dish_id: str
    dish_name: str
    removed_tag: DishTagName
    remaining_tags: List[DishTagName]
