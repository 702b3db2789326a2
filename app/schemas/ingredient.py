from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime

class IngredientUnitBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    abbreviation: Optional[str] = Field(None, max_length=20)

class IngredientUnitCreate(IngredientUnitBase):
    pass

class IngredientUnit(IngredientUnitBase):
    id: str

    model_config = {"from_attributes": True}

class IngredientBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    unit: Optional[str] = None
    default_unit_id: Optional[str] = None
    category: Optional[str] = None
    calories_per_unit: Optional[float] = Field(None, ge=0)

class IngredientCreate(IngredientBase):
    # Defaults to a slug of the name; shared by all translations of one ingredient
    ingredient_key: Optional[str] = None
    language_code: Optional[str] = None

class Ingredient(IngredientBase):
    id: str
    ingredient_key: str
    language_code: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Category name")
    display_order: Optional[int] = 0

class CategoryCreate(CategoryBase):
    pass

class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    display_order: Optional[int] = None

class Category(CategoryBase):
    id: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

class CategoryWithCount(Category):
    dish_count: int = 0

class IngredientsByCategory(BaseModel):
    categories: Dict[str, List[Ingredient]]
