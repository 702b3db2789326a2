from pydantic import BaseModel
from typing import Optional, List, Dict

class ShoppingListItem(BaseModel):
    ingredient_id: str
    ingredient_name: str
    total_quantity: float
    unit_id: Optional[str] = None
    unit_name: Optional[str] = None
    unit_abbreviation: Optional[str] = None
    category: Optional[str] = None
    dishes: List[str] = []  # one entry per planned meal item using the ingredient

class ShoppingListResponse(BaseModel):
    week_start: str
    week_end: str
    total_items: int
    shopping_list: List[ShoppingListItem]
    summary_by_category: Dict[str, int]

class ShoppingListExportRequest(BaseModel):
    start_date: str
    export_format: str = "json"
