from sqlalchemy.orm import Session
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from typing import Any, Dict, List, Optional

from app.core.exceptions import ConstraintViolationError, ValidationError
from app.models.dish import Dish
from app.models.ingredient import Category
from app.schemas.ingredient import CategoryCreate, CategoryUpdate

class CategoryService:
    def __init__(self, db: Session):
        self.db = db

    def get_categories(self) -> List[Dict[str, Any]]:
        """Categories in display order, each with the number of dishes filed under it."""
        rows = (
            self.db.query(Category, func.count(Dish.id).label("dish_count"))
            .outerjoin(Dish, Dish.category_id == Category.id)
            .group_by(Category.id)
            .order_by(Category.display_order, Category.name)
            .all()
        )
        return [
            {
                "id": category.id,
                "name": category.name,
                "display_order": category.display_order,
                "created_at": category.created_at,
                "dish_count": dish_count
            }
            for category, dish_count in rows
        ]

    def get_category(self, category_id: str) -> Optional[Category]:
        return self.db.query(Category).filter(Category.id == category_id).first()

    def _commit(self):
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConstraintViolationError("A category with this name already exists")

    def create_category(self, category_data: CategoryCreate) -> Category:
        category = Category(**category_data.model_dump())
        self.db.add(category)
        self._commit()
        self.db.refresh(category)
        return category

    def update_category(self, category_id: str, category_update: CategoryUpdate) -> Optional[Category]:
        category = self.get_category(category_id)
        if not category:
            return None

        update_data = category_update.model_dump(exclude_unset=True)
        if not update_data:
            raise ValidationError("No fields to update")

        for field, value in update_data.items():
            setattr(category, field, value)

        self._commit()
        self.db.refresh(category)
        return category

    def delete_category(self, category_id: str) -> bool:
        """Dishes in the category keep existing, uncategorised."""
        category = self.get_category(category_id)
        if not category:
            return False

        self.db.query(Dish).filter(Dish.category_id == category_id).update(
            {Dish.category_id: None}, synchronize_session=False
        )
        self.db.delete(category)
        self.db.commit()
        return True
