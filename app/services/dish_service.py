from sqlalchemy.orm import Session, joinedload
from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError
from typing import Any, Dict, List, Optional
import logging

from app.core.exceptions import (
    AccessDeniedError, ConstraintViolationError, NotFoundError, ValidationError
)
from app.models.dish import Dish, DishIngredient, DishShare, DishTag
from app.models.enums import DishTagName, DishVisibility
from app.models.ingredient import Category, Ingredient, IngredientUnit
from app.models.meal_plan import MealItem
from app.models.user import User
from app.schemas.dish import (
    DishCreate, DishUpdate, DishIngredientCreate, DishIngredientUpdate, DishShareCreate
)
from app.services.dish_access_service import DishAccessService

logger = logging.getLogger(__name__)

class DishService:
    def __init__(self, db: Session):
        self.db = db
        self.access = DishAccessService(db)

    def _query(self):
        return self.db.query(Dish).options(
            joinedload(Dish.ingredients).joinedload(DishIngredient.ingredient),
            joinedload(Dish.ingredients).joinedload(DishIngredient.unit),
            joinedload(Dish.tags)
        )

    def get_user_dishes(self, user_id: str) -> List[Dish]:
        return self._query().filter(Dish.owner_id == user_id).order_by(Dish.name).all()

    def get_public_dishes(self, tag: Optional[str] = None) -> List[Dish]:
        query = self._query().filter(Dish.visibility == DishVisibility.public)
        if tag:
            query = query.join(DishTag, DishTag.dish_id == Dish.id).filter(
                DishTag.tag == self._validate_tag(tag)
            )
        return query.order_by(Dish.name).all()

    def get_shared_dishes(self, user_id: str) -> List[Dish]:
        """Dishes other users shared with ``user_id``"""
        return self._query().join(DishShare, DishShare.dish_id == Dish.id).filter(
            DishShare.shared_with == user_id
        ).order_by(Dish.name).all()

    def get_dish(self, dish_id: str, user_id: str) -> Dish:
        return self.access.get_accessible_dish(user_id, dish_id)

    def get_owned_dish(self, dish_id: str, user_id: str) -> Dish:
        dish = self.db.query(Dish).filter(Dish.id == dish_id).first()
        if not dish:
            raise NotFoundError("Dish not found")
        if dish.owner_id != user_id:
            raise AccessDeniedError("Can only modify your own dishes")
        return dish

    def _ensure_category(self, category_id: Optional[str]):
        if category_id and not self.db.query(Category.id).filter(Category.id == category_id).first():
            raise NotFoundError("Category not found")

    def _validate_ingredient(self, ingredient_id: str, unit_id: Optional[str]):
        if not self.db.query(Ingredient.id).filter(Ingredient.id == ingredient_id).first():
            raise NotFoundError("Ingredient not found")
        if unit_id and not self.db.query(IngredientUnit.id).filter(IngredientUnit.id == unit_id).first():
            raise NotFoundError("Unit not found")

    def create_dish(self, dish_data: DishCreate, user_id: str) -> Dish:
        self._ensure_category(dish_data.category_id)

        seen = set()
        for item in dish_data.ingredients:
            if item.ingredient_id in seen:
                raise ValidationError("Each ingredient can only appear once in a dish")
            seen.add(item.ingredient_id)
            self._validate_ingredient(item.ingredient_id, item.unit_id)

        dish = Dish(**dish_data.model_dump(exclude={'ingredients'}), owner_id=user_id)
        self.db.add(dish)
        self.db.flush()

        for item in dish_data.ingredients:
            self.db.add(DishIngredient(**item.model_dump(), dish_id=dish.id))

        self.db.commit()
        self.db.refresh(dish)
        logger.info(f"User {user_id} created dish {dish.id} ({dish.name})")
        return dish

    def update_dish(self, dish_id: str, dish_update: DishUpdate, user_id: str) -> Dish:
        dish = self.get_owned_dish(dish_id, user_id)

        update_data = dish_update.model_dump(exclude_unset=True)
        if not update_data:
            raise ValidationError("No fields to update")
        if 'category_id' in update_data:
            self._ensure_category(update_data['category_id'])

        for field, value in update_data.items():
            setattr(dish, field, value)

        self.db.commit()
        self.db.refresh(dish)
        return dish

    def delete_dish(self, dish_id: str, user_id: str) -> bool:
        """
        Delete an owned dish with its ingredients, shares and slot entries.

        Raises:
            ConstraintViolationError: generated menus still serve the dish
        """
        dish = self.get_owned_dish(dish_id, user_id)

        in_use = self.db.query(MealItem.id).filter(MealItem.dish_id == dish_id).first()
        if in_use:
            raise ConstraintViolationError("Dish is used in meal plans and cannot be deleted")

        self.db.delete(dish)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConstraintViolationError("Dish is used in meal plans and cannot be deleted")
        logger.info(f"User {user_id} deleted dish {dish_id}")
        return True

    def get_dish_ingredients(self, dish_id: str, user_id: str) -> List[DishIngredient]:
        dish = self.get_dish(dish_id, user_id)
        return sorted(dish.ingredients, key=lambda item: item.ingredient.name)

    def _get_dish_ingredient(self, dish_id: str, ingredient_id: str) -> Optional[DishIngredient]:
        return self.db.query(DishIngredient).filter(
            and_(DishIngredient.dish_id == dish_id, DishIngredient.ingredient_id == ingredient_id)
        ).first()

    def add_dish_ingredient(self, dish_id: str, item: DishIngredientCreate, user_id: str) -> DishIngredient:
        self.get_owned_dish(dish_id, user_id)
        self._validate_ingredient(item.ingredient_id, item.unit_id)

        if self._get_dish_ingredient(dish_id, item.ingredient_id):
            raise ConstraintViolationError(
                "Ingredient already exists in this dish. Use PUT to update quantity."
            )

        dish_ingredient = DishIngredient(**item.model_dump(), dish_id=dish_id)
        self.db.add(dish_ingredient)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConstraintViolationError("Ingredient already exists in this dish")

        self.db.refresh(dish_ingredient)
        return dish_ingredient

    def update_dish_ingredient(
        self,
        dish_id: str,
        ingredient_id: str,
        item_update: DishIngredientUpdate,
        user_id: str
    ) -> DishIngredient:
        self.get_owned_dish(dish_id, user_id)
        dish_ingredient = self._get_dish_ingredient(dish_id, ingredient_id)
        if not dish_ingredient:
            raise NotFoundError("Ingredient not found in this dish")
        if item_update.unit_id:
            self._validate_ingredient(ingredient_id, item_update.unit_id)

        dish_ingredient.quantity = item_update.quantity
        if 'unit_id' in item_update.model_fields_set:
            dish_ingredient.unit_id = item_update.unit_id

        self.db.commit()
        self.db.refresh(dish_ingredient)
        return dish_ingredient

    def remove_dish_ingredient(self, dish_id: str, ingredient_id: str, user_id: str) -> bool:
        self.get_owned_dish(dish_id, user_id)
        dish_ingredient = self._get_dish_ingredient(dish_id, ingredient_id)
        if not dish_ingredient:
            raise NotFoundError("Ingredient not found in this dish")

        self.db.delete(dish_ingredient)
        self.db.commit()
        return True

    @staticmethod
    def _validate_tag(tag: Optional[str]) -> DishTagName:
        try:
            return DishTagName((tag or "").strip().lower())
        except ValueError:
            raise ValidationError(
                f"Invalid tag. Valid tags are: {', '.join(name.value for name in DishTagName)}"
            )

    def _tag_names(self, dish_id: str) -> List[DishTagName]:
        rows = self.db.query(DishTag.tag).filter(DishTag.dish_id == dish_id).order_by(DishTag.tag).all()
        return [row.tag for row in rows]

    def get_dish_tags(self, dish_id: str, user_id: str) -> Dict[str, Any]:
        dish = self.get_dish(dish_id, user_id)
        tags = self._tag_names(dish.id)
        return {"dish_id": dish.id, "dish_name": dish.name, "tags": tags, "total_tags": len(tags)}

    def add_dish_tag(self, dish_id: str, tag: Optional[str], user_id: str) -> Dict[str, Any]:
        """
        Tag an owned dish.

        Raises:
            ValidationError: missing tag or one outside DishTagName
            ConstraintViolationError: the dish already has the tag
        """
        dish = self.get_owned_dish(dish_id, user_id)
        if not tag:
            raise ValidationError("Tag is required")
        name = self._validate_tag(tag)

        if name in self._tag_names(dish_id):
            raise ConstraintViolationError("Tag already exists for this dish")

        self.db.add(DishTag(dish_id=dish_id, tag=name))
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConstraintViolationError("Tag already exists for this dish")

        logger.info(f"User {user_id} tagged dish {dish_id} as {name.value}")
        return {
            "dish_id": dish.id,
            "dish_name": dish.name,
            "added_tag": name,
            "all_tags": self._tag_names(dish_id)
        }

    def remove_dish_tag(self, dish_id: str, tag: str, user_id: str) -> Dict[str, Any]:
        name = self._validate_tag(tag)
        dish = self.get_owned_dish(dish_id, user_id)

        dish_tag = self.db.query(DishTag).filter(
            DishTag.dish_id == dish_id, DishTag.tag == name
        ).first()
        if not dish_tag:
            raise NotFoundError("Tag not found for this dish")

        self.db.delete(dish_tag)
        self.db.commit()
        return {
            "dish_id": dish.id,
            "dish_name": dish.name,
            "removed_tag": name,
            "remaining_tags": self._tag_names(dish_id)
        }

    def share_dish(self, dish_id: str, share_data: DishShareCreate, user_id: str) -> DishShare:
        """
        Share an owned dish with another user, found by email.

        A private dish becomes ``shared``; public dishes keep their visibility.
        """
        dish = self.db.query(Dish).filter(Dish.id == dish_id).first()
        if not dish:
            raise NotFoundError("Dish not found")
        if dish.owner_id != user_id:
            raise AccessDeniedError("Can only share your own dishes")

        if not share_data.user_email:
            raise ValidationError("User email is required")

        target = self.db.query(User).filter(User.email == share_data.user_email).first()
        if not target:
            raise NotFoundError("User not found")
        if target.id == user_id:
            raise ValidationError("Cannot share dish with yourself")

        existing = self.db.query(DishShare.id).filter(
            DishShare.dish_id == dish_id, DishShare.shared_with == target.id
        ).first()
        if existing:
            raise ConstraintViolationError("Dish is already shared with this user")

        share = DishShare(
            dish_id=dish_id,
            shared_by=user_id,
            shared_with=target.id,
            can_reshare=share_data.can_reshare
        )
        self.db.add(share)
        if dish.visibility == DishVisibility.private:
            dish.visibility = DishVisibility.shared

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConstraintViolationError("Dish is already shared with this user")

        self.db.refresh(share)
        logger.info(f"User {user_id} shared dish {dish_id} with {target.id}")
        return share

    def get_dish_shares(self, dish_id: str, user_id: str) -> List[DishShare]:
        dish = self.db.query(Dish).filter(Dish.id == dish_id).first()
        if not dish:
            raise NotFoundError("Dish not found")
        if dish.owner_id != user_id:
            raise AccessDeniedError("Can only view sharing info for your own dishes")
        return self.db.query(DishShare).filter(DishShare.dish_id == dish_id).all()

    @staticmethod
    def serialize_dish_ingredient(item: DishIngredient) -> Dict[str, Any]:
        unit = item.unit or item.ingredient.default_unit
        return {
            "ingredient_id": item.ingredient_id,
            "ingredient_name": item.ingredient.name,
            "quantity": item.quantity,
            "unit_id": unit.id if unit else None,
            "unit_name": unit.name if unit else None,
            "calories_per_unit": item.ingredient.calories_per_unit
        }

    def serialize_dish(self, dish: Dish) -> Dict[str, Any]:
        return {
            "id": dish.id,
            "owner_id": dish.owner_id,
            "name": dish.name,
            "description": dish.description,
            "meal": dish.meal,
            "calories": dish.calories,
            "prep_time": dish.prep_time,
            "cook_time": dish.cook_time,
            "visibility": dish.visibility,
            "category_id": dish.category_id,
            "effective_calories": dish.effective_calories,
            "created_at": dish.created_at,
            "updated_at": dish.updated_at,
            "ingredients": [
                self.serialize_dish_ingredient(item)
                for item in sorted(dish.ingredients, key=lambda item: item.ingredient.name)
            ],
            "tags": [dish_tag.tag for dish_tag in dish.tags]
        }
