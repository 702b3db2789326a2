from sqlalchemy.orm import Session, joinedload
from typing import Any, Dict, List, Optional
import logging

from app.core.exceptions import NotFoundError
from app.models.customization import CustomizationGroup, CustomizationOption
from app.models.dish import Dish
from app.models.ingredient import Ingredient, IngredientUnit
from app.schemas.customization import CustomizationGroupCreate
from app.services.dish_access_service import DishAccessService
from app.services.dish_service import DishService

logger = logging.getLogger(__name__)

class CustomizationService:
    """Choices a diner can make on a dish, each option backed by an ingredient"""

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(CustomizationGroup).options(
            joinedload(CustomizationGroup.options).joinedload(CustomizationOption.ingredient),
            joinedload(CustomizationGroup.options).joinedload(CustomizationOption.unit)
        )

    def get_groups(self, user_id: str, dish_id: Optional[str] = None) -> List[CustomizationGroup]:
        """Groups of one visible dish, or of every dish the user owns."""
        query = self._query()
        if dish_id:
            DishAccessService(self.db).get_accessible_dish(user_id, dish_id)
            query = query.filter(CustomizationGroup.dish_id == dish_id)
        else:
            query = query.join(Dish, Dish.id == CustomizationGroup.dish_id).filter(Dish.owner_id == user_id)
        return query.order_by(CustomizationGroup.display_order, CustomizationGroup.name).all()

    def get_group(self, group_id: str) -> CustomizationGroup:
        group = self._query().filter(CustomizationGroup.id == group_id).first()
        if not group:
            raise NotFoundError("Customization group not found")
        return group

    def create_group(self, group_data: CustomizationGroupCreate, user_id: str) -> CustomizationGroup:
        """
        Create a group and its options in one transaction.

        Raises:
            NotFoundError: unknown dish, ingredient or unit
            AccessDeniedError: the dish belongs to someone else
        """
        DishService(self.db).get_owned_dish(group_data.dish_id, user_id)

        for option in group_data.options:
            if not self.db.query(Ingredient.id).filter(Ingredient.id == option.ingredient_id).first():
                raise NotFoundError("Ingredient not found")
            if option.unit_id and not self.db.query(IngredientUnit.id).filter(
                IngredientUnit.id == option.unit_id
            ).first():
                raise NotFoundError("Unit not found")

        group = CustomizationGroup(**group_data.model_dump(exclude={'options'}))
        self.db.add(group)
        self.db.flush()

        for option in group_data.options:
            self.db.add(CustomizationOption(**option.model_dump(), group_id=group.id))

        self.db.commit()
        logger.info(f"User {user_id} added customization group {group.id} to dish {group.dish_id}")
        return self.get_group(group.id)

    def delete_group(self, group_id: str, user_id: str) -> bool:
        group = self.get_group(group_id)
        DishService(self.db).get_owned_dish(group.dish_id, user_id)
        self.db.delete(group)
        self.db.commit()
        return True

    @staticmethod
    def serialize_group(group: CustomizationGroup) -> Dict[str, Any]:
        options = sorted(group.options, key=lambda option: (option.display_order, option.name))
        return {
            "id": group.id,
            "dish_id": group.dish_id,
            "name": group.name,
            "type": group.type,
            "is_required": group.is_required,
            "display_order": group.display_order,
            "created_at": group.created_at,
            "options": [
                {
                    "id": option.id,
                    "ingredient_id": option.ingredient_id,
                    "ingredient_name": option.ingredient.name,
                    "name": option.name,
                    "default_quantity": option.default_quantity,
                    "unit_id": option.unit_id,
                    "unit_name": option.unit.name if option.unit else None,
                    "unit_abbreviation": option.unit.abbreviation if option.unit else None,
                    "display_order": option.display_order
                }
                for option in options
            ]
        }
