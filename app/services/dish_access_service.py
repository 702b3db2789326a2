from sqlalchemy.orm import Session
from app.core.exceptions import NotFoundError, AccessDeniedError
from app.models.dish import Dish, DishShare
from app.models.enums import DishVisibility

class DishAccessService:
    """Decides whether a user may reference a dish"""

    def __init__(self, db: Session):
        self.db = db

    def user_has_access(self, user_id: str, dish_id: str) -> bool:
        """Owner, then public visibility, then an explicit share. Cheapest check first."""
        owned = self.db.query(Dish.id).filter(
            Dish.id == dish_id, Dish.owner_id == user_id
        ).first()
        if owned:
            return True

        public = self.db.query(Dish.id).filter(
            Dish.id == dish_id, Dish.visibility == DishVisibility.public
        ).first()
        if public:
            return True

        shared = self.db.query(DishShare.id).filter(
            DishShare.dish_id == dish_id, DishShare.shared_with == user_id
        ).first()
        return shared is not None

    def get_accessible_dish(self, user_id: str, dish_id: str) -> Dish:
        """
        Load a dish the user is allowed to reference.

        Raises:
            NotFoundError: the dish does not exist
            AccessDeniedError: the dish exists but is not visible to the user
        """
        dish = self.db.query(Dish).filter(Dish.id == dish_id).first()
        if not dish:
            raise NotFoundError("Dish not found")
        if not self.user_has_access(user_id, dish_id):
            raise AccessDeniedError("No access to this dish")
        return dish
