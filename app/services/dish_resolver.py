from abc import ABC, abstractmethod
from typing import Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import ValidationError
from app.models.dish import Dish


class DishResolver(ABC):
    """Matches the free-text dish name of an order to a catalog dish"""

    def __init__(self, db: Session):
        self.db = db

    @abstractmethod
    def resolve(self, dish_name: str) -> Optional[Dish]:
        """Return the matching dish, or None when nothing matches"""
        pass


class SubstringDishResolver(DishResolver):
    """Case-insensitive substring match; the first dish by name wins"""

    def resolve(self, dish_name: str) -> Optional[Dish]:
        if not dish_name or not dish_name.strip():
            return None
        pattern = f"%{dish_name.strip().lower()}%"
        return (
            self.db.query(Dish)
            .filter(func.lower(Dish.name).like(pattern))
            .order_by(Dish.name, Dish.id)
            .first()
        )


class ExactDishResolver(DishResolver):
    """Case-insensitive whole-name match"""

    def resolve(self, dish_name: str) -> Optional[Dish]:
        if not dish_name or not dish_name.strip():
            return None
        return (
            self.db.query(Dish)
            .filter(func.lower(Dish.name) == dish_name.strip().lower())
            .order_by(Dish.id)
            .first()
        )


DISH_RESOLVERS = {
    "substring": SubstringDishResolver,
    "exact": ExactDishResolver,
}


def get_dish_resolver(db: Session, strategy: Optional[str] = None) -> DishResolver:
    strategy = strategy or settings.MENU_DISH_MATCH_STRATEGY
    resolver_class = DISH_RESOLVERS.get(strategy)
    if resolver_class is None:
        raise ValidationError(f"Unknown dish match strategy: {strategy}")
    return resolver_class(db)
