from sqlalchemy.orm import Session
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from typing import Dict, List, Optional
import logging
import re

from app.core.config import settings
from app.core.exceptions import ConstraintViolationError, NotFoundError, ValidationError
from app.models.ingredient import Ingredient, IngredientUnit
from app.schemas.ingredient import IngredientCreate, IngredientUnitCreate

logger = logging.getLogger(__name__)

INGREDIENT_CATEGORIES = ("vegetable", "meat", "dairy", "grain", "spice", "fruit", "other")

def ingredient_key_for(name: str) -> str:
    """Language-neutral key shared by all translations, e.g. ``"Olive Oil"`` -> ``"olive_oil"``."""
    return re.sub(r'\s+', '_', name.strip().lower())

class IngredientService:
    def __init__(self, db: Session):
        self.db = db

    def _language(self, language_code: Optional[str]) -> str:
        language = language_code or settings.DEFAULT_LANGUAGE
        if language not in settings.SUPPORTED_LANGUAGES:
            raise ValidationError(
                f"Unsupported language. Supported: {', '.join(settings.SUPPORTED_LANGUAGES)}"
            )
        return language

    def get_ingredients(
        self,
        language_code: Optional[str] = None,
        search: Optional[str] = None,
        category: Optional[str] = None
    ) -> List[Ingredient]:
        query = self.db.query(Ingredient).filter(
            Ingredient.language_code == self._language(language_code)
        )
        if search:
            query = query.filter(func.lower(Ingredient.name).like(f"%{search.strip().lower()}%"))
        if category:
            query = query.filter(Ingredient.category == category)
        return query.order_by(Ingredient.name).all()

    def get_ingredients_by_category(self, language_code: Optional[str] = None) -> Dict[str, List[Ingredient]]:
        """
        One language's ingredients keyed by category, each list sorted by name.
        Ingredients without a category are filed under ``"other"``.
        """
        categorized: Dict[str, List[Ingredient]] = {}
        for ingredient in self.get_ingredients(language_code=language_code):
            categorized.setdefault(ingredient.category or "other", []).append(ingredient)
        return dict(sorted(categorized.items()))

    def get_ingredient(self, ingredient_id: str) -> Optional[Ingredient]:
        return self.db.query(Ingredient).filter(Ingredient.id == ingredient_id).first()

    def get_ingredient_by_key(self, ingredient_key: str, language_code: Optional[str] = None) -> Ingredient:
        """The translation for ``language_code``, falling back to English."""
        language = self._language(language_code)
        for candidate in dict.fromkeys((language, "en")):
            ingredient = self.db.query(Ingredient).filter(
                Ingredient.ingredient_key == ingredient_key,
                Ingredient.language_code == candidate
            ).first()
            if ingredient:
                return ingredient
        raise NotFoundError("Ingredient not found")

    def create_ingredient(self, ingredient_data: IngredientCreate) -> Ingredient:
        if ingredient_data.category and ingredient_data.category not in INGREDIENT_CATEGORIES:
            raise ValidationError("Invalid ingredient category")
        if ingredient_data.default_unit_id and not self.get_unit(ingredient_data.default_unit_id):
            raise NotFoundError("Unit not found")

        language = self._language(ingredient_data.language_code)
        name = ingredient_data.name.strip().lower()

        existing = self.db.query(Ingredient.id).filter(
            Ingredient.name == name, Ingredient.language_code == language
        ).first()
        if existing:
            raise ConstraintViolationError("Ingredient already exists")

        ingredient = Ingredient(
            **ingredient_data.model_dump(exclude={'name', 'ingredient_key', 'language_code'}),
            name=name,
            ingredient_key=ingredient_data.ingredient_key or ingredient_key_for(name),
            language_code=language
        )
        self.db.add(ingredient)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConstraintViolationError("Ingredient already exists")

        self.db.refresh(ingredient)
        logger.info(f"Created ingredient {ingredient.ingredient_key} ({language})")
        return ingredient

    def get_units(self) -> List[IngredientUnit]:
        return self.db.query(IngredientUnit).order_by(IngredientUnit.name).all()

    def get_unit(self, unit_id: str) -> Optional[IngredientUnit]:
        return self.db.query(IngredientUnit).filter(IngredientUnit.id == unit_id).first()

    def create_unit(self, unit_data: IngredientUnitCreate) -> IngredientUnit:
        unit = IngredientUnit(**unit_data.model_dump())
        self.db.add(unit)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConstraintViolationError("Unit already exists")

        self.db.refresh(unit)
        return unit
