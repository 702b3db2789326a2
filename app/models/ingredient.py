from sqlalchemy import Column, String, Float, Integer, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.utils.id_utils import generate_id

class IngredientUnit(Base):
    __tablename__ = "ingredient_units"

    id = Column(String, primary_key=True, default=generate_id)
    name = Column(String, unique=True, nullable=False)
    abbreviation = Column(String)

class Ingredient(Base):
    __tablename__ = "ingredients"
    __table_args__ = (
        # One row per language for the same real-world ingredient
        UniqueConstraint('ingredient_key', 'language_code', name='uq_ingredients_key_language'),
        UniqueConstraint('name', 'language_code', name='uq_ingredients_name_language'),
        CheckConstraint('calories_per_unit >= 0', name='ck_ingredients_calories_non_negative'),
    )

    id = Column(String, primary_key=True, default=generate_id)
    ingredient_key = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    unit = Column(String)
    default_unit_id = Column(String, ForeignKey('ingredient_units.id'), nullable=True)
    category = Column(String, index=True)
    calories_per_unit = Column(Float)
    language_code = Column(String, nullable=False, default='en', index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    default_unit = relationship("IngredientUnit")

class Category(Base):
    """Menu category used to group dishes for ordering"""
    __tablename__ = "categories"

    id = Column(String, primary_key=True, default=generate_id)
    name = Column(String, unique=True, nullable=False)
    display_order = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    dishes = relationship("Dish", back_populates="category")
