from sqlalchemy import (
    Column, String, Text, Integer, Float, Boolean, DateTime, ForeignKey,
    UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.models.enums import DishVisibility, meal_type_enum, dish_visibility_enum, dish_tag_enum
from app.utils.id_utils import generate_id

class Dish(Base):
    __tablename__ = "dishes"
    __table_args__ = (
        CheckConstraint('calories >= 0', name='ck_dishes_calories_non_negative'),
    )

    id = Column(String, primary_key=True, default=generate_id)
    owner_id = Column(String, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    name = Column(String, nullable=False, index=True)
    description = Column(Text)
    meal = Column(meal_type_enum, nullable=False, index=True)
    calories = Column(Integer)  # stored override, see effective_calories
    prep_time = Column(Integer)
    cook_time = Column(Integer)
    visibility = Column(
        dish_visibility_enum,
        nullable=False,
        default=DishVisibility.private,
        index=True
    )
    category_id = Column(String, ForeignKey('categories.id', ondelete='SET NULL'), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    owner = relationship("User", back_populates="dishes")
    category = relationship("Category", back_populates="dishes")
    ingredients = relationship("DishIngredient", back_populates="dish", cascade="all, delete-orphan")
    shares = relationship("DishShare", back_populates="dish", cascade="all, delete-orphan")
    tags = relationship(
        "DishTag",
        back_populates="dish",
        cascade="all, delete-orphan",
        order_by="DishTag.tag"
    )
    customization_groups = relationship(
        "CustomizationGroup",
        back_populates="dish",
        cascade="all, delete-orphan"
    )

    @property
    def effective_calories(self):
        """Sum of ingredient calories when the dish has ingredients, else the stored value"""
        if not self.ingredients:
            return self.calories
        return sum(
            (item.ingredient.calories_per_unit or 0) * item.quantity
            for item in self.ingredients
        )

    def __repr__(self):
        return f"<Dish(id={self.id}, name={self.name}, owner_id={self.owner_id})>"

class DishIngredient(Base):
    __tablename__ = "dish_ingredients"
    __table_args__ = (
        CheckConstraint('quantity > 0', name='ck_dish_ingredients_quantity_positive'),
    )

    dish_id = Column(String, ForeignKey('dishes.id', ondelete='CASCADE'), primary_key=True)
    ingredient_id = Column(String, ForeignKey('ingredients.id', ondelete='CASCADE'), primary_key=True)
    quantity = Column(Float, nullable=False)
    unit_id = Column(String, ForeignKey('ingredient_units.id'), nullable=True)

    dish = relationship("Dish", back_populates="ingredients")
    ingredient = relationship("Ingredient")
    unit = relationship("IngredientUnit")

class DishShare(Base):
    __tablename__ = "dish_shares"
    __table_args__ = (
        UniqueConstraint('dish_id', 'shared_with', name='uq_dish_shares_dish_user'),
    )

    id = Column(String, primary_key=True, default=generate_id)
    dish_id = Column(String, ForeignKey('dishes.id', ondelete='CASCADE'), nullable=False)
    shared_by = Column(String, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    shared_with = Column(String, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    shared_date = Column(DateTime(timezone=True), server_default=func.now())
    can_reshare = Column(Boolean, nullable=False, default=False)

    dish = relationship("Dish", back_populates="shares")
    recipient = relationship("User", foreign_keys=[shared_with])

class DishTag(Base):
    __tablename__ = "dish_tags"

    dish_id = Column(String, ForeignKey('dishes.id', ondelete='CASCADE'), primary_key=True)
    tag = Column(dish_tag_enum, primary_key=True, index=True)

    dish = relationship("Dish", back_populates="tags")
