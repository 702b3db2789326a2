from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.models.enums import customization_type_enum
from app.utils.id_utils import generate_id

class CustomizationGroup(Base):
    """A choice offered on a dish, e.g. "Protein" (single) or "Toppings" (multiple)"""
    __tablename__ = "customization_groups"

    id = Column(String, primary_key=True, default=generate_id)
    dish_id = Column(String, ForeignKey('dishes.id', ondelete='CASCADE'), nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(customization_type_enum, nullable=False)
    is_required = Column(Boolean, nullable=False, default=False)
    display_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    dish = relationship("Dish", back_populates="customization_groups")
    options = relationship("CustomizationOption", back_populates="group", cascade="all, delete-orphan")

class CustomizationOption(Base):
    __tablename__ = "customization_options"
    __table_args__ = (
        CheckConstraint('default_quantity >= 0', name='ck_customization_options_quantity_non_negative'),
    )

    id = Column(String, primary_key=True, default=generate_id)
    group_id = Column(String, ForeignKey('customization_groups.id', ondelete='CASCADE'), nullable=False, index=True)
    ingredient_id = Column(String, ForeignKey('ingredients.id', ondelete='CASCADE'), nullable=False)
    name = Column(String, nullable=False)
    default_quantity = Column(Float)
    unit_id = Column(String, ForeignKey('ingredient_units.id'), nullable=True)
    display_order = Column(Integer, nullable=False, default=0)

    group = relationship("CustomizationGroup", back_populates="options")
    ingredient = relationship("Ingredient")
    unit = relationship("IngredientUnit")
