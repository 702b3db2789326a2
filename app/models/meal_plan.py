from sqlalchemy import Column, String, Text, Date, DateTime, ForeignKey, Integer, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.utils.id_utils import generate_id

class MealPlan(Base):
    """Order-driven plan for one user, date and meal"""
    __tablename__ = "meal_plans"
    __table_args__ = (
        UniqueConstraint('user_name', 'date', 'meal_name', name='uq_meal_plans_user_date_meal'),
    )

    id = Column(String, primary_key=True, default=generate_id)
    user_name = Column(String, nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    meal_name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    items = relationship("MealItem", back_populates="meal_plan", cascade="all, delete-orphan")

class MealItem(Base):
    __tablename__ = "meal_items"

    id = Column(String, primary_key=True, default=generate_id)
    meal_plan_id = Column(String, ForeignKey('meal_plans.id', ondelete='CASCADE'), nullable=False, index=True)
    dish_id = Column(String, ForeignKey('dishes.id', ondelete='RESTRICT'), nullable=False, index=True)
    servings = Column(Integer, nullable=False, default=1)
    notes = Column(Text)
    customizations = Column(JSON)

    meal_plan = relationship("MealPlan", back_populates="items")
    dish = relationship("Dish")
