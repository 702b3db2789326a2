from sqlalchemy import (
    Column, String, Integer, Float, DateTime, ForeignKey, JSON,
    UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.models.enums import meal_type_enum
from app.utils.id_utils import generate_id

class WeeklyMealPlan(Base):
    """Per-user weekly container, created together with its 7 daily plans"""
    __tablename__ = "weekly_meal_plans"

    id = Column(String, primary_key=True, default=generate_id)
    user_id = Column(String, ForeignKey('users.id', ondelete='CASCADE'), unique=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="weekly_plan")
    days = relationship(
        "DailyMealPlan",
        back_populates="weekly_plan",
        cascade="all, delete-orphan",
        order_by="DailyMealPlan.day_of_week"
    )

class DailyMealPlan(Base):
    __tablename__ = "daily_meal_plans"
    __table_args__ = (
        UniqueConstraint('weekly_plan_id', 'day_of_week', name='uq_daily_meal_plans_week_day'),
        CheckConstraint('day_of_week >= 1 AND day_of_week <= 7', name='ck_daily_meal_plans_day_range'),
    )

    id = Column(String, primary_key=True, default=generate_id)
    weekly_plan_id = Column(String, ForeignKey('weekly_meal_plans.id', ondelete='CASCADE'), nullable=False)
    day_of_week = Column(Integer, nullable=False)

    weekly_plan = relationship("WeeklyMealPlan", back_populates="days")
    slots = relationship("MealSlot", back_populates="daily_plan", cascade="all, delete-orphan")

class MealSlot(Base):
    __tablename__ = "meal_slots"
    __table_args__ = (
        # Prevents duplicate slot creation for the same day and meal
        UniqueConstraint('daily_plan_id', 'meal_type', 'slot_order', name='uq_meal_slots_day_meal_order'),
    )

    id = Column(String, primary_key=True, default=generate_id)
    daily_plan_id = Column(String, ForeignKey('daily_meal_plans.id', ondelete='CASCADE'), nullable=False, index=True)
    meal_type = Column(meal_type_enum, nullable=False)
    slot_order = Column(Integer, nullable=False, default=1)

    daily_plan = relationship("DailyMealPlan", back_populates="slots")
    dishes = relationship("MealSlotDish", back_populates="slot", cascade="all, delete-orphan")

class MealSlotDish(Base):
    __tablename__ = "meal_slot_dishes"

    slot_id = Column(String, ForeignKey('meal_slots.id', ondelete='CASCADE'), primary_key=True)
    dish_id = Column(String, ForeignKey('dishes.id', ondelete='CASCADE'), primary_key=True)
    serving_size = Column(Float, nullable=False, default=1.0)
    customizations = Column(JSON)

    slot = relationship("MealSlot", back_populates="dishes")
    dish = relationship("Dish")
