from sqlalchemy import Column, String, DateTime, Boolean
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.utils.id_utils import generate_id

class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=generate_id)
    auth_subject = Column(String, unique=True, nullable=False, index=True)  # token "sub" claim
    email = Column(String, unique=True, nullable=False, index=True)
    username = Column(String, unique=True, nullable=True, index=True)
    name = Column(String)
    profile_public = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    dishes = relationship("Dish", back_populates="owner")
    weekly_plan = relationship("WeeklyMealPlan", back_populates="user", uselist=False)
