from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class UserBase(BaseModel):
    email: str
    name: Optional[str] = None

class UserCreate(UserBase):
    auth_subject: str

class UserUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=3, max_length=50)
    name: Optional[str] = None
    profile_public: Optional[bool] = None

class User(UserBase):
    id: str
    auth_subject: str
    username: Optional[str] = None
    profile_public: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CustomerSummary(BaseModel):
    user_name: str
    order_count: int
    last_order: Optional[datetime] = None

class CustomerCheck(BaseModel):
    """Whether a free-text customer name has ordered before"""
    exists: bool
    user_data: Optional[CustomerSummary] = None
