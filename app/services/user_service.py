from sqlalchemy.orm import Session
from typing import Optional
import logging

from app.core.exceptions import ConstraintViolationError
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate
from app.services.meal_slot_service import MealSlotService

logger = logging.getLogger(__name__)

class UserService:
    def __init__(self, db: Session):
        self.db = db

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_auth_subject(self, auth_subject: str) -> Optional[User]:
        return self.db.query(User).filter(User.auth_subject == auth_subject).first()

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def create_user(self, user_data: UserCreate) -> User:
        """Create the user together with the empty weekly plan and its 7 days."""
        user = User(**user_data.model_dump())
        self.db.add(user)
        self.db.flush()

        MealSlotService(self.db).initialize_user_plan(user.id)

        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Created user {user.id} for subject {user.auth_subject}")
        return user

    def update_user(self, user_id: str, user_update: UserUpdate) -> Optional[User]:
        user = self.get_user_by_id(user_id)
        if not user:
            return None

        update_data = user_update.model_dump(exclude_unset=True)
        username = update_data.get("username")
        if username and username != user.username and self.get_user_by_username(username):
            raise ConstraintViolationError("Username already taken")

        for field, value in update_data.items():
            setattr(user, field, value)

        self.db.commit()
        self.db.refresh(user)
        return user
