import os

# Configure before the app modules read settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-that-is-at-least-32-bytes-long"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ALLOWED_ORIGINS"] = "http://localhost:3000"

import pytest
from fastapi.testclient import TestClient

from app.core.database import Base, SessionLocal, engine
from app.core.security import create_access_token
from app.main import app
from app.models.dish import Dish, DishIngredient
from app.models.enums import DishVisibility, MealType
from app.models.ingredient import Ingredient, IngredientUnit
from app.schemas.user import UserCreate
from app.services.user_service import UserService


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(db):
    def _make_user(subject: str = "owner", email: str = None, name: str = None):
        return UserService(db).create_user(UserCreate(
            auth_subject=subject,
            email=email or f"{subject}@example.com",
            name=name
        ))
    return _make_user


@pytest.fixture
def user(make_user):
    return make_user("owner", name="Owner")


@pytest.fixture
def other_user(make_user):
    return make_user("stranger", name="Stranger")


def auth_headers_for(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.auth_subject)}"}


@pytest.fixture
def auth_headers(user):
    return auth_headers_for(user)


@pytest.fixture
def make_dish(db):
    def _make_dish(owner, name: str, meal: MealType = MealType.dinner,
                   visibility: DishVisibility = DishVisibility.private, calories: int = None):
        dish = Dish(owner_id=owner.id, name=name, meal=meal, visibility=visibility, calories=calories)
        db.add(dish)
        db.commit()
        db.refresh(dish)
        return dish
    return _make_dish


@pytest.fixture
def make_ingredient(db):
    def _make_ingredient(name: str, category: str = None, calories_per_unit: float = None,
                         default_unit: IngredientUnit = None):
        ingredient = Ingredient(
            ingredient_key=name.lower().replace(" ", "_"),
            name=name,
            category=category,
            calories_per_unit=calories_per_unit,
            default_unit_id=default_unit.id if default_unit else None
        )
        db.add(ingredient)
        db.commit()
        db.refresh(ingredient)
        return ingredient
    return _make_ingredient


@pytest.fixture
def make_unit(db):
    def _make_unit(name: str, abbreviation: str = None):
        unit = IngredientUnit(name=name, abbreviation=abbreviation)
        db.add(unit)
        db.commit()
        db.refresh(unit)
        return unit
    return _make_unit


@pytest.fixture
def add_ingredient_to_dish(db):
    def _add(dish, ingredient, quantity: float, unit=None):
        item = DishIngredient(
            dish_id=dish.id,
            ingredient_id=ingredient.id,
            quantity=quantity,
            unit_id=unit.id if unit else None
        )
        db.add(item)
        db.commit()
        return item
    return _add


@pytest.fixture
def headers_for():
    return auth_headers_for
