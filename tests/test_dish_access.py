import pytest

from app.core.exceptions import AccessDeniedError, NotFoundError
from app.models.dish import DishShare
from app.models.enums import DishVisibility
from app.services.dish_access_service import DishAccessService


def test_owner_always_has_access(db, user, make_dish):
    """The owner can reference a private dish."""
    dish = make_dish(user, "Secret Stew")
    assert DishAccessService(db).user_has_access(user.id, dish.id)


def test_private_dish_hidden_from_other_users(db, user, other_user, make_dish):
    """A private dish without a share row is invisible to everyone else."""
    dish = make_dish(user, "Secret Stew")
    assert not DishAccessService(db).user_has_access(other_user.id, dish.id)


def test_share_grants_access(db, user, other_user, make_dish):
    """Sharing a dish makes it accessible to the recipient only."""
    dish = make_dish(user, "Secret Stew")
    db.add(DishShare(dish_id=dish.id, shared_by=user.id, shared_with=other_user.id))
    db.commit()

    access = DishAccessService(db)
    assert access.user_has_access(other_user.id, dish.id)


def test_public_dish_accessible_without_share(db, user, other_user, make_dish):
    """Public visibility opens the dish to every user."""
    dish = make_dish(user, "Open Omelette", visibility=DishVisibility.public)
    assert DishAccessService(db).user_has_access(other_user.id, dish.id)


def test_get_accessible_dish_distinguishes_missing_and_denied(db, user, other_user, make_dish):
    dish = make_dish(user, "Secret Stew")
    access = DishAccessService(db)

    with pytest.raises(NotFoundError):
        access.get_accessible_dish(user.id, "missing-dish")
    with pytest.raises(AccessDeniedError):
        access.get_accessible_dish(other_user.id, dish.id)
    assert access.get_accessible_dish(user.id, dish.id).id == dish.id
