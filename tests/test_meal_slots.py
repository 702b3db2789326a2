import pytest

from app.core.exceptions import NotFoundError, ValidationError
from app.models.weekly_plan import DailyMealPlan, MealSlot, MealSlotDish, WeeklyMealPlan
from app.services.meal_slot_service import MealSlotService
from app.services.weekly_view import organize_slot_plan


def test_new_user_gets_seven_daily_plans(db, user):
    """Creating a user also creates the weekly plan with days 1-7."""
    weekly_plan = db.query(WeeklyMealPlan).filter(WeeklyMealPlan.user_id == user.id).one()
    days = [day.day_of_week for day in weekly_plan.days]
    assert days == [1, 2, 3, 4, 5, 6, 7]


def test_adding_same_dish_twice_overwrites_serving_size(db, user, make_dish):
    """Slot assignment is an upsert: one row, last serving size wins."""
    dish = make_dish(user, "Lentil Soup")
    service = MealSlotService(db)

    service.add_dish_to_slot(user.id, 1, "lunch", dish.id, serving_size=1)
    service.add_dish_to_slot(user.id, 1, "lunch", dish.id, serving_size=2)

    rows = db.query(MealSlotDish).filter(MealSlotDish.dish_id == dish.id).all()
    assert len(rows) == 1
    assert rows[0].serving_size == 2
    assert db.query(MealSlot).count() == 1


def test_slot_is_created_with_default_order(db, user, make_dish):
    dish = make_dish(user, "Porridge")
    MealSlotService(db).add_dish_to_slot(user.id, 3, "breakfast", dish.id)

    slot = db.query(MealSlot).one()
    assert slot.slot_order == 1
    assert slot.meal_type.value == "breakfast"


@pytest.mark.parametrize("day, meal_type, serving_size, message", [
    (0, "lunch", 1.0, "Invalid day of week (must be 1-7)"),
    (8, "lunch", 1.0, "Invalid day of week (must be 1-7)"),
    (1, "brunch", 1.0, "Invalid meal type"),
    (1, "snack", 1.0, "Invalid meal type"),
    (1, "lunch", 0, "Serving size must be greater than 0"),
])
def test_invalid_slot_requests_are_rejected_before_writing(db, user, make_dish, day, meal_type, serving_size, message):
    dish = make_dish(user, "Porridge")

    with pytest.raises(ValidationError) as exc_info:
        MealSlotService(db).add_dish_to_slot(user.id, day, meal_type, dish.id, serving_size=serving_size)

    assert exc_info.value.message.startswith(message)
    assert db.query(MealSlot).count() == 0


def test_missing_daily_plan_is_not_created_lazily(db, user, make_dish):
    dish = make_dish(user, "Porridge")
    db.query(DailyMealPlan).filter(DailyMealPlan.day_of_week == 5).delete()
    db.commit()

    with pytest.raises(NotFoundError):
        MealSlotService(db).add_dish_to_slot(user.id, 5, "dinner", dish.id)
    assert db.query(DailyMealPlan).count() == 6


def test_remove_dish_from_slot(db, user, make_dish):
    dish = make_dish(user, "Porridge")
    service = MealSlotService(db)
    service.add_dish_to_slot(user.id, 2, "breakfast", dish.id)

    assert service.remove_dish_from_slot(user.id, 2, "breakfast", dish.id) is True
    assert service.remove_dish_from_slot(user.id, 2, "breakfast", dish.id) is False


def test_user_plan_rows_feed_the_slot_week(db, user, make_dish):
    soup = make_dish(user, "Lentil Soup")
    cake = make_dish(user, "Carrot Cake")
    service = MealSlotService(db)
    service.add_dish_to_slot(user.id, 1, "lunch", soup.id, serving_size=2)
    service.add_dish_to_slot(user.id, 7, "dessert", cake.id)

    week = organize_slot_plan(service.get_user_plan_rows(user.id))

    assert sorted(week) == [1, 2, 3, 4, 5, 6, 7]
    assert week[1]["lunch"][0]["dish_name"] == "Lentil Soup"
    assert week[1]["lunch"][0]["serving_size"] == 2
    assert week[7]["dessert"][0]["dish_id"] == cake.id
    assert week[4] == {"breakfast": [], "lunch": [], "dinner": [], "dessert": []}
