from datetime import date, datetime, timezone
from types import SimpleNamespace

import pytest

from app.core.exceptions import ValidationError
from app.models.enums import MealType, OrderStatus
from app.services.weekly_view import build_weekly_meal_plans, build_weekly_orders

WEEK = ["2024-01-08", "2024-01-09", "2024-01-10", "2024-01-11",
        "2024-01-12", "2024-01-13", "2024-01-14"]


def make_order(order_date, meal_type, dish_name, people_count, user_name="Alice"):
    return SimpleNamespace(
        id=f"{dish_name}-{people_count}",
        user_name=user_name,
        order_date=order_date,
        meal_type=MealType(meal_type),
        dish_name=dish_name,
        people_count=people_count,
        notes=None,
        status=OrderStatus.pending,
        created_at=None
    )


def test_weekly_orders_always_have_every_date_and_meal():
    """Empty input still yields 7 dates x 3 meals of empty lists."""
    weekly = build_weekly_orders("2024-01-08", [])

    assert weekly["week_start"] == "2024-01-08"
    assert list(weekly["days"]) == WEEK
    for meals in weekly["days"].values():
        assert meals == {"breakfast": [], "lunch": [], "dinner": []}


def test_weekly_orders_group_by_dish_name():
    orders = [
        make_order(date(2024, 1, 8), "lunch", "Curry", 3),
        make_order(date(2024, 1, 8), "lunch", "Curry", 2, user_name="Bob"),
        make_order(date(2024, 1, 8), "lunch", "Salad", 1),
        make_order(date(2024, 1, 10), "dinner", "Curry", 4),
    ]

    days = build_weekly_orders("2024-01-08", orders)["days"]

    lunch = days["2024-01-08"]["lunch"]
    assert [group["dish_name"] for group in lunch] == ["Curry", "Salad"]
    assert lunch[0]["total_people"] == 5
    assert lunch[0]["total_orders"] == 2
    assert lunch[0]["orders"][1]["user_name"] == "Bob"
    assert days["2024-01-10"]["dinner"][0]["total_people"] == 4
    assert days["2024-01-09"]["lunch"] == []


def test_weekly_orders_normalise_datetime_values():
    """A timestamp with an offset still lands on its calendar date."""
    stamped = datetime(2024, 1, 9, 23, 30, tzinfo=timezone.utc)
    days = build_weekly_orders("2024-01-08T00:00:00Z", [make_order(stamped, "dinner", "Curry", 2)])["days"]

    assert days["2024-01-09"]["dinner"][0]["dish_name"] == "Curry"


def make_plan(plan_date, meal_name, items=()):
    return SimpleNamespace(
        id=f"{plan_date}-{meal_name}",
        meal_name=meal_name,
        date=plan_date,
        created_at=None,
        items=list(items)
    )


def make_item(dish_name, servings=1):
    dish = SimpleNamespace(name=dish_name, effective_calories=250, prep_time=10)
    return SimpleNamespace(
        id=f"item-{dish_name}",
        dish_id=f"dish-{dish_name}",
        dish=dish,
        servings=servings,
        customizations=None,
        notes=None
    )


def test_weekly_meal_plans_keep_absent_meals_absent():
    """Only meals with a plan appear; a plan with no items is still present."""
    plans = [
        make_plan(date(2024, 1, 8), "lunch", [make_item("Soup", 2), make_item("Bread")]),
        make_plan(date(2024, 1, 9), "snack"),
    ]

    weekly = build_weekly_meal_plans("2024-01-08", plans)

    assert list(weekly["days"]) == WEEK
    assert set(weekly["days"]["2024-01-08"]) == {"lunch"}
    assert [item["dish_name"] for item in weekly["days"]["2024-01-08"]["lunch"]["items"]] == ["Bread", "Soup"]
    assert weekly["days"]["2024-01-09"]["snack"]["items"] == []
    assert weekly["days"]["2024-01-10"] == {}


def test_weekly_meal_plans_ignore_plans_outside_the_week():
    plans = [make_plan(date(2024, 1, 15), "dinner")]
    weekly = build_weekly_meal_plans("2024-01-08", plans)
    assert all(meals == {} for meals in weekly["days"].values())


def test_bad_week_start_is_rejected():
    with pytest.raises(ValidationError):
        build_weekly_orders("08/01/2024", [])


def test_weekly_meal_plans_drop_items_whose_dish_is_gone():
    dangling = make_item("Ghost")
    dangling.dish = None

    weekly = build_weekly_meal_plans("2024-01-08", [make_plan(date(2024, 1, 8), "dinner", [dangling, make_item("Stew")])])

    assert [item["dish_name"] for item in weekly["days"]["2024-01-08"]["dinner"]["items"]] == ["Stew"]
