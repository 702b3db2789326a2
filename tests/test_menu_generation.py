from datetime import date

import pytest

from app.core.exceptions import ConstraintViolationError, ValidationError
from app.models.enums import MealType, OrderStatus
from app.models.meal_plan import MealItem, MealPlan
from app.models.order import Order
from app.services.dish_resolver import ExactDishResolver, get_dish_resolver
from app.services.menu_generation_service import MenuGenerationService


@pytest.fixture
def make_order(db):
    def _make_order(dish_name, order_date=date(2024, 1, 8), meal_type=MealType.lunch,
                    people_count=3, user_name="Alice", status=OrderStatus.pending, notes=None):
        order = Order(
            user_name=user_name,
            order_date=order_date,
            meal_type=meal_type,
            dish_name=dish_name,
            people_count=people_count,
            status=status,
            notes=notes
        )
        db.add(order)
        db.commit()
        db.refresh(order)
        return order
    return _make_order


def test_alice_lunch_becomes_a_meal_plan(db, user, make_dish, make_order):
    """A substring match on the dish name materialises the order."""
    dish = make_dish(user, "Spicy Chicken Curry")
    order = make_order("chicken curry")

    result = MenuGenerationService(db).generate_menu("Alice", "2024-01-08", "2024-01-08", "day")

    assert result["summary"] == {"total_orders": 1, "total_meals_generated": 1, "total_people_served": 3}
    meal_plan = db.query(MealPlan).one()
    assert meal_plan.user_name == "Alice"
    assert meal_plan.date == date(2024, 1, 8)
    assert meal_plan.meal_name == "lunch"
    item = db.query(MealItem).one()
    assert item.dish_id == dish.id
    assert item.servings == 3
    assert item.notes == "Generated from order: chicken curry for 3 people"
    db.refresh(order)
    assert order.status == OrderStatus.completed

    generated = result["generated_meal_plans"][0]
    assert generated["meal_plan_id"] == meal_plan.id
    assert generated["date"] == "2024-01-08"
    assert generated["meal_type"] == "lunch"
    assert generated["dishes"] == [{"dish_name": "chicken curry", "people_count": 3, "notes": None}]
    assert result["orders_processed"][0]["id"] == order.id


def test_second_run_generates_nothing(db, user, make_dish, make_order):
    """Completed orders are never picked up again."""
    make_dish(user, "Spicy Chicken Curry")
    make_order("chicken curry")
    service = MenuGenerationService(db)

    service.generate_menu("Alice", "2024-01-08", "2024-01-08", "day")
    second = service.generate_menu("Alice", "2024-01-08", "2024-01-08", "day")

    assert second["summary"]["total_orders"] == 0
    assert second["generated_meal_plans"] == []
    assert db.query(MealItem).count() == 1
    assert db.query(MealPlan).count() == 1


def test_existing_meal_plan_is_reused(db, user, make_dish, make_order):
    make_dish(user, "Spicy Chicken Curry")
    make_order("chicken curry")
    service = MenuGenerationService(db)
    service.generate_menu("Alice", "2024-01-08", "2024-01-08", "day")

    make_order("curry", people_count=2)
    result = service.generate_menu("Alice", "2024-01-08", "2024-01-14", "week")

    assert db.query(MealPlan).count() == 1
    assert db.query(MealItem).count() == 2
    assert result["generated_meal_plans"][0]["meal_plan_id"] == db.query(MealPlan).one().id


def test_unmatched_orders_stay_pending_but_count_as_served(db, user, make_dish, make_order):
    make_dish(user, "Spicy Chicken Curry")
    matched = make_order("curry", people_count=3, notes="no nuts")
    unmatched = make_order("beef wellington", people_count=4)

    result = MenuGenerationService(db).generate_menu("Alice", "2024-01-08", "2024-01-08", "day")

    assert result["summary"] == {"total_orders": 2, "total_meals_generated": 1, "total_people_served": 7}
    assert result["generated_meal_plans"][0]["orders_count"] == 2
    db.refresh(matched)
    db.refresh(unmatched)
    assert matched.status == OrderStatus.completed
    assert unmatched.status == OrderStatus.pending
    assert db.query(MealItem).one().notes == "Generated from order: curry for 3 people. Notes: no nuts"


def test_orders_group_by_date_and_meal(db, user, make_dish, make_order):
    make_dish(user, "Pancakes")
    make_order("pancakes", meal_type=MealType.breakfast, people_count=1)
    make_order("pancakes", meal_type=MealType.breakfast, people_count=2)
    make_order("pancakes", meal_type=MealType.breakfast, order_date=date(2024, 1, 9), people_count=5)
    make_order("pancakes", user_name="Bob")
    make_order("pancakes", status=OrderStatus.completed)

    result = MenuGenerationService(db).generate_menu("Alice", "2024-01-08", "2024-01-14", "week")

    plans = {(plan["date"], plan["meal_type"]): plan for plan in result["generated_meal_plans"]}
    assert set(plans) == {("2024-01-08", "breakfast"), ("2024-01-09", "breakfast")}
    assert plans[("2024-01-08", "breakfast")]["people_count"] == 3
    assert result["summary"]["total_orders"] == 3


def test_confirmed_orders_are_included(db, user, make_dish, make_order):
    make_dish(user, "Spicy Chicken Curry")
    make_order("curry", status=OrderStatus.confirmed)

    result = MenuGenerationService(db).generate_menu("Alice", "2024-01-08", "2024-01-08", "day")
    assert result["summary"]["total_meals_generated"] == 1


def test_empty_range_returns_empty_shape(db):
    result = MenuGenerationService(db).generate_menu("Alice", "2024-01-08T10:00:00Z", "2024-01-14", "week")

    assert result["start_date"] == "2024-01-08"
    assert result["generated_meal_plans"] == []
    assert result["orders_processed"] == []
    assert result["summary"] == {"total_orders": 0, "total_meals_generated": 0, "total_people_served": 0}


@pytest.mark.parametrize("args", [
    ("", "2024-01-08", "2024-01-08", "day"),
    ("Alice", "01/08/2024", "2024-01-08", "day"),
    ("Alice", "2024-01-08", "2024-01-08", "month"),
])
def test_invalid_requests_raise_validation_error(db, args):
    with pytest.raises(ValidationError):
        MenuGenerationService(db).generate_menu(*args)


def test_exact_resolver_requires_whole_name(db, user, make_dish, make_order):
    make_dish(user, "Spicy Chicken Curry")
    order = make_order("chicken curry")

    service = MenuGenerationService(db, resolver=ExactDishResolver(db))
    result = service.generate_menu("Alice", "2024-01-08", "2024-01-08", "day")

    assert db.query(MealItem).count() == 0
    db.refresh(order)
    assert order.status == OrderStatus.pending
    assert result["summary"]["total_orders"] == 1


def test_substring_resolver_picks_first_dish_by_name(db, user, make_dish):
    make_dish(user, "Thai Curry")
    first = make_dish(user, "Green Curry")

    assert get_dish_resolver(db, "substring").resolve("CURRY").id == first.id


def test_unknown_match_strategy(db):
    with pytest.raises(ValidationError):
        get_dish_resolver(db, "fuzzy")


def test_history_lists_plans_with_items(db, user, make_dish, make_order):
    make_dish(user, "Spicy Chicken Curry")
    make_order("curry")
    make_order("curry", order_date=date(2024, 1, 9), meal_type=MealType.dinner)
    service = MenuGenerationService(db)
    service.generate_menu("Alice", "2024-01-08", "2024-01-14", "week")

    history = service.get_generated_menus("Alice")
    assert [entry["date"] for entry in history] == ["2024-01-09", "2024-01-08"]
    assert history[0]["meal_items_count"] == 1
    assert history[0]["meal_items"][0]["dish_name"] == "Spicy Chicken Curry"

    assert len(service.get_generated_menus("Alice", "2024-01-08")) == 1


def test_meal_plan_created_by_a_concurrent_run_is_reused(db, user, make_dish, make_order, monkeypatch):
    """Losing the insert race falls back to the plan the other run committed."""
    make_dish(user, "Spicy Chicken Curry")
    order = make_order("chicken curry")
    service = MenuGenerationService(db)
    find_meal_plan = service._find_meal_plan
    lookups = []

    def find_after_other_run(user_name, plan_date, meal_name):
        lookups.append(meal_name)
        if len(lookups) == 1:
            db.add(MealPlan(user_name=user_name, date=plan_date, meal_name=meal_name))
            db.commit()
            return None
        return find_meal_plan(user_name, plan_date, meal_name)

    monkeypatch.setattr(service, "_find_meal_plan", find_after_other_run)
    result = service.generate_menu("Alice", "2024-01-08", "2024-01-08", "day")

    meal_plan = db.query(MealPlan).one()
    assert db.query(MealItem).one().meal_plan_id == meal_plan.id
    assert result["generated_meal_plans"][0]["meal_plan_id"] == meal_plan.id
    db.refresh(order)
    assert order.status == OrderStatus.completed


def test_unresolvable_meal_plan_conflict_is_reported(db, user, make_dish, make_order, monkeypatch):
    make_dish(user, "Spicy Chicken Curry")
    order = make_order("chicken curry")
    service = MenuGenerationService(db)
    inserted = []

    def always_missing(user_name, plan_date, meal_name):
        if not inserted:
            db.add(MealPlan(user_name=user_name, date=plan_date, meal_name=meal_name))
            db.commit()
            inserted.append(True)
        return None

    monkeypatch.setattr(service, "_find_meal_plan", always_missing)
    with pytest.raises(ConstraintViolationError):
        service.generate_menu("Alice", "2024-01-08", "2024-01-08", "day")

    db.refresh(order)
    assert order.status == OrderStatus.pending
    assert db.query(MealItem).count() == 0
