"""
Reshape flat order and meal-plan rows into nested weekly calendar structures.

These are pure functions: callers fetch the rows, nothing here touches the
database. Every date key is normalised to ``YYYY-MM-DD``.
"""
from enum import Enum
from typing import Any, Dict, Iterable, List

from app.models.enums import ORDER_MEAL_TYPES, PLAN_MEAL_TYPES, SLOT_MEAL_TYPES
from app.utils.date_utils import DAYS_IN_WEEK, normalize_date, week_dates


def _value(member) -> str:
    return member.value if isinstance(member, Enum) else member


def build_weekly_orders(week_start, orders: Iterable[Any]) -> Dict[str, Any]:
    """
    Group a week of orders by date, meal type and dish name.

    Every date of the week carries every order meal type; a meal with no
    orders maps to an empty list.
    """
    dates = [day.isoformat() for day in week_dates(week_start)]
    days = {
        day: {meal.value: [] for meal in ORDER_MEAL_TYPES}
        for day in dates
    }

    for order in orders:
        meal_groups = days.get(normalize_date(order.order_date), {}).get(_value(order.meal_type))
        if meal_groups is None:
            continue

        group = next((g for g in meal_groups if g["dish_name"] == order.dish_name), None)
        if group is None:
            group = {
                "dish_name": order.dish_name,
                "orders": [],
                "total_people": 0,
                "total_orders": 0
            }
            meal_groups.append(group)

        group["orders"].append({
            "id": order.id,
            "user_name": order.user_name,
            "people_count": order.people_count,
            "notes": order.notes,
            "status": _value(order.status),
            "created_at": order.created_at
        })
        group["total_people"] += order.people_count
        group["total_orders"] += 1

    return {"week_start": dates[0], "days": days}


def serialize_meal_item(item) -> Dict[str, Any]:
    dish = item.dish
    return {
        "id": item.id,
        "dish_id": item.dish_id,
        "dish_name": dish.name if dish else None,
        "servings": item.servings,
        "customizations": item.customizations,
        "notes": item.notes,
        "calories": dish.effective_calories if dish else None,
        "prep_time": dish.prep_time if dish else None
    }


def serialize_meal_plan(meal_plan) -> Dict[str, Any]:
    items = sorted(
        (serialize_meal_item(item) for item in meal_plan.items if item.dish is not None),
        key=lambda item: item["dish_name"] or ""
    )
    return {
        "id": meal_plan.id,
        "meal_name": meal_plan.meal_name,
        "date": normalize_date(meal_plan.date),
        "created_at": meal_plan.created_at,
        "items": items
    }


def build_weekly_meal_plans(week_start, meal_plans: Iterable[Any]) -> Dict[str, Any]:
    """
    Place each meal plan of the week at ``days[date][meal_name]``.

    All seven dates are present. A meal key is only present when a plan
    exists for it, so "no plan" stays distinguishable from "plan with no items".
    """
    dates = [day.isoformat() for day in week_dates(week_start)]
    days: Dict[str, Dict[str, Any]] = {day: {} for day in dates}
    plan_meals = {meal.value for meal in PLAN_MEAL_TYPES}

    for meal_plan in meal_plans:
        date_key = normalize_date(meal_plan.date)
        if date_key not in days or meal_plan.meal_name not in plan_meals:
            continue
        days[date_key][meal_plan.meal_name] = serialize_meal_plan(meal_plan)

    return {"week_start": dates[0], "days": days}


def organize_slot_plan(rows: Iterable[Dict[str, Any]]) -> Dict[int, Dict[str, List[Dict[str, Any]]]]:
    """Nest a user's slot rows as ``{day_of_week: {meal_type: [dish entries]}}`` for days 1-7."""
    organized = {
        day: {meal.value: [] for meal in SLOT_MEAL_TYPES}
        for day in range(1, DAYS_IN_WEEK + 1)
    }

    for row in rows:
        day = row.get("day_of_week")
        meal = _value(row.get("meal_type"))
        if not day or not meal or not row.get("dish_id"):
            continue
        if meal not in organized.get(day, {}):
            continue
        organized[day][meal].append({
            "dish_id": row["dish_id"],
            "dish_name": row.get("dish_name"),
            "serving_size": row.get("serving_size"),
            "slot_id": row.get("slot_id")
        })

    return organized
