from app.models.enums import OrderStatus
from app.models.order import Order
from app.models.user import User


def order_payload(**overrides):
    payload = {
        "user_name": "Alice",
        "order_date": "2024-01-08",
        "meal_type": "lunch",
        "dish_name": "chicken curry",
        "people_count": 3,
    }
    payload.update(overrides)
    return payload


def test_requests_without_token_are_rejected(client):
    response = client.get("/api/orders")
    assert response.status_code == 401


def test_first_request_creates_user_with_weekly_plan(client, db, headers_for):
    """A valid token for an unknown subject provisions the user."""
    from types import SimpleNamespace
    headers = headers_for(SimpleNamespace(auth_subject="newcomer"))

    response = client.get("/api/users/profile", headers=headers)

    assert response.status_code == 200
    assert response.json()["auth_subject"] == "newcomer"
    user = db.query(User).filter(User.auth_subject == "newcomer").one()
    assert len(user.weekly_plan.days) == 7


def test_invalid_token(client):
    response = client.get("/api/orders", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


def test_create_and_list_orders(client, auth_headers):
    response = client.post("/api/orders", json=order_payload(meal_type="Lunch"), headers=auth_headers)
    assert response.status_code == 201
    order = response.json()["order"]
    assert order["meal_type"] == "lunch"
    assert order["status"] == "pending"

    client.post("/api/orders", json=order_payload(user_name="Bob", meal_type="dinner"), headers=auth_headers)

    everyone = client.get("/api/orders", headers=auth_headers).json()["orders"]
    assert len(everyone) == 2

    alice = client.get("/api/orders", params={"user_name": "Alice"}, headers=auth_headers).json()["orders"]
    assert [o["id"] for o in alice] == [order["id"]]

    dinners = client.get("/api/orders", params={"meal_type": "dinner"}, headers=auth_headers).json()["orders"]
    assert [o["user_name"] for o in dinners] == ["Bob"]


def test_order_validation_errors(client, auth_headers):
    bad_meal = client.post("/api/orders", json=order_payload(meal_type="dessert"), headers=auth_headers)
    assert bad_meal.status_code == 400
    assert bad_meal.json()["detail"] == "meal_type must be breakfast, lunch, or dinner"

    bad_date = client.post("/api/orders", json=order_payload(order_date="2024-1-8"), headers=auth_headers)
    assert bad_date.status_code == 400

    no_people = client.post("/api/orders", json=order_payload(people_count=0), headers=auth_headers)
    assert no_people.status_code == 400
    assert no_people.json()["detail"] == "people_count must be greater than 0"

    missing = client.post("/api/orders", json={"user_name": "Alice"}, headers=auth_headers)
    assert missing.status_code == 400


def test_batch_order_returns_confirmation(client, db, auth_headers):
    """One order per unit of each item, confirmation returned with the response."""
    response = client.post("/api/orders/batch", json={
        "order_info": {
            "user_name": "Alice",
            "order_date": "2024-01-08",
            "meal_type": "dinner",
            "people_count": 2,
            "notes": "front door"
        },
        "items": [
            {"dish_name": "curry", "quantity": 2},
            {"dish_name": "naan", "quantity": 1}
        ]
    }, headers=auth_headers)

    assert response.status_code == 201
    body = response.json()
    confirmation = body["confirmation"]
    assert confirmation["total_items"] == 3
    assert len(confirmation["order_ids"]) == 3
    assert confirmation["order_info"]["notes"] == "front door"
    assert [o["dish_name"] for o in body["orders"]] == ["curry", "curry", "naan"]
    assert db.query(Order).count() == 3


def test_batch_order_is_all_or_nothing(client, db, auth_headers):
    response = client.post("/api/orders/batch", json={
        "order_info": {
            "user_name": "Alice",
            "order_date": "2024-01-08",
            "meal_type": "brunch",
            "people_count": 2
        },
        "items": [{"dish_name": "curry"}]
    }, headers=auth_headers)

    assert response.status_code == 400
    assert db.query(Order).count() == 0


def test_update_and_delete_order(client, auth_headers):
    order = client.post("/api/orders", json=order_payload(), headers=auth_headers).json()["order"]

    updated = client.put("/api/orders", json={"id": order["id"], "status": "confirmed"}, headers=auth_headers)
    assert updated.status_code == 200
    assert updated.json()["order"]["status"] == "confirmed"

    bad_status = client.put("/api/orders", json={"id": order["id"], "status": "lost"}, headers=auth_headers)
    assert bad_status.status_code == 400

    nothing = client.put("/api/orders", json={"id": order["id"]}, headers=auth_headers)
    assert nothing.status_code == 400
    assert nothing.json()["detail"] == "No fields to update"

    missing = client.put("/api/orders", json={"id": "missing", "status": "confirmed"}, headers=auth_headers)
    assert missing.status_code == 404

    deleted = client.delete("/api/orders", params={"id": order["id"]}, headers=auth_headers)
    assert deleted.status_code == 200
    assert client.delete("/api/orders", params={"id": order["id"]}, headers=auth_headers).status_code == 404


def test_week_view_groups_orders(client, auth_headers):
    client.post("/api/orders", json=order_payload(), headers=auth_headers)
    client.post("/api/orders", json=order_payload(user_name="Bob", people_count=2), headers=auth_headers)
    client.post("/api/orders", json=order_payload(order_date="2024-01-15"), headers=auth_headers)

    response = client.get("/api/orders/week", params={"start_date": "2024-01-08"}, headers=auth_headers)

    assert response.status_code == 200
    weekly = response.json()["weeklyOrders"]
    assert weekly["week_start"] == "2024-01-08"
    assert len(weekly["days"]) == 7
    lunch = weekly["days"]["2024-01-08"]["lunch"]
    assert len(lunch) == 1
    assert lunch[0]["total_people"] == 5
    assert lunch[0]["total_orders"] == 2
    assert weekly["days"]["2024-01-14"] == {"breakfast": [], "lunch": [], "dinner": []}


def test_check_returning_customer(client, auth_headers):
    client.post("/api/orders", json=order_payload(), headers=auth_headers)

    known = client.get("/api/users/check", params={"user_name": "alice"}, headers=auth_headers).json()
    assert known["exists"] is True
    assert known["user_data"]["order_count"] == 1

    unknown = client.get("/api/users/check", params={"user_name": "Zed"}, headers=auth_headers).json()
    assert unknown == {"exists": False, "user_data": None}


def test_menu_generation_endpoint(client, db, user, make_dish, auth_headers):
    make_dish(user, "Spicy Chicken Curry")
    client.post("/api/orders", json=order_payload(), headers=auth_headers)

    response = client.post("/api/menu-generation", json={
        "user_name": "Alice",
        "start_date": "2024-01-08",
        "end_date": "2024-01-08",
        "period_type": "day"
    }, headers=auth_headers)

    assert response.status_code == 201
    assert response.json()["summary"] == {"total_orders": 1, "total_meals_generated": 1, "total_people_served": 3}
    assert db.query(Order).one().status == OrderStatus.completed

    history = client.get("/api/menu-generation", params={"user_name": "Alice"}, headers=auth_headers)
    assert history.status_code == 200
    assert history.json()["meal_plans"][0]["meal_items_count"] == 1

    bad = client.post("/api/menu-generation", json={
        "user_name": "Alice",
        "start_date": "2024-01-08",
        "end_date": "2024-01-08",
        "period_type": "month"
    }, headers=auth_headers)
    assert bad.status_code == 400
    assert bad.json()["detail"] == 'period_type must be "day" or "week"'
