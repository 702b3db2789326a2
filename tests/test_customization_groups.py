from app.models.customization import CustomizationOption
from app.models.enums import DishVisibility


def protein_group(dish, chicken, tofu, grams, **overrides):
    payload = {
        "dish_id": dish.id,
        "name": "Protein",
        "type": "single",
        "is_required": True,
        "options": [
            {"ingredient_id": tofu.id, "name": "Tofu", "default_quantity": 120, "unit_id": grams.id,
             "display_order": 2},
            {"ingredient_id": chicken.id, "name": "Chicken", "default_quantity": 150, "unit_id": grams.id,
             "display_order": 1},
        ],
    }
    payload.update(overrides)
    return payload


def test_create_group_with_options(client, user, make_dish, make_ingredient, make_unit, auth_headers):
    grams = make_unit("gram", "g")
    chicken = make_ingredient("chicken", category="meat")
    tofu = make_ingredient("tofu", category="other")
    bowl = make_dish(user, "Rice Bowl")

    response = client.post("/api/customization-groups", json=protein_group(bowl, chicken, tofu, grams),
                           headers=auth_headers)

    assert response.status_code == 201
    group = response.json()["group"]
    assert group["dish_id"] == bowl.id
    assert group["type"] == "single"
    assert group["is_required"] is True
    assert [option["name"] for option in group["options"]] == ["Chicken", "Tofu"]
    assert group["options"][0]["ingredient_name"] == "chicken"
    assert group["options"][0]["unit_abbreviation"] == "g"


def test_groups_are_listed_in_display_order(client, user, make_dish, make_ingredient, make_unit, auth_headers):
    grams = make_unit("gram", "g")
    chicken = make_ingredient("chicken")
    tofu = make_ingredient("tofu")
    bowl = make_dish(user, "Rice Bowl")
    client.post("/api/customization-groups",
                json={"dish_id": bowl.id, "name": "Toppings", "type": "multiple", "display_order": 2},
                headers=auth_headers)
    client.post("/api/customization-groups", json=protein_group(bowl, chicken, tofu, grams, display_order=1),
                headers=auth_headers)

    groups = client.get("/api/customization-groups", params={"dish_id": bowl.id}, headers=auth_headers).json()
    assert [group["name"] for group in groups["groups"]] == ["Protein", "Toppings"]
    assert groups["groups"][1]["options"] == []

    mine = client.get("/api/customization-groups", headers=auth_headers).json()
    assert len(mine["groups"]) == 2


def test_group_rules(client, user, other_user, make_dish, make_ingredient, make_unit, auth_headers, headers_for):
    grams = make_unit("gram", "g")
    chicken = make_ingredient("chicken")
    tofu = make_ingredient("tofu")
    bowl = make_dish(user, "Rice Bowl")
    url = "/api/customization-groups"

    assert client.post(url, json=protein_group(bowl, chicken, tofu, grams, type="pick-any"),
                       headers=auth_headers).status_code == 400
    assert client.post(url, json=protein_group(bowl, chicken, tofu, grams),
                       headers=headers_for(other_user)).status_code == 403

    missing_dish = protein_group(bowl, chicken, tofu, grams, dish_id="missing")
    assert client.post(url, json=missing_dish, headers=auth_headers).status_code == 404

    unknown_ingredient = protein_group(bowl, chicken, tofu, grams)
    unknown_ingredient["options"][0]["ingredient_id"] = "missing"
    assert client.post(url, json=unknown_ingredient, headers=auth_headers).status_code == 404

    assert client.get(url, params={"dish_id": bowl.id}, headers=headers_for(other_user)).status_code == 403


def test_public_dish_groups_are_visible_to_others(client, user, other_user, make_dish, make_ingredient,
                                                  make_unit, auth_headers, headers_for):
    grams = make_unit("gram", "g")
    bowl = make_dish(user, "Rice Bowl", visibility=DishVisibility.public)
    client.post("/api/customization-groups",
                json=protein_group(bowl, make_ingredient("chicken"), make_ingredient("tofu"), grams),
                headers=auth_headers)

    stranger = headers_for(other_user)
    listed = client.get("/api/customization-groups", params={"dish_id": bowl.id}, headers=stranger).json()
    assert len(listed["groups"]) == 1
    assert client.get("/api/customization-groups", headers=stranger).json() == {"groups": []}


def test_delete_group_removes_options(client, db, user, other_user, make_dish, make_ingredient, make_unit,
                                      auth_headers, headers_for):
    grams = make_unit("gram", "g")
    bowl = make_dish(user, "Rice Bowl")
    created = client.post("/api/customization-groups",
                          json=protein_group(bowl, make_ingredient("chicken"), make_ingredient("tofu"), grams),
                          headers=auth_headers).json()["group"]
    url = f"/api/customization-groups/{created['id']}"

    assert client.delete(url, headers=headers_for(other_user)).status_code == 403
    assert client.delete(url, headers=auth_headers).status_code == 200
    assert client.delete(url, headers=auth_headers).status_code == 404
    assert db.query(CustomizationOption).count() == 0
