import json

import pytest
from pydantic import ValidationError

from grubdash.models import Dish, Order
from grubdash.store import EntityStore, load_seed


def dish(dish_id, name="Soup"):
    return Dish(id=dish_id, name=name, description="Hot", price=4, image_url="u")


def test_create_appends_in_order():
    store = EntityStore[Dish]("Dish")
    store.create(dish("a"))
    store.create(dish("b"))
    assert [d.id for d in store.all()] == ["a", "b"]
    assert len(store) == 2
    assert "a" in store


def test_create_rejects_duplicate_id():
    store = EntityStore[Dish]("Dish", [dish("a")])
    with pytest.raises(ValueError):
        store.create(dish("a"))
    assert len(store) == 1


def test_find_returns_index_and_live_entity():
    store = EntityStore[Dish]("Dish", [dish("a"), dish("b")])
    index, found = store.find("b")
    assert index == 1
    found.name = "Stew"
    assert store.find("b")[1].name == "Stew"
    assert store.find("zz") is None


def test_update_never_touches_id():
    store = EntityStore[Dish]("Dish", [dish("a")])
    _, entity = store.find("a")
    store.update(entity, {"id": "b", "name": "Stew", "price": 9})
    assert entity.id == "a"
    assert entity.name == "Stew"
    assert entity.price == 9


def test_remove_by_index():
    store = EntityStore[Dish]("Dish", [dish("a"), dish("b"), dish("c")])
    removed = store.remove(1)
    assert removed.id == "b"
    assert [d.id for d in store.all()] == ["a", "c"]


def test_all_returns_a_copy():
    store = EntityStore[Dish]("Dish", [dish("a")])
    store.all().clear()
    assert len(store) == 1


def test_load_seed(tmp_path):
    path = tmp_path / "seed.json"
    path.write_text(
        json.dumps(
            {
                "dishes": [{"id": "d1", "name": "Soup", "description": "Hot", "price": 4, "image_url": "u"}],
                "orders": [
                    {
                        "id": "o1",
                        "deliverTo": "here",
                        "mobileNumber": "123",
                        "status": "out-for-delivery",
                        "dishes": [{"dishId": "d1", "quantity": 1}],
                    }
                ],
            }
        )
    )
    dishes, orders = load_seed(path)
    assert dishes == [dish("d1")]
    assert isinstance(orders[0], Order)
    assert orders[0].status == "out-for-delivery"


def test_rejected_update_leaves_entity_untouched():
    order = Order(
        id="o1",
        deliverTo="here",
        mobileNumber="123",
        status="pending",
        dishes=[{"dishId": "d1", "quantity": 2}],
    )
    store = EntityStore[Order]("Order", [order])
    before = order.model_dump()

    with pytest.raises(ValidationError):
        store.update(
            order,
            {
                "deliverTo": "elsewhere",
                "mobileNumber": "456",
                "status": "preparing",
                "dishes": [{"dishId": "d1", "quantity": "lots"}],
            },
        )

    assert order.model_dump() == before
    assert store.find("o1")[1].status == "pending"


def test_update_replaces_order_lines():
    order = Order(id="o1", deliverTo="here", mobileNumber="123", dishes=[{"dishId": "d1", "quantity": 2}])
    store = EntityStore[Order]("Order", [order])
    store.update(order, {"status": "preparing", "dishes": [{"dishId": ["x"], "quantity": 1, "note": None}]})

    assert order.status == "preparing"
    assert order.dishes[0].model_dump(exclude_unset=True) == {"dishId": ["x"], "quantity": 1, "note": None}
