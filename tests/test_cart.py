import pytest

from shopapi.database import engine
from shopapi.errors import NotFound, PersistenceError
from shopapi.models import CartItem
from shopapi.services import cart as cart_service


def test_repeat_add_increments_single_row(db, make_user, make_product):
    user = make_user()
    product = make_product()

    cart_service.add_or_increment(db, user.id, product.id, 1)
    item = cart_service.add_or_increment(db, user.id, product.id, 3)

    rows = db.query(CartItem).filter(CartItem.user_id == user.id).all()
    assert len(rows) == 1
    assert rows[0].quantity == 4
    assert item.quantity == 4


def test_add_keeps_users_separate(db, make_user, make_product):
    product = make_product()
    a = make_user(email="a@example.com")
    b = make_user(email="b@example.com")

    cart_service.add_or_increment(db, a.id, product.id, 2)
    cart_service.add_or_increment(db, b.id, product.id, 5)

    assert db.query(CartItem).count() == 2


def test_add_unknown_product(db, make_user):
    user = make_user()

    with pytest.raises(NotFound):
        cart_service.add_or_increment(db, user.id, 4242, 1)


def test_add_inactive_product(db, make_user, make_product):
    user = make_user()
    product = make_product(is_active=False)

    with pytest.raises(NotFound):
        cart_service.add_or_increment(db, user.id, product.id, 1)


def test_cart_endpoints(client, db, make_user, make_product):
    user = make_user()
    product = make_product(name="Sony A7 IV", price=55.5)

    res = client.post("/api/cart/add", json={"userId": user.id, "productId": product.id, "quantity": 1})
    assert res.status_code == 200
    res = client.post("/api/cart/add", json={"userId": user.id, "productId": product.id, "quantity": 3})
    assert res.json()["data"]["quantity"] == 4

    res = client.get(f"/api/cart/{user.id}")
    assert res.status_code == 200
    lines = res.json()["data"]
    assert len(lines) == 1
    assert lines[0]["product_name"] == "Sony A7 IV"
    assert lines[0]["quantity"] == 4
    cart_item_id = lines[0]["cart_item_id"]

    res = client.put("/api/cart/update", json={"cartItemId": cart_item_id, "quantity": 2})
    assert res.status_code == 200
    assert client.get(f"/api/cart/{user.id}").json()["data"][0]["quantity"] == 2

    res = client.delete(f"/api/cart/remove/{cart_item_id}")
    assert res.status_code == 200
    assert client.get(f"/api/cart/{user.id}").json()["data"] == []


def test_update_rejects_non_positive_quantity(client):
    res = client.put("/api/cart/update", json={"cart_item_id": 1, "quantity": 0})

    assert res.status_code == 400


def test_remove_unknown_item(client):
    res = client.delete("/api/cart/remove/31337")

    assert res.status_code == 404
    assert res.json() == {"success": False, "message": "Cart item not found"}


def test_add_store_failure_raises_persistence_error(db, make_user, make_product):
    user = make_user()
    product = make_product()
    CartItem.__table__.drop(bind=engine)

    with pytest.raises(PersistenceError) as exc_info:
        cart_service.add_or_increment(db, user.id, product.id, 1)

    assert exc_info.value.status_code == 500
    assert exc_info.value.detail == "Server error"
