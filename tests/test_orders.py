import pytest

from shopapi.errors import InvalidRequest, OrderCreationFailed
from shopapi.models import CartItem, Order, OrderDetail, OrderStatus, PaymentStatus
from shopapi.schemas import CreateOrderPayload
from shopapi.services import orders as order_service


def _payload(user, items, total=20.0, **extra):
    return CreateOrderPayload(
        user_id=user.id,
        total_amount=total,
        ship_address="12 Tran Hung Dao, Ha Noi",
        receiver_name="Nguyen Van An",
        phone_number="0901234567",
        items=items,
        **extra,
    )


# =====================================================
# SERVICE
# =====================================================

def test_place_order_persists_header_details_and_clears_cart(db, make_user, make_product, add_to_cart):
    user = make_user()
    product = make_product(price=10.0)
    add_to_cart(user, product, quantity=2)

    order_id = order_service.place_order(
        db, _payload(user, [{"product_id": product.id, "quantity": 2, "price": 10.0}])
    )

    order = db.get(Order, order_id)
    assert order.total_amount == 20.0
    assert order.status == OrderStatus.pending.value
    assert order.payment_status == PaymentStatus.unpaid.value

    details = db.query(OrderDetail).filter(OrderDetail.order_id == order_id).all()
    assert len(details) == 1
    assert details[0].quantity == 2
    assert details[0].unit_price == 10.0
    assert details[0].total_price == 20.0

    assert db.query(CartItem).filter(CartItem.user_id == user.id).count() == 0


def test_place_order_keeps_caller_total(db, make_user, make_product):
    user = make_user()
    product = make_product(price=10.0)

    # shipping fee is folded into the caller's total; line totals are not re-summed
    order_id = order_service.place_order(
        db, _payload(user, [{"product_id": product.id, "quantity": 2, "price": 10.0}], total=45.0)
    )

    assert db.get(Order, order_id).total_amount == 45.0


def test_place_order_only_clears_own_cart(db, make_user, make_product, add_to_cart):
    buyer = make_user(email="buyer@example.com")
    other = make_user(email="other@example.com")
    product = make_product()
    add_to_cart(buyer, product)
    add_to_cart(other, product, quantity=3)

    order_service.place_order(db, _payload(buyer, [{"product_id": product.id, "quantity": 1, "price": 10.0}]))

    assert db.query(CartItem).filter(CartItem.user_id == buyer.id).count() == 0
    assert db.query(CartItem).filter(CartItem.user_id == other.id).count() == 1


def test_place_order_rejects_empty_items(db, make_user):
    user = make_user()

    with pytest.raises(InvalidRequest):
        order_service.place_order(db, _payload(user, []))

    assert db.query(Order).count() == 0
    assert db.query(OrderDetail).count() == 0


def test_place_order_rolls_back_everything_on_failure(db, make_user, make_product, add_to_cart):
    user = make_user()
    product = make_product()
    add_to_cart(user, product, quantity=2)

    items = [
        {"product_id": product.id, "quantity": 1, "price": 10.0},
        {"product_id": 9999, "quantity": 1, "price": 5.0},  # violates the products FK
    ]

    with pytest.raises(OrderCreationFailed) as exc_info:
        order_service.place_order(db, _payload(user, items, total=15.0))

    assert exc_info.value.status_code == 500
    assert exc_info.value.cause is not None
    assert db.query(Order).count() == 0
    assert db.query(OrderDetail).count() == 0
    assert db.query(CartItem).filter(CartItem.user_id == user.id).count() == 1


@pytest.mark.parametrize(
    "value, expected",
    [
        ("pending", OrderStatus.pending),
        ("awaiting_pickup", OrderStatus.awaiting_pickup),
        ("shipping", OrderStatus.shipping),
        ("completed", OrderStatus.completed),
        ("cancelled", OrderStatus.cancelled),
        ("Đang giao hàng", OrderStatus.shipping),
    ],
)
def test_resolve_status(value, expected):
    assert order_service.resolve_status(value) is expected


def test_resolve_status_rejects_unknown_token():
    with pytest.raises(InvalidRequest):
        order_service.resolve_status("lost_in_transit")


# =====================================================
# API
# =====================================================

def test_create_order_endpoint(client, db, make_user, make_product, add_to_cart, checkout_options):
    user = make_user()
    product = make_product(price=10.0)
    add_to_cart(user, product, quantity=2)
    payment, shipping = checkout_options

    res = client.post("/api/orders", json={
        "userId": user.id,
        "totalAmount": 20.0,
        "shipAddress": "12 Tran Hung Dao, Ha Noi",
        "receiverName": "Nguyen Van An",
        "phoneNumber": "0901234567",
        "paymentMethodId": payment.id,
        "shippingMethodId": shipping.id,
        "items": [{"productId": product.id, "quantity": 2, "price": 10.0}],
    })

    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    order_id = body["data"]["order_id"]
    assert db.get(Order, order_id) is not None
    assert db.query(CartItem).count() == 0


def test_create_order_endpoint_empty_cart(client, db, make_user):
    user = make_user()

    res = client.post("/api/orders", json={
        "user_id": user.id,
        "total_amount": 0,
        "ship_address": "x",
        "receiver_name": "x",
        "phone_number": "x",
        "items": [],
    })

    assert res.status_code == 400
    assert res.json() == {"success": False, "message": "Cart is empty"}
    assert db.query(Order).count() == 0


def test_create_order_endpoint_missing_fields(client):
    res = client.post("/api/orders", json={"items": []})

    assert res.status_code == 400
    assert res.json()["success"] is False


def test_order_history(client, make_user, make_product, make_order):
    user = make_user()
    lens = make_product(name="RF 50mm f/1.8", price=5.0, thumbnail_url="https://cdn/lens.png")
    body = make_product(name="EOS R50", price=20.0)
    first = make_order(user, [(lens, 1)])
    second = make_order(user, [(body, 1), (lens, 3)])

    res = client.get(f"/api/orders/user/{user.id}")

    assert res.status_code == 200
    data = res.json()["data"]
    assert [o["order_id"] for o in data] == [second.id, first.id]
    assert data[0]["product_name"] == "EOS R50"
    assert data[0]["total_quantity"] == 4
    assert data[1]["thumbnail_url"] == "https://cdn/lens.png"


def test_order_detail(client, db, make_user, make_product, make_order, checkout_options):
    user = make_user()
    product = make_product(price=10.0)
    payment, shipping = checkout_options
    order = make_order(user, [(product, 2)])
    order.payment_method_id = payment.id
    order.shipping_method_id = shipping.id
    db.commit()

    res = client.get(f"/api/orders/detail/{order.id}")

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["order_info"]["payment_method"] == "COD"
    assert data["order_info"]["shipping_method"] == "Giao hàng nhanh"
    assert data["order_items"][0]["total_price"] == 20.0
    assert data["order_items"][0]["product_name"] == product.name


def test_order_detail_not_found(client):
    res = client.get("/api/orders/detail/404")

    assert res.status_code == 404
    assert res.json()["success"] is False


def test_update_status_maps_token_to_display_string(client, db, make_user, make_product, make_order):
    user = make_user()
    order = make_order(user, [(make_product(), 1)])

    res = client.put(f"/api/orders/{order.id}/status", json={"status": "shipping"})

    assert res.status_code == 200
    assert res.json()["data"]["status"] == "Đang giao hàng"
    db.expire_all()
    assert db.get(Order, order.id).status == OrderStatus.shipping.value


def test_update_status_cancel_with_reason(client, db, make_user, make_product, make_order, caplog):
    user = make_user()
    order = make_order(user, [(make_product(), 1)])

    with caplog.at_level("INFO", logger="shopapi.services.orders"):
        res = client.put(
            f"/api/orders/{order.id}/status",
            json={"status": "cancelled", "cancelReason": "Customer changed their mind"},
        )

    assert res.status_code == 200
    assert "Customer changed their mind" in caplog.text


def test_update_status_rejects_unknown_token(client, db, make_user, make_product, make_order):
    user = make_user()
    order = make_order(user, [(make_product(), 1)])

    res = client.put(f"/api/orders/{order.id}/status", json={"status": "teleported"})

    assert res.status_code == 400
    db.expire_all()
    assert db.get(Order, order.id).status == OrderStatus.pending.value


def test_update_status_unknown_order(client):
    res = client.put("/api/orders/999/status", json={"status": "completed"})

    assert res.status_code == 404
