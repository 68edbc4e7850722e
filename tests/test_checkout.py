import base64

import pytest

from carwash_pos.domain.cart.schemas import CartLine, ItemType
from carwash_pos.domain.catalog.schemas import SizeTier
from carwash_pos.domain.checkout.schemas import CheckoutItem, CheckoutRequest
from carwash_pos.domain.checkout.service import CheckoutService
from carwash_pos.exceptions import (
    InsufficientStock,
    InvalidImageFormat,
    InvalidInput,
    UpstreamUnavailable,
)

from conftest import stock

SESSION = "till-1"
PNG_URI = "data:image/png;base64," + base64.b64encode(b"receipt").decode()


@pytest.fixture
def checkout(inventory_db, sales_db, cart_store, blob_store) -> CheckoutService:
    return CheckoutService(inventory_db, sales_db, cart_store, blob_store, SESSION)


def add_product(cart_store, item_id, quantity, name="Tire Shine", price=150.0):
    cart_store.add(
        SESSION, CartLine(id=item_id, type=ItemType.PRODUCT, name=name, price=price, quantity=quantity)
    )


def add_service(cart_store, item_id, quantity, size):
    cart_store.add(
        SESSION,
        CartLine(
            id=item_id, type=ItemType.SERVICE, name="Basic Wash", price=0, quantity=quantity, size=size
        ),
    )


async def test_product_checkout_deducts_and_clears(checkout, cart_store, inventory, sales):
    add_product(cart_store, 5, 2)

    order = await checkout.checkout(CheckoutRequest())

    assert stock(inventory, 5) == 8
    assert cart_store.snapshot(SESSION) == []
    assert order["order_id"] == 1
    assert order["total_amount"] == 300.0
    assert order["total_quantity"] == 2
    assert order["payment_method"] == "cash"
    assert order["payment_proof"] is None
    assert order["items"] == "Product: Tire Shine x2 @ ₱150"
    assert order["item_details"] == [
        {"id": 5, "type": "product", "name": "Tire Shine", "price": 150.0, "quantity": 2, "size": None}
    ]
    assert len(sales.rows("orders")) == 1


async def test_prices_come_from_catalog(checkout, cart_store):
    add_product(cart_store, 5, 1, name="Stale Name", price=1.0)
    order = await checkout.checkout(CheckoutRequest())
    assert order["total_amount"] == 150.0
    assert order["item_details"][0]["name"] == "Tire Shine"


async def test_service_checkout_deducts_linked_products(checkout, cart_store, inventory):
    add_service(cart_store, 1, 1, SizeTier.LARGE)
    add_product(cart_store, 6, 2, name="Air Freshener", price=45.5)

    order = await checkout.checkout(
        CheckoutRequest(payment_method="gcash", reference_number="REF-9")
    )

    assert stock(inventory, 7) == 1
    assert stock(inventory, 8) == 18
    assert stock(inventory, 6) == 2
    assert order["total_amount"] == 291.0
    assert order["total_quantity"] == 3
    assert order["payment_method"] == "gcash"
    assert order["reference_number"] == "REF-9"
    assert order["items"].splitlines() == [
        "Service: Basic Wash (large) x1 @ ₱200",
        "Product: Air Freshener x2 @ ₱45.50",
    ]


async def test_service_over_linked_stock_mutates_nothing(checkout, cart_store, inventory, sales):
    # large wash uses 1 shampoo per unit; 3 washes but only 2 shampoo
    add_service(cart_store, 1, 3, SizeTier.LARGE)

    with pytest.raises(InsufficientStock):
        await checkout.checkout(CheckoutRequest())

    assert inventory.writes("PATCH") == []
    assert stock(inventory, 7) == 2
    assert sales.rows("orders") == []
    assert len(cart_store.snapshot(SESSION)) == 1


async def test_any_line_over_stock_mutates_nothing(checkout, cart_store, inventory):
    add_product(cart_store, 5, 1)
    add_product(cart_store, 7, 3, name="Car Shampoo", price=80)

    with pytest.raises(InsufficientStock):
        await checkout.checkout(CheckoutRequest())
    assert inventory.writes("PATCH") == []
    assert stock(inventory, 5) == 10


async def test_bad_payment_proof_fails_before_any_lookup(checkout, cart_store, inventory):
    add_product(cart_store, 5, 1)

    with pytest.raises(InvalidImageFormat):
        await checkout.checkout(CheckoutRequest(payment_proof="image.png"))

    assert inventory.requests == []
    assert len(cart_store.snapshot(SESSION)) == 1


async def test_payment_proof_is_uploaded_and_linked(checkout, cart_store, s3):
    add_product(cart_store, 5, 1)

    order = await checkout.checkout(CheckoutRequest(payment_proof=PNG_URI))

    key = next(iter(s3.objects))
    assert key.startswith("order-") and key.endswith(".png")
    assert order["payment_proof"].endswith(f"/payment_proof/{key}")


async def test_empty_cart(checkout):
    with pytest.raises(InvalidInput, match="Cart is empty"):
        await checkout.checkout(CheckoutRequest())


async def test_body_items_take_precedence(checkout, cart_store, inventory):
    add_product(cart_store, 8, 1, name="Wax", price=200)

    order = await checkout.checkout(
        CheckoutRequest(
            items=[
                CheckoutItem(id=5, type="product", quantity=1),
                CheckoutItem(id="1", type="service", size="small"),
            ]
        )
    )

    assert stock(inventory, 5) == 9
    assert stock(inventory, 7) == 1
    assert stock(inventory, 8) == 20
    assert order["total_amount"] == 250.0
    assert cart_store.snapshot(SESSION) == []


async def test_body_item_validation(checkout):
    with pytest.raises(InvalidInput):
        await checkout.checkout(CheckoutRequest(items=[CheckoutItem(type="product")]))
    with pytest.raises(InvalidInput):
        await checkout.checkout(CheckoutRequest(items=[CheckoutItem(id=5, type="product", quantity=-1)]))


async def test_order_insert_failure_surfaces(checkout, cart_store, inventory, sales):
    add_product(cart_store, 5, 2)
    sales.failures.add(("POST", "orders"))

    with pytest.raises(UpstreamUnavailable):
        await checkout.checkout(CheckoutRequest())

    # stock stays deducted and the cart is kept for a retry
    assert stock(inventory, 5) == 8
    assert len(cart_store.snapshot(SESSION)) == 1
