import pytest

from carwash_pos.domain.orders.schemas import OrderItemDetail
from carwash_pos.domain.orders.service import (
    OrderService,
    OrderWriter,
    order_totals,
    summarize_items,
)
from carwash_pos.exceptions import OrderNotFound


def wash(quantity=1, price=200.0):
    return OrderItemDetail(id=1, type="service", name="Basic Wash", price=price, quantity=quantity, size="large")


def shine(quantity=2, price=150.0):
    return OrderItemDetail(id=5, type="product", name="Tire Shine", price=price, quantity=quantity)


def test_totals():
    assert order_totals([wash(), shine()]) == (500.0, 3)
    assert order_totals([shine(quantity=3, price=0.1)]) == (0.3, 3)
    assert order_totals([]) == (0, 0)


def test_summary_lines():
    text = summarize_items([wash(), shine(price=45.5), shine(price=1250000)])
    assert text.split("\n") == [
        "Service: Basic Wash (large) x1 @ ₱200",
        "Product: Tire Shine x2 @ ₱45.50",
        "Product: Tire Shine x2 @ ₱1250000",
    ]


def test_build_row_defaults(sales_db):
    row = OrderWriter(sales_db).build_row([shine()])
    assert row["payment_method"] == "cash"
    assert row["payment_proof"] is None
    assert row["reference_number"] is None
    assert row["total_amount"] == 300.0
    assert row["item_details"][0]["size"] is None
    assert row["order_date"].endswith("+00:00")


async def test_write_inserts_one_row(sales, sales_db):
    order = await OrderWriter(sales_db).write(
        [wash()], payment_method="gcash", payment_proof_url="https://cdn/p.png", reference_number="R1"
    )
    assert order["order_id"] == 1
    assert sales.rows("orders")[0]["payment_proof"] == "https://cdn/p.png"
    assert sales.rows("orders")[0]["reference_number"] == "R1"


async def test_order_listing_and_lookup(sales, sales_db):
    writer = OrderWriter(sales_db)
    await writer.write([shine()])
    await writer.write([wash()])

    service = OrderService(sales_db)
    assert len(await service.list_orders()) == 2
    assert (await service.get_order(2))["total_amount"] == 200.0
    with pytest.raises(OrderNotFound):
        await service.get_order(404)
