import json

import pytest

from carwash_pos.domain.cart.schemas import CartLine, ItemType
from carwash_pos.domain.cart.store import MemoryCartStore, RedisCartStore
from carwash_pos.domain.catalog.schemas import SizeTier
from carwash_pos.exceptions import NotFound

from conftest import FakeRedis


def product(item_id=5, quantity=1):
    return CartLine(id=item_id, type=ItemType.PRODUCT, name="Tire Shine", price=150, quantity=quantity)


def service(item_id=1, quantity=1, size=SizeTier.LARGE):
    return CartLine(
        id=item_id, type=ItemType.SERVICE, name="Basic Wash", price=200, quantity=quantity, size=size
    )


@pytest.fixture(params=["memory", "redis"])
def store(request):
    if request.param == "memory":
        return MemoryCartStore()
    return RedisCartStore(FakeRedis(), ttl_seconds=60)


def test_identical_lines_merge(store):
    store.add("s1", product(quantity=2))
    store.add("s1", product(quantity=3))
    store.add("s1", product())

    lines = store.snapshot("s1")
    assert len(lines) == 1
    assert lines[0].quantity == 6


def test_services_with_different_sizes_stay_separate(store):
    store.add("s1", service(size=SizeTier.SMALL))
    store.add("s1", service(size=SizeTier.LARGE))
    store.add("s1", service(size=SizeTier.SMALL))

    lines = store.snapshot("s1")
    assert [(line.size, line.quantity) for line in lines] == [
        (SizeTier.SMALL, 2),
        (SizeTier.LARGE, 1),
    ]


def test_snapshot_keeps_insertion_order(store):
    store.add("s1", service())
    store.add("s1", product(item_id=6))
    store.add("s1", product(item_id=5))

    assert [line.id for line in store.snapshot("s1")] == [1, 6, 5]


def test_remove_one_decrements_then_drops(store):
    store.add("s1", product(quantity=2))

    remaining = store.remove_one("s1", 5, ItemType.PRODUCT)
    assert remaining.quantity == 1

    assert store.remove_one("s1", "5", ItemType.PRODUCT) is None
    assert store.snapshot("s1") == []


def test_add_then_remove_single_unit_leaves_no_line(store):
    store.add("s1", service())
    store.remove_one("s1", 1, ItemType.SERVICE, SizeTier.LARGE)
    assert store.snapshot("s1") == []


def test_remove_one_on_empty_cart_fails(store):
    with pytest.raises(NotFound):
        store.remove_one("s1", 5, ItemType.PRODUCT)


def test_remove_one_respects_size(store):
    store.add("s1", service(size=SizeTier.SMALL))
    with pytest.raises(NotFound):
        store.remove_one("s1", 1, ItemType.SERVICE, SizeTier.LARGE)
    assert store.snapshot("s1")[0].quantity == 1


def test_sessions_are_isolated(store):
    store.add("alice", product())
    store.add("bob", service())

    assert [line.type for line in store.snapshot("alice")] == [ItemType.PRODUCT]
    assert [line.type for line in store.snapshot("bob")] == [ItemType.SERVICE]

    store.clear("alice")
    assert store.snapshot("alice") == []
    assert len(store.snapshot("bob")) == 1


def test_snapshot_is_a_copy(store):
    store.add("s1", product())
    store.snapshot("s1")[0].quantity = 99
    assert store.snapshot("s1")[0].quantity == 1


def test_redis_store_serializes_lines_with_ttl():
    redis = FakeRedis()
    store = RedisCartStore(redis, ttl_seconds=120)
    store.add("s1", service(size=SizeTier.XLARGE))

    stored = json.loads(redis.data["cart:s1"])
    assert stored[0]["size"] == "xlarge"
    assert stored[0]["type"] == "service"
    assert redis.ttls["cart:s1"] == 120

    store.clear("s1")
    assert "cart:s1" not in redis.data


def test_remove_one_product_ignores_size(store):
    store.add("s1", product(quantity=2))
    remaining = store.remove_one("s1", 5, ItemType.PRODUCT, SizeTier.LARGE)
    assert remaining.quantity == 1
