import copy
import json
from typing import Any, Callable, Optional

import httpx
import pytest
from botocore.exceptions import ClientError

from carwash_pos.domain.cart.store import MemoryCartStore
from carwash_pos.storage import BlobStore
from carwash_pos.supabase import SupabaseClient

RESERVED_PARAMS = ("select", "order", "limit")


def _matches(row: dict[str, Any], column: str, condition: str) -> bool:
    op, _, value = condition.partition(".")
    actual = row.get(column)
    if op == "eq":
        return str(actual) == value
    if op == "in":
        return str(actual) in value.strip("()").split(",")
    raise AssertionError(f"unsupported operator {op}")


class FakePostgrest:
    """Minimal PostgREST emulation over in-memory tables (eq/in filters, order, limit)"""

    def __init__(self, tables: dict[str, list[dict[str, Any]]], id_columns: Optional[dict] = None):
        self.tables = copy.deepcopy(tables)
        self.id_columns = id_columns or {}
        self.requests: list[tuple[str, str, list[tuple[str, str]], Any]] = []
        self.failures: set[tuple[str, str]] = set()
        self.before_request: Optional[Callable[[str, str, list], None]] = None

    def rows(self, table: str) -> list[dict[str, Any]]:
        return self.tables.setdefault(table, [])

    def row(self, table: str, column: str, value: Any) -> Optional[dict[str, Any]]:
        return next((r for r in self.rows(table) if r.get(column) == value), None)

    def writes(self, method: str = "PATCH", table: Optional[str] = None) -> list:
        return [r for r in self.requests if r[0] == method and (table is None or r[1] == table)]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        method = request.method
        table = request.url.path.rsplit("/", 1)[-1]
        params = list(request.url.params.multi_items())
        body = json.loads(request.content) if request.content else None
        self.requests.append((method, table, params, body))

        if self.before_request:
            self.before_request(method, table, params)
        if (method, table) in self.failures:
            return httpx.Response(500, json={"message": "boom"})

        filters = [(k, v) for k, v in params if k not in RESERVED_PARAMS]
        matching = [
            r for r in self.rows(table) if all(_matches(r, col, cond) for col, cond in filters)
        ]

        if method == "GET":
            result = [copy.deepcopy(r) for r in matching]
            options = dict(params)
            if "order" in options:
                column, _, direction = options["order"].partition(".")
                result.sort(
                    key=lambda r: (r.get(column) is None, r.get(column)),
                    reverse=direction == "desc",
                )
            if "limit" in options:
                result = result[: int(options["limit"])]
            return httpx.Response(200, json=result)

        if method == "PATCH":
            for r in matching:
                r.update(body)
            return httpx.Response(200, json=[copy.deepcopy(r) for r in matching])

        if method == "POST":
            row = dict(body)
            id_column = self.id_columns.get(table)
            if id_column and id_column not in row:
                row[id_column] = len(self.rows(table)) + 1
            self.rows(table).append(row)
            return httpx.Response(201, json=[copy.deepcopy(row)])

        return httpx.Response(405)

    def client(self, name: str) -> SupabaseClient:
        return SupabaseClient(
            f"https://{name}.supabase.test", "test-key", name=name, transport=httpx.MockTransport(self)
        )


class FakeS3:
    def __init__(self, fail: bool = False):
        self.objects: dict[str, dict[str, Any]] = {}
        self.fail = fail

    def put_object(self, **kwargs):
        if self.fail:
            raise ClientError({"Error": {"Code": "500", "Message": "boom"}}, "PutObject")
        self.objects[kwargs["Key"]] = kwargs
        return {"ETag": "etag"}


class FakeRedis:
    """Enough of redis.Redis for RedisCartStore"""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    def get(self, key):
        return self.data.get(key)

    def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl

    def delete(self, key):
        self.data.pop(key, None)
        self.ttls.pop(key, None)

    def multi(self):
        pass

    def transaction(self, func, *watches, value_from_callable=False, **kwargs):
        result = func(self)
        return result if value_from_callable else []


INVENTORY_TABLES = {
    "products": [
        {"product_id": 5, "name": "Tire Shine", "price": 150.0, "stock": 10, "category_id": 3},
        {"product_id": 6, "name": "Air Freshener", "price": 45.5, "stock": 4, "category_id": 3},
        {"product_id": 7, "name": "Car Shampoo", "price": 80.0, "stock": 2, "category_id": 1},
        {"product_id": 8, "name": "Wax", "price": 200.0, "stock": 20, "category_id": 1},
    ],
    "services": [
        {
            "service_id": 1,
            "service_name": "Basic Wash",
            "small": 100.0,
            "medium": 150.0,
            "large": 200.0,
            "xlarge": None,
            "xxlarge": None,
            "services_category": {"category_name": "Wash"},
        },
        {
            "service_id": 2,
            "service_name": "Ceramic Coating",
            "small": None,
            "medium": None,
            "large": None,
            "xlarge": None,
            "xxlarge": None,
        },
        {
            "service_id": 3,
            "service_name": "Wax Polish",
            "small": None,
            "medium": 300.0,
            "large": None,
            "xlarge": None,
            "xxlarge": 500.0,
        },
    ],
    "service_products": [
        {"service_id": 1, "product_id": 7, "quantity": 1, "variant_id": 1},
        {"service_id": 1, "product_id": 7, "quantity": 1, "variant_id": 3},
        {"service_id": 1, "product_id": 8, "quantity": 2, "variant_id": 3},
        {"service_id": 3, "product_id": 8, "quantity": 1, "variant_id": 5},
    ],
}


@pytest.fixture
def inventory() -> FakePostgrest:
    return FakePostgrest(INVENTORY_TABLES)


@pytest.fixture
def sales() -> FakePostgrest:
    return FakePostgrest({"orders": []}, id_columns={"orders": "order_id"})


@pytest.fixture
def inventory_db(inventory) -> SupabaseClient:
    return inventory.client("inventory")


@pytest.fixture
def sales_db(sales) -> SupabaseClient:
    return sales.client("sales")


@pytest.fixture
def cart_store() -> MemoryCartStore:
    return MemoryCartStore()


@pytest.fixture
def s3() -> FakeS3:
    return FakeS3()


@pytest.fixture
def blob_store(s3) -> BlobStore:
    return BlobStore(
        client=s3,
        bucket="payment_proof",
        public_base_url="https://sales.supabase.test/storage/v1/object/public",
    )


def stock(fake: FakePostgrest, product_id: int) -> int:
    return fake.row("products", "product_id", product_id)["stock"]
