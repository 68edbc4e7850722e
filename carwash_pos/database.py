import logging

from .config import (
    APPOINTMENTS_SUPABASE_KEY,
    APPOINTMENTS_SUPABASE_URL,
    INVENTORY_SUPABASE_KEY,
    INVENTORY_SUPABASE_URL,
    SALES_SUPABASE_KEY,
    SALES_SUPABASE_URL,
)
from .supabase import SupabaseClient

logger = logging.getLogger(__name__)

inventory_db = SupabaseClient(INVENTORY_SUPABASE_URL, INVENTORY_SUPABASE_KEY, name="inventory")
sales_db = SupabaseClient(SALES_SUPABASE_URL, SALES_SUPABASE_KEY, name="sales")
appointments_db = SupabaseClient(
    APPOINTMENTS_SUPABASE_URL, APPOINTMENTS_SUPABASE_KEY, name="appointments"
)

for _db in (inventory_db, sales_db, appointments_db):
    if not _db.base_url:
        logger.warning(f"⚠️ {_db.name} Supabase URL not configured")


def get_inventory_db() -> SupabaseClient:
    return inventory_db


def get_sales_db() -> SupabaseClient:
    return sales_db


def get_appointments_db() -> SupabaseClient:
    return appointments_db
