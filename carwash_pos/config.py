import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

PORT = int(os.getenv("PORT", "8002"))

# Inventory Supabase project (products, services, service_products)
INVENTORY_SUPABASE_URL = os.getenv("INVENTORY_SUPABASE_URL", "")
INVENTORY_SUPABASE_KEY = os.getenv("INVENTORY_SUPABASE_KEY", "")

# Sales / POS Supabase project (orders + payment proof bucket)
SALES_SUPABASE_URL = os.getenv("SALES_SUPABASE_URL") or os.getenv("POS_SUPABASE_URL", "")
SALES_SUPABASE_KEY = os.getenv("SALES_SUPABASE_KEY") or os.getenv("POS_SUPABASE_KEY", "")
ORDERS_TABLE = os.getenv("ORDERS_TABLE", "orders")

# Appointments Supabase project
APPOINTMENTS_SUPABASE_URL = os.getenv("APPOINTMENTS_SUPABASE_URL") or os.getenv("SUPABASE_URL", "")
APPOINTMENTS_SUPABASE_KEY = os.getenv("APPOINTMENTS_SUPABASE_KEY") or os.getenv("SUPABASE_KEY", "")

# Request timeout for PostgREST calls (seconds)
SUPABASE_TIMEOUT = float(os.getenv("SUPABASE_TIMEOUT", "10"))

# Payment proof storage (Supabase S3-compatible endpoint)
SUPABASE_BUCKET = os.getenv("SUPABASE_BUCKET", "payment_proof")
STORAGE_S3_ENDPOINT = os.getenv(
    "STORAGE_S3_ENDPOINT", f"{SALES_SUPABASE_URL}/storage/v1/s3" if SALES_SUPABASE_URL else ""
)
STORAGE_ACCESS_KEY_ID = os.getenv("STORAGE_ACCESS_KEY_ID")
STORAGE_SECRET_ACCESS_KEY = os.getenv("STORAGE_SECRET_ACCESS_KEY")
STORAGE_REGION = os.getenv("STORAGE_REGION", "us-east-1")
STORAGE_PUBLIC_URL = os.getenv(
    "STORAGE_PUBLIC_URL", f"{SALES_SUPABASE_URL}/storage/v1/object/public" if SALES_SUPABASE_URL else ""
)
MAX_PAYMENT_PROOF_BYTES = int(os.getenv("MAX_PAYMENT_PROOF_BYTES", str(10 * 1024 * 1024)))

# Stock deduction: number of compare-and-swap attempts per product
STOCK_CAS_ATTEMPTS = int(os.getenv("STOCK_CAS_ATTEMPTS", "3"))

# Category listed by GET /products
RETAIL_CATEGORY_ID = int(os.getenv("RETAIL_CATEGORY_ID", "3"))

# Cart storage: "memory" (single process) or "redis" (shared between workers)
CART_BACKEND = os.getenv("CART_BACKEND", "memory").lower()
CART_TTL_SECONDS = int(os.getenv("CART_TTL_SECONDS", str(12 * 3600)))
DEFAULT_SESSION_ID = "default"

# Frontend origins allowed by CORS (comma separated, "*" for any)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
