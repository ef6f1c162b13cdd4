"""
Environment-driven configuration for the Collections UI.

Values are read once at import time. The service kind defaults to the
in-memory demo backend unless Supabase credentials are present.
"""

import os

_TRUTHY = {"1", "true", "yes"}


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in _TRUTHY


SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_KEY = os.getenv("SUPABASE_KEY", "")

SERVICE_KIND = os.getenv(
    "COLLECTIONS_UI_SERVICE", "impl" if SUPABASE_URL else "demo"
).lower()

# Signed-in collector; authentication itself lives outside this app
USER_ID = os.getenv("COLLECTIONS_UI_USER_ID", "demo-user") or None

PAGE_SIZE = int(os.getenv("COLLECTIONS_UI_PAGE_SIZE", "100"))
ANALYTICS_TTL = int(os.getenv("COLLECTIONS_UI_ANALYTICS_TTL", "60"))
DEMO_LATENCY = float(os.getenv("COLLECTIONS_UI_DEMO_LATENCY", "0"))
APP_PORT = int(os.getenv("COLLECTIONS_UI_PORT", "8000"))
SHOW_ANALYTICS = _flag("COLLECTIONS_UI_SHOW_ANALYTICS", "true")

APP_TITLE = "Collections"
APP_SUBTITLE = "Customers, invoices, payments and collection tickets."
