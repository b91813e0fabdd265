"""FastAPI routers and dependencies."""

from adtax.api.analytics import router as analytics_router
from adtax.api.config import router as config_router
from adtax.api.deps import get_factory, get_owner_id, get_store, require_schema
from adtax.api.keys import router as keys_router
from adtax.api.names import router as names_router

__all__ = [
    "get_factory",
    "get_owner_id",
    "get_store",
    "require_schema",
    "analytics_router",
    "config_router",
    "keys_router",
    "names_router",
]
