"""API route modules."""

from orderflow.api.routes.health import router as health_router
from orderflow.api.routes.inventory import router as inventory_router
from orderflow.api.routes.ledger import router as ledger_router
from orderflow.api.routes.notifications import router as notifications_router
from orderflow.api.routes.orders import router as orders_router
from orderflow.api.routes.pricing_rules import router as pricing_rules_router
from orderflow.api.routes.quick_order import router as quick_order_router

__all__ = [
    "health_router",
    "orders_router",
    "inventory_router",
    "ledger_router",
    "pricing_rules_router",
    "notifications_router",
    "quick_order_router",
]
