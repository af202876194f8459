# warehouse/routers/__init__.py

from .users.user_router import router as user_router

from .auth.auth_router import router as auth_router
from .auth.activity_router import router as activity_router

from .catalog.item_router import router as item_router
from .catalog.location_router import router as location_router
from .catalog.category_router import router as category_router

from .inventory.stock_router import router as stock_router
from .inventory.borrow_router import router as borrow_router
from .inventory.flow_router import router as flow_router

from .dashboard.dashboard_router import router as dashboard_router


__all__ = [
"user_router",

"auth_router",
"activity_router",

"item_router",
"location_router",
"category_router",

"stock_router",
"borrow_router",
"flow_router",

"dashboard_router",
]
