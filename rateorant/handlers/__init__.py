# rateorant/handlers/__init__.py
from . import (
    auth_router,
    dashboard_router,
    fallback_router,
    main_router,
    notifications_router,
    owner_router,
    restaurant_router,
)

# fallback_router goes last: it answers whatever nobody else handled
routers = [
    main_router.router,
    auth_router.router,
    dashboard_router.router,
    restaurant_router.router,
    owner_router.router,
    notifications_router.router,
    fallback_router.router,
]
