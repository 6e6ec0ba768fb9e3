"""API routes."""

from tess_backoffice.api.routes.auth import router as auth_router
from tess_backoffice.api.routes.employees import router as employees_router
from tess_backoffice.api.routes.health import router as health_router
from tess_backoffice.api.routes.inventory import router as inventory_router
from tess_backoffice.api.routes.production import router as production_router
from tess_backoffice.api.routes.reports import router as reports_router
from tess_backoffice.api.routes.salaries import router as salaries_router
from tess_backoffice.api.routes.sales import router as sales_router

__all__ = [
    "auth_router",
    "employees_router",
    "health_router",
    "inventory_router",
    "production_router",
    "reports_router",
    "salaries_router",
    "sales_router",
]
