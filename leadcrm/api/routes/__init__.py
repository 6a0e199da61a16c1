from leadcrm.api.routes.auth import router as auth_router
from leadcrm.api.routes.leads import router as leads_router
from leadcrm.api.routes.site_visits import router as site_visits_router
from leadcrm.api.routes.tasks import router as tasks_router
from leadcrm.api.routes.users import router as users_router
from leadcrm.api.routes.dashboard import router as dashboard_router

__all__ = [
    "auth_router",
    "leads_router",
    "site_visits_router",
    "tasks_router",
    "users_router",
    "dashboard_router"
]
