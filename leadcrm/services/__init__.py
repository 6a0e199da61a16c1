from leadcrm.services.lead_service import LeadService
from leadcrm.services.site_visit_service import SiteVisitService
from leadcrm.services.task_service import TaskService
from leadcrm.services.import_service import LeadImportService
from leadcrm.services.export_service import LeadExportService
from leadcrm.services.dashboard_service import DashboardService
from leadcrm.services.user_service import UserService

__all__ = [
    "LeadService",
    "SiteVisitService",
    "TaskService",
    "LeadImportService",
    "LeadExportService",
    "DashboardService",
    "UserService",
]
