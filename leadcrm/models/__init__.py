# Import all models so relationship strings resolve
from leadcrm.models.user import User, UserRole
from leadcrm.models.lead import Lead, LeadStatus, LeadQuality
from leadcrm.models.site_visit import SiteVisit
from leadcrm.models.task import Task

__all__ = [
    "User",
    "UserRole",
    "Lead",
    "LeadStatus",
    "LeadQuality",
    "SiteVisit",
    "Task",
]
