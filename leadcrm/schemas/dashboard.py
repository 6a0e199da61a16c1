from pydantic import BaseModel
from uuid import UUID


class AdminDashboardStats(BaseModel):
    total_leads: int = 0
    new_leads: int = 0
    in_progress_leads: int = 0
    converted_leads: int = 0
    total_users: int = 0
    today_tasks: int = 0


class UserDashboardStats(BaseModel):
    assigned_leads: int = 0
    in_progress_leads: int = 0
    converted_leads: int = 0
    today_tasks: int = 0


class UserPerformance(BaseModel):
    user_id: UUID
    user_name: str
    assigned_leads: int = 0
    converted_leads: int = 0
    conversion_rate: int = 0  # whole percent
    conversion_label: str
