"""Admin schemas"""

from ...schemas import CamelModel


class DashboardStats(CamelModel):
    total_users: int
    total_doctors: int
    pending_doctors: int
    total_appointments: int
    today_appointments: int
    total_revenue: float
