"""Dashboard schemas."""

from backend.app.schemas.base import ApiModel, ReadModel, UtcDatetime


class UpcomingFollowUp(ReadModel):
    business_name: str
    follow_up_date: UtcDatetime


class DashboardStats(ApiModel):
    total_leads: int
    leads_by_status: dict[str, int]
    upcoming_follow_ups: list[UpcomingFollowUp]
