"""Dashboard statistics use cases."""

from udhyogunity.application.use_cases.dashboard.dashboard_stats import GetDashboardStatsUseCase

__all__ = ["GetDashboardStatsUseCase"]
