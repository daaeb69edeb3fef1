"""
Dashboard services module
"""

from .stats import DashboardStatsService
from .completion import CompletionReportService
from .demographics import RSBSADemographicsService

__all__ = [
    'DashboardStatsService',
    'CompletionReportService',
    'RSBSADemographicsService',
]
