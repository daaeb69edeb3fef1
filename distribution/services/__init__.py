"""
Distribution services module
"""

from .workflow import DistributionWorkflowService
from .analysis import DistributionAnalysisService
from .shortage import SeasonStockLedger

__all__ = [
    'DistributionWorkflowService',
    'DistributionAnalysisService',
    'SeasonStockLedger',
]
