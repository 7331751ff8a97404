"""
Services layer
业务逻辑层
"""

from .day_tag_service import DayTagService
from .export_aggregator import ExportAggregator, AggregatedExport
from .export_service import ExportService

__all__ = [
    "DayTagService",
    "ExportAggregator",
    "AggregatedExport",
    "ExportService"
]
