"""
Utils layer
工具函数层
"""

from .export_encoders import BaseExportEncoder, CsvExportEncoder, TxtExportEncoder, get_encoder
from .export_sinks import BaseExportSink, LocalFileSink, BaseShareSink, DirectoryShareSink

__all__ = [
    "BaseExportEncoder",
    "CsvExportEncoder",
    "TxtExportEncoder",
    "get_encoder",
    "BaseExportSink",
    "LocalFileSink",
    "BaseShareSink",
    "DirectoryShareSink",
]
