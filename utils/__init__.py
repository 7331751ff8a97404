"""
通用工具
"""

from .tag_utils import normalize_tag_name, validate_tag_name, parse_tags_string, format_tags_string
from .date_utils import to_iso_date, month_date_range

__all__ = [
    "normalize_tag_name",
    "validate_tag_name",
    "parse_tags_string",
    "format_tags_string",
    "to_iso_date",
    "month_date_range",
]
