"""
日期工具函数
"""
# 标准库导包
import calendar
from datetime import date, datetime
from typing import Tuple, Union


def to_iso_date(value: Union[date, str]) -> str:
    """
    将日期转换为 YYYY-MM-DD 字符串

    Args:
        value: date对象或ISO日期字符串

    Returns:
        ISO日期字符串

    Raises:
        ValueError: 字符串不是合法的 YYYY-MM-DD 日期
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return datetime.strptime(value, "%Y-%m-%d").date().isoformat()


def month_date_range(year: int, month: int) -> Tuple[str, str]:
    """
    获取某月第一天和最后一天

    Args:
        year: 年份
        month: 月份（1-12）

    Returns:
        (开始日期, 结束日期)元组，均为ISO字符串
    """
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1).isoformat(), date(year, month, last_day).isoformat()
