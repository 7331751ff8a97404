"""
标签工具函数
标签名称规范化、校验和备注标签字符串解析
"""
# 标准库导包
import re
from typing import List

# 项目内部导包
from config import settings

TAG_ALLOWED_PATTERN = re.compile(r"^[A-Za-z0-9\s\-_]+$")
TAG_FORBIDDEN_CHARS = re.compile(r"[<>{}\[\]\\/|\"']")


def normalize_tag_name(tag_name: str) -> str:
    """
    规范化标签名称（去除首尾空格并转小写），作为唯一键使用

    Args:
        tag_name: 原始标签名称

    Returns:
        规范化后的名称
    """
    return tag_name.strip().lower()


def validate_tag_name(tag_name: str) -> List[str]:
    """
    校验标签显示名称

    Args:
        tag_name: 标签显示名称

    Returns:
        错误信息列表，为空表示通过
    """
    errors = []

    if len(tag_name.strip()) < 1:
        errors.append("标签名称不能为空")
    if len(tag_name) > settings.DAY_TAG_NAME_MAX_LENGTH:
        errors.append(f"标签名称不能超过{settings.DAY_TAG_NAME_MAX_LENGTH}个字符")
    if TAG_FORBIDDEN_CHARS.search(tag_name):
        errors.append("标签名称包含非法字符")
    elif tag_name.strip() and not TAG_ALLOWED_PATTERN.match(tag_name):
        errors.append("标签名称只能包含字母、数字、空格、连字符和下划线")

    return errors


def parse_tags_string(tags_string: str) -> List[str]:
    """解析逗号分隔的标签字符串，忽略空项"""
    if not tags_string or not tags_string.strip():
        return []
    return [tag.strip() for tag in tags_string.split(",") if tag.strip()]


def format_tags_string(tags: List[str]) -> str:
    """将标签列表格式化为逗号分隔字符串"""
    return ", ".join(tags)
