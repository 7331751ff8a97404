"""
异常定义
日期标签与导出子系统的错误分类，每个异常带有稳定的错误码
"""
# 标准库导包
from typing import List, Optional


class SymptomLogError(Exception):
    """所有业务异常的基类"""

    code = "SymptomLogError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_error_string(self) -> str:
        """生成返回给调用方的错误描述，格式为 '<错误码>: <信息>'"""
        return f"{self.code}: {self.message}"


class InvalidRange(SymptomLogError):
    """开始日期晚于结束日期"""

    code = "InvalidRange"


class NotFoundError(SymptomLogError):
    """标签或记录不存在"""

    code = "NotFoundError"


class ConstraintViolation(SymptomLogError):
    """唯一性等约束被破坏"""

    code = "ConstraintViolation"


class StoreUnavailable(SymptomLogError):
    """底层存储读写失败"""

    code = "StoreUnavailable"


class EncodingFailure(SymptomLogError):
    """导出行数据无法按目标格式编码"""

    code = "EncodingFailure"


class TagValidationError(SymptomLogError):
    """标签名称校验失败"""

    code = "TagValidationError"

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class MaxTagsExceededError(SymptomLogError):
    """单日标签数量超过上限"""

    code = "MaxTagsExceededError"

    def __init__(self, date: str, limit: int, message: Optional[str] = None):
        super().__init__(message or f"{date} 已有 {limit} 个标签，达到上限")
        self.date = date
        self.limit = limit
