"""
存储层装饰器
将底层数据库异常包装为带上下文的业务异常
"""
# 标准库导包
import logging
from functools import wraps
from typing import Callable

# 第三方库导包
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

# 项目内部导包
from exceptions import ConstraintViolation, StoreUnavailable

# 配置日志
logger = logging.getLogger(__name__)


def handle_store_errors(operation_name: str):
    """
    包装异步Repository方法的数据库异常

    IntegrityError 转为 ConstraintViolation，其余 SQLAlchemyError 转为 StoreUnavailable，
    业务异常原样抛出。

    Args:
        operation_name: 操作名称，写入异常信息

    Returns:
        装饰器函数
    """

    def decorator(function: Callable) -> Callable:
        @wraps(function)
        async def wrapper(*args, **kwargs):
            try:
                return await function(*args, **kwargs)
            except IntegrityError as e:
                logger.error(f"{operation_name} 违反数据约束: {str(e.orig)}")
                raise ConstraintViolation(f"{operation_name} 违反数据约束: {e.orig}") from e
            except SQLAlchemyError as e:
                logger.error(f"{operation_name} 存储访问失败: {str(e)}")
                raise StoreUnavailable(f"{operation_name} 存储访问失败: {e}") from e

        return wrapper

    return decorator
