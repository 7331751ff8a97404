"""
日期标签服务类
处理标签的创建、描述更新、删除以及标签与日期的关联

每个写操作是一个独立事务：成功提交，任何异常回滚，
保证关联行与 usage_count 同时生效或同时失效。
"""
# 标准库导包
import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import Optional, List, Dict, Tuple

# 第三方库导包
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from config import settings
from exceptions import InvalidRange, StoreUnavailable, TagValidationError
from models import TagFilter, TagMatchMode
from storage.models.day_tag import DayTag
from storage.models.entry import Entry
from storage.repositories.day_tag_repository import DayTagRepository
from utils.tag_utils import validate_tag_name

# 配置日志
logger = logging.getLogger(__name__)


class DayTagService:
    """日期标签服务类"""

    def __init__(self, session: AsyncSession):
        """
        初始化日期标签服务

        Args:
            session: 数据库会话
        """
        self.session = session
        self.tag_repo = DayTagRepository(session)

    @asynccontextmanager
    async def _transaction(self, operation_name: str):
        """提交或回滚当前会话中的写操作"""
        try:
            yield
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"{operation_name} 提交失败: {str(e)}")
            raise StoreUnavailable(f"{operation_name} 提交失败: {e}") from e
        except Exception as e:
            await self.session.rollback()
            logger.error(f"{operation_name} 失败，已回滚: {str(e)}")
            raise

    # ========== 标签管理 ==========

    async def create_tag(self, display_name: str, description: Optional[str] = None) -> DayTag:
        """
        创建标签，同名（规范化后）标签已存在时原样返回

        Args:
            display_name: 显示名称
            description: 描述（已存在的标签不会被更新）

        Returns:
            标签
        """
        errors = validate_tag_name(display_name)
        if errors:
            raise TagValidationError(errors)

        async with self._transaction("create_tag"):
            tag = await self.tag_repo.create_tag(display_name, description)
        return tag

    async def update_tag_description(self, tag_id: int, description: Optional[str]) -> DayTag:
        """更新标签描述，None表示清空"""
        async with self._transaction("update_tag_description"):
            tag = await self.tag_repo.update_tag_description(tag_id, description)
        logger.info(f"更新标签描述成功: tag_id={tag_id}")
        return tag

    async def delete_tag(self, tag_id: int) -> None:
        """删除标签及其全部日期关联"""
        async with self._transaction("delete_tag"):
            await self.tag_repo.delete_tag(tag_id)

    async def get_tag(self, tag_id: int) -> DayTag:
        """获取标签，不存在时抛出 NotFoundError"""
        return await self.tag_repo.get_existing(tag_id)

    async def get_all_tags(self) -> List[DayTag]:
        """获取全部标签（按使用次数、名称排序）"""
        return await self.tag_repo.get_all_tags()

    # ========== 标签与日期关联 ==========

    async def attach_tag_to_date(self, tag_id: int, day: date) -> bool:
        """
        为日期添加标签，重复添加不产生变更

        Args:
            tag_id: 标签ID
            day: 日期

        Returns:
            是否新建了关联
        """
        async with self._transaction("attach_tag_to_date"):
            changed = await self.tag_repo.attach_tag_to_date(
                tag_id, day, max_per_day=settings.DAY_TAG_MAX_PER_DAY
            )
        if changed:
            logger.info(f"添加日期标签成功: tag_id={tag_id}, date={day}")
        return changed

    async def detach_tag_from_date(self, tag_id: int, day: date) -> bool:
        """
        移除日期上的标签，关联不存在时不产生变更

        Args:
            tag_id: 标签ID
            day: 日期

        Returns:
            是否删除了关联
        """
        async with self._transaction("detach_tag_from_date"):
            changed = await self.tag_repo.detach_tag_from_date(tag_id, day)
        if changed:
            logger.info(f"移除日期标签成功: tag_id={tag_id}, date={day}")
        return changed

    async def get_tags_for_date(self, day: date) -> List[DayTag]:
        """获取某日期的标签"""
        return await self.tag_repo.get_tags_for_date(day)

    async def get_dates_with_tag(
        self,
        tag_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> List[str]:
        """获取带有某标签的日期"""
        await self.tag_repo.get_existing(tag_id)
        return await self.tag_repo.get_dates_with_tag(tag_id, start_date, end_date)

    async def get_tagged_dates_in_month(self, year: int, month: int) -> Dict[str, List[str]]:
        """获取某月的日期标签分布"""
        return await self.tag_repo.get_tagged_dates_in_month(year, month)

    async def get_entries_by_tags(
        self,
        tag_filter: TagFilter,
        start_date: date,
        end_date: date
    ) -> List[Tuple[Entry, List[DayTag]]]:
        """
        按日期标签筛选范围内的记录

        Args:
            tag_filter: 标签筛选条件，any 匹配任一标签，all 要求全部标签
            start_date: 开始日期
            end_date: 结束日期

        Returns:
            (记录, 当日标签)元组列表
        """
        if start_date > end_date:
            raise InvalidRange(f"开始日期 {start_date.isoformat()} 晚于结束日期 {end_date.isoformat()}")

        return await self.tag_repo.get_entries_by_tags(
            tag_filter.tags,
            start_date,
            end_date,
            match_all=tag_filter.match_mode == TagMatchMode.ALL
        )

    # ========== 管理操作 ==========

    async def reconcile_usage_counts(self) -> Dict[int, Tuple[int, int]]:
        """全量校对 usage_count"""
        async with self._transaction("reconcile_usage_counts"):
            corrected = await self.tag_repo.reconcile_usage_counts()
        logger.info(f"标签计数校对完成: 修正{len(corrected)}个标签")
        return corrected
