"""
DayTagRepository - 日期标签Repository
"""
# 标准库导包
import logging
from datetime import date as date_type
from typing import Optional, List, Dict, Tuple, Union

# 第三方库导包
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from exceptions import NotFoundError, MaxTagsExceededError
from storage.decorators import handle_store_errors
from storage.models.day_tag import DayTag
from storage.models.entry import Entry
from storage.repositories.base import BaseRepository
from storage.repositories.day_tag_association_repository import DayTagAssociationRepository
from storage.repositories.entry_repository import EntryRepository
from utils.date_utils import to_iso_date, month_date_range
from utils.tag_utils import normalize_tag_name

# 配置日志
logger = logging.getLogger(__name__)

DateLike = Union[date_type, str]


class DayTagRepository(BaseRepository[DayTag]):
    """日期标签Repository

    负责标签生命周期以及标签与日期的关联。usage_count 是关联日期数的物化计数，
    在关联增删的同一事务中增量维护，只有 reconcile_usage_counts 会全量重算。
    """

    def __init__(self, session: AsyncSession):
        super().__init__(session, DayTag)
        self.association_repo = DayTagAssociationRepository(session)

    async def get_by_name(self, name: str) -> Optional[DayTag]:
        """
        根据名称获取标签（自动规范化）

        Args:
            name: 标签名称或显示名称

        Returns:
            标签实例或None
        """
        results = await self.query_by_filters(
            filters={"name": normalize_tag_name(name)},
            limit=1
        )
        return results[0] if results else None

    async def get_existing(self, tag_id: int) -> DayTag:
        """获取标签，不存在时抛出 NotFoundError"""
        tag = await self.get_by_id(tag_id)
        if tag is None:
            raise NotFoundError(f"标签不存在: tag_id={tag_id}")
        return tag

    @handle_store_errors("get_all_tags")
    async def get_all_tags(self) -> List[DayTag]:
        """
        获取所有标签，按使用次数降序、显示名称升序排列

        Returns:
            标签列表
        """
        query = select(DayTag).order_by(DayTag.usage_count.desc(), DayTag.display_name.asc())
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def insert_tag(
        self,
        display_name: str,
        description: Optional[str] = None
    ) -> DayTag:
        """
        直接插入标签，不做查重

        名称重复时由唯一索引触发 ConstraintViolation。
        """
        return await self.create(
            name=normalize_tag_name(display_name),
            display_name=display_name.strip(),
            description=description,
            usage_count=0
        )

    async def create_tag(
        self,
        display_name: str,
        description: Optional[str] = None
    ) -> DayTag:
        """
        创建标签，规范化名称已存在时直接返回已有标签

        这是"查找或插入"而非upsert：已有标签的 description 和 display_name 不会被修改，
        传入的 description 会被忽略。

        Args:
            display_name: 显示名称
            description: 描述（可选）

        Returns:
            新建或已有的标签
        """
        existing = await self.get_by_name(display_name)
        if existing:
            if description is not None and description != existing.description:
                logger.info(f"标签已存在，忽略新描述: tag_id={existing.id}, name={existing.name}")
            return existing

        tag = await self.insert_tag(display_name, description)
        logger.info(f"创建标签成功: tag_id={tag.id}, name={tag.name}")
        return tag

    async def update_tag_description(self, tag_id: int, description: Optional[str]) -> DayTag:
        """
        更新标签描述，传入None表示清空

        Args:
            tag_id: 标签ID
            description: 新描述

        Returns:
            更新后的标签
        """
        await self.get_existing(tag_id)
        return await self.update_by_id(tag_id, description=description)

    async def delete_tag(self, tag_id: int) -> None:
        """
        删除标签，关联行由外键 ON DELETE CASCADE 一并删除

        Args:
            tag_id: 标签ID
        """
        await self.get_existing(tag_id)
        await self.delete_by_id(tag_id)
        logger.info(f"删除标签成功: tag_id={tag_id}")

    @handle_store_errors("adjust_usage_count")
    async def _adjust_usage_count(self, tag: DayTag, delta: int) -> None:
        """在当前事务中增减 usage_count"""
        await self.session.execute(
            update(DayTag)
            .where(DayTag.id == tag.id)
            .values(usage_count=DayTag.usage_count + delta)
            .execution_options(synchronize_session=False)
        )
        await self.session.flush()
        await self.session.refresh(tag)

    async def attach_tag_to_date(
        self,
        tag_id: int,
        date: DateLike,
        max_per_day: Optional[int] = None
    ) -> bool:
        """
        为日期添加标签

        关联已存在时不做任何修改；新建关联时 usage_count 加1。两次写入处于同一事务，
        由调用方统一提交或回滚。

        Args:
            tag_id: 标签ID
            date: 日期
            max_per_day: 单日标签上限（可选）

        Returns:
            是否新建了关联
        """
        tag = await self.get_existing(tag_id)
        iso_date = to_iso_date(date)

        if await self.association_repo.get_pair(tag_id, iso_date):
            return False

        if max_per_day is not None:
            tag_count = await self.association_repo.count_for_date(iso_date)
            if tag_count >= max_per_day:
                raise MaxTagsExceededError(iso_date, max_per_day)

        await self.association_repo.create(tag_id=tag_id, date=iso_date)
        await self._adjust_usage_count(tag, 1)
        return True

    async def detach_tag_from_date(self, tag_id: int, date: DateLike) -> bool:
        """
        移除日期上的标签，关联不存在时不做任何修改

        Args:
            tag_id: 标签ID
            date: 日期

        Returns:
            是否删除了关联
        """
        iso_date = to_iso_date(date)
        removed = await self.association_repo.remove_pair(tag_id, iso_date)
        if not removed:
            return False

        tag = await self.get_existing(tag_id)
        await self._adjust_usage_count(tag, -1)
        return True

    async def get_tags_for_date(self, date: DateLike) -> List[DayTag]:
        """获取某日期的标签（含描述），按添加顺序排列"""
        return await self.association_repo.get_tags_for_date(to_iso_date(date))

    async def get_dates_with_tag(
        self,
        tag_id: int,
        start_date: Optional[DateLike] = None,
        end_date: Optional[DateLike] = None
    ) -> List[str]:
        """获取带有某标签的日期列表（升序）"""
        return await self.association_repo.get_dates_with_tag(
            tag_id,
            to_iso_date(start_date) if start_date else None,
            to_iso_date(end_date) if end_date else None
        )

    async def get_tagged_dates_in_month(self, year: int, month: int) -> Dict[str, List[str]]:
        """
        获取某月有标签的日期，用于日历渲染

        Args:
            year: 年份
            month: 月份（1-12）

        Returns:
            {日期: [标签显示名称]}
        """
        start_date, end_date = month_date_range(year, month)
        rows = await self.association_repo.get_associations_with_tags(start_date, end_date)

        tagged_dates: Dict[str, List[str]] = {}
        for association, tag in rows:
            tagged_dates.setdefault(association.date, []).append(tag.display_name)
        return tagged_dates

    async def reconcile_usage_counts(self) -> Dict[int, Tuple[int, int]]:
        """
        全量重算 usage_count，修复计数漂移（管理操作，不在常规路径上调用）

        Returns:
            被修正的标签 {tag_id: (原计数, 新计数)}
        """
        actual_counts = await self.association_repo.count_dates_by_tag()
        corrected: Dict[int, Tuple[int, int]] = {}

        for tag in await self.get_all_tags():
            actual = actual_counts.get(tag.id, 0)
            if tag.usage_count != actual:
                corrected[tag.id] = (tag.usage_count, actual)
                await self.update_by_id(tag.id, usage_count=actual)

        if corrected:
            logger.warning(f"修正标签计数漂移: {corrected}")
        return corrected

    async def resolve_tag_names(self, tag_names: List[str]) -> List[DayTag]:
        """
        按名称查找标签，任一名称不存在时抛出 NotFoundError

        Args:
            tag_names: 标签名称列表（自动规范化）

        Returns:
            标签列表，与输入顺序一致
        """
        tags = []
        for tag_name in tag_names:
            tag = await self.get_by_name(tag_name)
            if tag is None:
                raise NotFoundError(f"标签不存在: name={normalize_tag_name(tag_name)}")
            tags.append(tag)
        return tags

    async def get_dates_matching_tags(
        self,
        tag_names: List[str],
        start_date: DateLike,
        end_date: DateLike,
        match_all: bool = False
    ) -> List[str]:
        """
        获取范围内带有任一（或全部）指定标签的日期

        Args:
            tag_names: 标签名称列表
            start_date: 开始日期
            end_date: 结束日期
            match_all: 是否要求带有全部标签

        Returns:
            日期列表（升序）
        """
        tags = await self.resolve_tag_names(tag_names)
        return await self.association_repo.get_dates_matching_tags(
            [tag.id for tag in tags],
            to_iso_date(start_date),
            to_iso_date(end_date),
            match_all=match_all
        )

    async def get_entries_by_tags(
        self,
        tag_names: List[str],
        start_date: DateLike,
        end_date: DateLike,
        match_all: bool = False
    ) -> List[Tuple[Entry, List[DayTag]]]:
        """
        获取带有指定标签的日期上的记录，并附带每条记录所在日期的全部标签

        Args:
            tag_names: 标签名称列表
            start_date: 开始日期
            end_date: 结束日期
            match_all: 是否要求日期带有全部标签

        Returns:
            (记录, 当日标签)元组列表，按日期、时间升序排列
        """
        dates = await self.get_dates_matching_tags(tag_names, start_date, end_date, match_all)
        if not dates:
            return []

        entries = await EntryRepository(self.session).get_by_date_range(start_date, end_date, dates=dates)
        tags_by_date = await self.association_repo.get_tags_for_dates(sorted({entry.date for entry in entries}))
        return [(entry, tags_by_date.get(entry.date, [])) for entry in entries]
