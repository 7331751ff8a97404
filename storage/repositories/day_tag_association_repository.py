"""
DayTagAssociationRepository - 日期标签关联Repository
"""
# 标准库导包
from typing import Dict, List, Optional, Tuple

# 第三方库导包
from sqlalchemy import select, delete, and_, func
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from storage.decorators import handle_store_errors
from storage.models.day_tag import DayTag
from storage.models.day_tag_association import DayTagAssociation
from storage.repositories.base import BaseRepository


class DayTagAssociationRepository(BaseRepository[DayTagAssociation]):
    """日期标签关联Repository

    只维护关联行本身，usage_count 由 DayTagRepository 在同一事务内维护。
    """

    def __init__(self, session: AsyncSession):
        super().__init__(session, DayTagAssociation)

    async def get_pair(self, tag_id: int, date: str) -> Optional[DayTagAssociation]:
        """
        获取指定标签和日期的关联

        Args:
            tag_id: 标签ID
            date: 日期（YYYY-MM-DD）

        Returns:
            关联实例或None
        """
        results = await self.query_by_filters(
            filters={"tag_id": tag_id, "date": date},
            limit=1
        )
        return results[0] if results else None

    async def count_for_date(self, date: str) -> int:
        """统计某日期已关联的标签数"""
        return await self.count(date=date)

    @handle_store_errors("remove_pair")
    async def remove_pair(self, tag_id: int, date: str) -> bool:
        """
        删除指定标签和日期的关联

        Args:
            tag_id: 标签ID
            date: 日期（YYYY-MM-DD）

        Returns:
            是否删除了关联
        """
        result = await self.session.execute(
            delete(DayTagAssociation).where(
                and_(
                    DayTagAssociation.tag_id == tag_id,
                    DayTagAssociation.date == date
                )
            )
        )
        return result.rowcount > 0

    @handle_store_errors("get_tags_for_date")
    async def get_tags_for_date(self, date: str) -> List[DayTag]:
        """
        获取某日期的所有标签，按关联创建顺序排列

        Args:
            date: 日期（YYYY-MM-DD）

        Returns:
            标签列表
        """
        query = select(DayTag).join(
            DayTagAssociation, DayTagAssociation.tag_id == DayTag.id
        ).where(
            DayTagAssociation.date == date
        ).order_by(
            DayTagAssociation.id.asc()
        )

        result = await self.session.execute(query)
        return list(result.scalars().all())

    @handle_store_errors("get_dates_with_tag")
    async def get_dates_with_tag(
        self,
        tag_id: int,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None
    ) -> List[str]:
        """
        获取带有某标签的所有日期（升序）

        Args:
            tag_id: 标签ID
            start_date: 开始日期（可选，包含）
            end_date: 结束日期（可选，包含）

        Returns:
            日期列表
        """
        conditions = [DayTagAssociation.tag_id == tag_id]
        if start_date:
            conditions.append(DayTagAssociation.date >= start_date)
        if end_date:
            conditions.append(DayTagAssociation.date <= end_date)

        query = select(DayTagAssociation.date).where(
            and_(*conditions)
        ).order_by(DayTagAssociation.date.asc())

        result = await self.session.execute(query)
        return [row[0] for row in result.all()]

    @handle_store_errors("get_associations_with_tags")
    async def get_associations_with_tags(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None
    ) -> List[Tuple[DayTagAssociation, DayTag]]:
        """
        获取关联及其标签，按日期升序、同一日期内按关联创建顺序排列

        Args:
            start_date: 开始日期（可选，包含）
            end_date: 结束日期（可选，包含）

        Returns:
            (关联, 标签)元组列表
        """
        query = select(DayTagAssociation, DayTag).join(
            DayTag, DayTagAssociation.tag_id == DayTag.id
        )
        if start_date:
            query = query.where(DayTagAssociation.date >= start_date)
        if end_date:
            query = query.where(DayTagAssociation.date <= end_date)
        query = query.order_by(DayTagAssociation.date.asc(), DayTagAssociation.id.asc())

        result = await self.session.execute(query)
        return [(row[0], row[1]) for row in result.all()]

    @handle_store_errors("count_dates_by_tag")
    async def count_dates_by_tag(self) -> dict:
        """
        按标签统计关联的不同日期数（全表扫描，仅用于校对）

        Returns:
            {tag_id: 日期数}
        """
        query = select(
            DayTagAssociation.tag_id,
            func.count(func.distinct(DayTagAssociation.date)).label("date_count")
        ).group_by(DayTagAssociation.tag_id)

        result = await self.session.execute(query)
        return {row.tag_id: row.date_count for row in result.all()}

    @handle_store_errors("get_dates_matching_tags")
    async def get_dates_matching_tags(
        self,
        tag_ids: List[int],
        start_date: str,
        end_date: str,
        match_all: bool = False
    ) -> List[str]:
        """
        获取范围内带有指定标签的日期（升序）

        Args:
            tag_ids: 标签ID列表
            start_date: 开始日期（包含）
            end_date: 结束日期（包含）
            match_all: True 要求日期带有全部标签，False 只要求任一标签

        Returns:
            日期列表
        """
        distinct_ids = sorted(set(tag_ids))
        conditions = self._build_filter_conditions({
            "tag_id": distinct_ids,
            "date": {"gte": start_date, "lte": end_date},
        })

        query = select(DayTagAssociation.date).where(
            and_(*conditions)
        ).group_by(DayTagAssociation.date)

        if match_all:
            query = query.having(
                func.count(func.distinct(DayTagAssociation.tag_id)) == len(distinct_ids)
            )

        result = await self.session.execute(query.order_by(DayTagAssociation.date.asc()))
        return [row[0] for row in result.all()]

    @handle_store_errors("get_tags_for_dates")
    async def get_tags_for_dates(self, dates: List[str]) -> Dict[str, List[DayTag]]:
        """
        批量获取多个日期的标签，每个日期内按关联创建顺序排列

        Args:
            dates: 日期列表（YYYY-MM-DD）

        Returns:
            {日期: [标签]}，没有标签的日期不出现
        """
        if not dates:
            return {}

        query = select(DayTagAssociation.date, DayTag).join(
            DayTag, DayTagAssociation.tag_id == DayTag.id
        ).where(
            and_(*self._build_filter_conditions({"date": list(dates)}))
        ).order_by(DayTagAssociation.date.asc(), DayTagAssociation.id.asc())

        result = await self.session.execute(query)
        tags_by_date: Dict[str, List[DayTag]] = {}
        for tag_date, tag in result.all():
            tags_by_date.setdefault(tag_date, []).append(tag)
        return tags_by_date
