"""
EntryRepository - 症状记录Repository
"""
# 标准库导包
from datetime import date as date_type
from typing import Optional, List, Union

# 第三方库导包
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

# 项目内部导包
from storage.decorators import handle_store_errors
from storage.models.bowel_movement import BowelMovement
from storage.models.entry import Entry
from storage.models.note import Note
from storage.repositories.base import BaseRepository
from utils.date_utils import to_iso_date
from utils.tag_utils import format_tags_string


class EntryRepository(BaseRepository[Entry]):
    """症状记录Repository，导出侧只使用按日期范围读取"""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Entry)

    @handle_store_errors("get_by_date_range")
    async def get_by_date_range(
        self,
        start_date: Union[date_type, str],
        end_date: Union[date_type, str],
        dates: Optional[List[str]] = None
    ) -> List[Entry]:
        """
        获取日期范围内（包含两端）的记录，按日期、时间升序排列

        Args:
            start_date: 开始日期
            end_date: 结束日期
            dates: 只保留这些日期上的记录（可选，用于按日期标签筛选）

        Returns:
            记录列表，已加载排便详情和备注详情
        """
        conditions = self._build_filter_conditions({
            "date": {"gte": to_iso_date(start_date), "lte": to_iso_date(end_date)}
        })
        if dates is not None:
            conditions.append(Entry.date.in_(dates))

        query = select(Entry).where(
            and_(*conditions)
        ).options(
            selectinload(Entry.bowel_movement),
            selectinload(Entry.note)
        ).order_by(
            Entry.date.asc(), Entry.time.asc(), Entry.id.asc()
        )

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def create_bowel_movement_entry(
        self,
        date: Union[date_type, str],
        time: str,
        consistency: int,
        urgency: int,
        notes: Optional[str] = None
    ) -> Entry:
        """
        写入一条排便记录（供脚本和测试造数使用）

        Args:
            date: 日期
            time: 时间（HH:MM）
            consistency: 布里斯托分级
            urgency: 紧急程度
            notes: 备注

        Returns:
            创建的Entry实例
        """
        iso_date = to_iso_date(date)
        entry = await self.create(
            type="bowel_movement",
            date=iso_date,
            time=time,
            timestamp=f"{iso_date}T{time}:00"
        )
        self.session.add(BowelMovement(
            entry_id=entry.id,
            consistency=consistency,
            urgency=urgency,
            notes=notes
        ))
        await self.session.flush()
        await self.session.refresh(entry, ["bowel_movement"])
        return entry

    async def create_note_entry(
        self,
        date: Union[date_type, str],
        time: str,
        content: str,
        category: str = "other",
        tags: Optional[List[str]] = None
    ) -> Entry:
        """写入一条文字备注记录（供脚本和测试造数使用）"""
        iso_date = to_iso_date(date)
        entry = await self.create(
            type="note",
            date=iso_date,
            time=time,
            timestamp=f"{iso_date}T{time}:00"
        )
        self.session.add(Note(
            entry_id=entry.id,
            category=category,
            content=content,
            tags=format_tags_string(tags) if tags else None
        ))
        await self.session.flush()
        await self.session.refresh(entry, ["note"])
        return entry
