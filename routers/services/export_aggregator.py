"""
导出聚合器
按日期范围读取记录或日期标签关联，生成有序的导出行
"""
# 标准库导包
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

# 项目内部导包
from exceptions import InvalidRange
from models import ExportOptions, TagMatchMode
from storage.models.entry import Entry
from storage.repositories.day_tag_repository import DayTagRepository
from storage.repositories.entry_repository import EntryRepository
from utils.tag_utils import format_tags_string, parse_tags_string

# 配置日志
logger = logging.getLogger(__name__)

ENTRY_COLUMNS = [
    "Date",
    "Time",
    "Type",
    "Consistency",
    "Urgency",
    "Category",
    "Content",
    "Notes",
    "Tags",
]
DAY_TAG_COLUMNS = ["Date", "Tag", "Description"]

ENTRY_TYPE_LABELS = {
    "bowel_movement": "Bowel Movement",
    "note": "Note",
}


@dataclass
class AggregatedExport:
    """聚合结果：列定义 + 导出行"""
    columns: List[str]
    rows: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def rows_count(self) -> int:
        return len(self.rows)


class ExportAggregator:
    """导出聚合器"""

    def __init__(self, entry_repo: EntryRepository, day_tag_repo: DayTagRepository):
        """
        初始化导出聚合器

        Args:
            entry_repo: 记录读取接口
            day_tag_repo: 日期标签Repository
        """
        self.entry_repo = entry_repo
        self.day_tag_repo = day_tag_repo

    @staticmethod
    def validate_range(start_date: date, end_date: date) -> None:
        """开始日期不能晚于结束日期，相等表示单日"""
        if start_date > end_date:
            raise InvalidRange(f"开始日期 {start_date.isoformat()} 晚于结束日期 {end_date.isoformat()}")

    async def aggregate_entries(
        self,
        options: ExportOptions,
        limit: Optional[int] = None
    ) -> AggregatedExport:
        """
        聚合日期范围内的记录

        跳过缺少详情的记录之后再截取前 limit 行，预览与完整导出的前缀一致。

        Args:
            options: 导出参数
            limit: 最多输出的行数（预览使用）

        Returns:
            聚合结果，行数为实际输出的行数
        """
        self.validate_range(options.start_date, options.end_date)

        dates = None
        if options.tag_filter is not None:
            dates = await self.day_tag_repo.get_dates_matching_tags(
                options.tag_filter.tags,
                options.start_date,
                options.end_date,
                match_all=options.tag_filter.match_mode == TagMatchMode.ALL
            )

        entries = await self.entry_repo.get_by_date_range(
            options.start_date,
            options.end_date,
            dates=dates
        )

        rows = []
        for entry in entries:
            if limit is not None and len(rows) >= limit:
                break
            row = self.project_entry(entry, options.include_notes)
            if row is None:
                logger.warning(f"记录缺少详情数据，跳过导出: entry_id={entry.id}, type={entry.type}")
                continue
            rows.append(row)

        logger.info(
            f"记录聚合完成: {options.start_date}~{options.end_date}, "
            f"读取{len(entries)}条, 输出{len(rows)}行"
        )
        return AggregatedExport(columns=ENTRY_COLUMNS, rows=rows)

    @staticmethod
    def project_entry(entry: Entry, include_notes: bool) -> Optional[Dict[str, Any]]:
        """
        按记录类型投影为导出行

        排便记录输出分级和紧急程度，备注仅在 include_notes 时输出；
        文字备注在 include_notes 为False时仍输出该行，但内容留空。

        Args:
            entry: 记录
            include_notes: 是否包含自由文本

        Returns:
            导出行，详情缺失时返回None
        """
        row: Dict[str, Any] = {
            "Date": entry.date,
            "Time": entry.time,
            "Type": ENTRY_TYPE_LABELS.get(entry.type, entry.type),
        }

        if entry.type == "bowel_movement" and entry.bowel_movement is not None:
            row["Consistency"] = entry.bowel_movement.consistency
            row["Urgency"] = entry.bowel_movement.urgency
            if include_notes:
                row["Notes"] = entry.bowel_movement.notes
            return row

        if entry.type == "note" and entry.note is not None:
            row["Category"] = entry.note.category
            row["Content"] = entry.note.content if include_notes else None
            row["Tags"] = format_tags_string(parse_tags_string(entry.note.tags or ""))
            return row

        return None

    async def aggregate_day_tags(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> AggregatedExport:
        """
        按日期聚合标签关联，每个关联输出一行

        Args:
            start_date: 开始日期（可选，不传表示全表）
            end_date: 结束日期（可选）

        Returns:
            聚合结果
        """
        if start_date and end_date:
            self.validate_range(start_date, end_date)

        associations = await self.day_tag_repo.association_repo.get_associations_with_tags(
            start_date.isoformat() if start_date else None,
            end_date.isoformat() if end_date else None
        )

        rows = [
            {
                "Date": association.date,
                "Tag": tag.display_name,
                "Description": tag.description,
            }
            for association, tag in associations
        ]

        logger.info(f"日期标签聚合完成: 输出{len(rows)}行")
        return AggregatedExport(columns=DAY_TAG_COLUMNS, rows=rows)
