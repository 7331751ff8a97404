"""
数据模型定义
"""
# 标准库导包
from datetime import date, datetime
from enum import Enum
from typing import Optional, Dict, List

# 第三方库导包
from pydantic import BaseModel, Field, ConfigDict, model_validator


# ========== Day Tag模块相关模型 ==========

class DayTagResponse(BaseModel):
    """日期标签响应模型"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    display_name: str
    description: Optional[str] = None
    created_at: datetime
    usage_count: int


class DayTagListResponse(BaseModel):
    """日期标签列表响应模型"""
    success: bool = True
    message: str = "获取成功"
    data: List[DayTagResponse]
    total: int


class DayTagDetailResponse(BaseModel):
    """日期标签详情响应模型"""
    success: bool = True
    message: str = "获取成功"
    data: DayTagResponse


class CreateDayTagRequest(BaseModel):
    """创建日期标签请求模型"""
    display_name: str = Field(..., description="显示名称，1-50个字符")
    description: Optional[str] = Field(default=None, max_length=500, description="标签描述")


class UpdateTagDescriptionRequest(BaseModel):
    """更新标签描述请求模型，description为null表示清空"""
    description: Optional[str] = Field(default=None, max_length=500)


class TagDateChangeResponse(BaseModel):
    """添加/移除日期标签响应模型"""
    success: bool = True
    message: str
    changed: bool = Field(..., description="是否实际产生了变更")
    data: DayTagResponse


class TagDatesResponse(BaseModel):
    """标签日期列表响应模型"""
    success: bool = True
    message: str = "获取成功"
    data: List[str]
    total: int


class TaggedDatesResponse(BaseModel):
    """日历月份标签响应模型"""
    success: bool = True
    message: str = "获取成功"
    data: Dict[str, List[str]]


class ReconcileResponse(BaseModel):
    """计数校对响应模型"""
    success: bool = True
    message: str = "校对完成"
    corrected: Dict[int, List[int]] = Field(default_factory=dict, description="{tag_id: [原计数, 新计数]}")


# ========== Export模块相关模型 ==========

class ExportFormat(str, Enum):
    """导出格式"""
    CSV = "csv"
    TXT = "txt"


class TagMatchMode(str, Enum):
    """多标签匹配方式：any 为任一标签，all 为全部标签"""
    ANY = "any"
    ALL = "all"


class TagFilter(BaseModel):
    """按日期标签筛选记录"""
    tags: List[str] = Field(..., min_length=1, description="标签名称，大小写和首尾空格不敏感")
    match_mode: TagMatchMode = TagMatchMode.ANY


class ExportOptions(BaseModel):
    """导出参数

    日期范围的先后关系不在这里校验，由聚合器返回 InvalidRange 结果。
    tag_filter 不为空时只导出带有匹配标签的日期上的记录。
    """
    start_date: date
    end_date: date
    format: ExportFormat = ExportFormat.CSV
    include_notes: bool = True
    tag_filter: Optional[TagFilter] = None


class ExportResult(BaseModel):
    """导出结果

    成功时必须有 file_path 和 entries_count 且没有 error；失败时必须有 error 且没有 file_path。
    """
    success: bool
    file_path: Optional[str] = None
    entries_count: Optional[int] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def check_consistency(self) -> "ExportResult":
        if self.success:
            if self.error is not None or self.file_path is None or self.entries_count is None:
                raise ValueError("成功结果必须包含 file_path 和 entries_count，且不能包含 error")
        else:
            if not self.error or self.file_path is not None:
                raise ValueError("失败结果必须包含 error，且不能包含 file_path")
        return self

    @classmethod
    def succeeded(cls, file_path: str, entries_count: int) -> "ExportResult":
        return cls(success=True, file_path=file_path, entries_count=entries_count)

    @classmethod
    def failed(cls, error: str) -> "ExportResult":
        return cls(success=False, error=error, entries_count=0)


class ExportPreviewRequest(BaseModel):
    """导出预览请求模型"""
    options: ExportOptions
    limit: int = Field(default=10, ge=0, le=1000, description="预览行数上限")


class ExportPreviewResponse(BaseModel):
    """导出预览响应模型"""
    success: bool = True
    message: str = "获取成功"
    data: str


class ShareExportRequest(BaseModel):
    """分享导出文件请求模型"""
    file_path: str


class ShareExportResponse(BaseModel):
    """分享导出文件响应模型"""
    success: bool
    message: str


# ========== 按日期标签筛选记录 ==========

class EntriesByTagsRequest(BaseModel):
    """按标签筛选记录请求模型"""
    tag_filter: TagFilter
    start_date: date
    end_date: date


class TaggedEntryResponse(BaseModel):
    """带日期标签的记录响应模型"""
    id: int
    type: str
    date: str
    time: str
    consistency: Optional[int] = None
    urgency: Optional[int] = None
    notes: Optional[str] = None
    category: Optional[str] = None
    content: Optional[str] = None
    note_tags: Optional[str] = None
    day_tags: List[DayTagResponse] = Field(default_factory=list)

    @classmethod
    def from_entry(cls, entry, day_tags) -> "TaggedEntryResponse":
        """由记录及其所在日期的标签构建响应"""
        response = cls(
            id=entry.id,
            type=entry.type,
            date=entry.date,
            time=entry.time,
            day_tags=[DayTagResponse.model_validate(tag) for tag in day_tags]
        )
        if entry.bowel_movement is not None:
            response.consistency = entry.bowel_movement.consistency
            response.urgency = entry.bowel_movement.urgency
            response.notes = entry.bowel_movement.notes
        if entry.note is not None:
            response.category = entry.note.category
            response.content = entry.note.content
            response.note_tags = entry.note.tags
        return response


class EntriesByTagsResponse(BaseModel):
    """按标签筛选记录响应模型"""
    success: bool = True
    message: str = "获取成功"
    data: List[TaggedEntryResponse]
    total: int
