"""
日期标签路由
提供日期标签的增删改查以及标签与日期关联的API接口
"""
# 标准库导包
import logging
from datetime import date
from typing import Optional

# 第三方库导包
from fastapi import APIRouter, HTTPException, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from exceptions import (
    SymptomLogError,
    InvalidRange,
    NotFoundError,
    ConstraintViolation,
    StoreUnavailable,
    TagValidationError,
    MaxTagsExceededError
)
from models import (
    CreateDayTagRequest,
    UpdateTagDescriptionRequest,
    DayTagResponse,
    DayTagListResponse,
    DayTagDetailResponse,
    TagDateChangeResponse,
    TagDatesResponse,
    TaggedDatesResponse,
    ReconcileResponse,
    EntriesByTagsRequest,
    EntriesByTagsResponse,
    TaggedEntryResponse
)
from storage.database import get_session
from routers.services.day_tag_service import DayTagService

# 配置日志
logger = logging.getLogger(__name__)

# 创建路由器
router = APIRouter(
    prefix="/day-tags",
    tags=["日期标签"]
)


def _to_http_exception(error: SymptomLogError) -> HTTPException:
    """
    将业务异常转换为HTTP异常

    Args:
        error: 业务异常

    Returns:
        HTTPException对象
    """
    if isinstance(error, NotFoundError):
        status_code = 404
    elif isinstance(error, InvalidRange):
        status_code = 400
    elif isinstance(error, ConstraintViolation):
        status_code = 409
    elif isinstance(error, (TagValidationError, MaxTagsExceededError)):
        status_code = 422
    elif isinstance(error, StoreUnavailable):
        status_code = 503
    else:
        status_code = 500
    return HTTPException(status_code=status_code, detail=error.to_error_string())


@router.get("", response_model=DayTagListResponse, summary="获取全部日期标签")
async def list_day_tags(session: AsyncSession = Depends(get_session)):
    """按使用次数降序、名称升序返回全部标签"""
    try:
        tags = await DayTagService(session).get_all_tags()
    except SymptomLogError as e:
        raise _to_http_exception(e)

    return DayTagListResponse(
        data=[DayTagResponse.model_validate(tag) for tag in tags],
        total=len(tags)
    )


@router.post("", response_model=DayTagDetailResponse, summary="创建日期标签")
async def create_day_tag(
    request: CreateDayTagRequest,
    session: AsyncSession = Depends(get_session)
):
    """
    创建日期标签

    同名（忽略大小写和首尾空格）标签已存在时直接返回已有标签，请求中的描述不会覆盖已有描述。
    """
    try:
        tag = await DayTagService(session).create_tag(request.display_name, request.description)
    except SymptomLogError as e:
        raise _to_http_exception(e)

    return DayTagDetailResponse(message="创建成功", data=DayTagResponse.model_validate(tag))


@router.patch("/{tag_id}/description", response_model=DayTagDetailResponse, summary="更新标签描述")
async def update_day_tag_description(
    request: UpdateTagDescriptionRequest,
    tag_id: int = Path(..., description="标签ID"),
    session: AsyncSession = Depends(get_session)
):
    try:
        tag = await DayTagService(session).update_tag_description(tag_id, request.description)
    except SymptomLogError as e:
        raise _to_http_exception(e)

    return DayTagDetailResponse(message="更新成功", data=DayTagResponse.model_validate(tag))


@router.delete("/{tag_id}", summary="删除日期标签")
async def delete_day_tag(
    tag_id: int = Path(..., description="标签ID"),
    session: AsyncSession = Depends(get_session)
):
    """删除标签，同时删除其全部日期关联"""
    try:
        await DayTagService(session).delete_tag(tag_id)
    except SymptomLogError as e:
        raise _to_http_exception(e)

    return {"success": True, "message": "删除成功"}


@router.get("/dates/{day}", response_model=DayTagListResponse, summary="获取某日期的标签")
async def get_tags_for_date(
    day: date = Path(..., description="日期，YYYY-MM-DD"),
    session: AsyncSession = Depends(get_session)
):
    try:
        tags = await DayTagService(session).get_tags_for_date(day)
    except SymptomLogError as e:
        raise _to_http_exception(e)

    return DayTagListResponse(
        data=[DayTagResponse.model_validate(tag) for tag in tags],
        total=len(tags)
    )


@router.put("/{tag_id}/dates/{day}", response_model=TagDateChangeResponse, summary="为日期添加标签")
async def attach_tag_to_date(
    tag_id: int = Path(..., description="标签ID"),
    day: date = Path(..., description="日期，YYYY-MM-DD"),
    session: AsyncSession = Depends(get_session)
):
    """重复添加同一标签不会产生新的关联"""
    service = DayTagService(session)
    try:
        changed = await service.attach_tag_to_date(tag_id, day)
        tag = await service.get_tag(tag_id)
    except SymptomLogError as e:
        raise _to_http_exception(e)

    return TagDateChangeResponse(
        message="添加成功" if changed else "标签已存在于该日期",
        changed=changed,
        data=DayTagResponse.model_validate(tag)
    )


@router.delete("/{tag_id}/dates/{day}", response_model=TagDateChangeResponse, summary="移除日期上的标签")
async def detach_tag_from_date(
    tag_id: int = Path(..., description="标签ID"),
    day: date = Path(..., description="日期，YYYY-MM-DD"),
    session: AsyncSession = Depends(get_session)
):
    service = DayTagService(session)
    try:
        changed = await service.detach_tag_from_date(tag_id, day)
        tag = await service.get_tag(tag_id)
    except SymptomLogError as e:
        raise _to_http_exception(e)

    return TagDateChangeResponse(
        message="移除成功" if changed else "该日期没有此标签",
        changed=changed,
        data=DayTagResponse.model_validate(tag)
    )


@router.get("/{tag_id}/dates", response_model=TagDatesResponse, summary="获取带有某标签的日期")
async def get_dates_with_tag(
    tag_id: int = Path(..., description="标签ID"),
    start_date: Optional[date] = Query(None, description="开始日期"),
    end_date: Optional[date] = Query(None, description="结束日期"),
    session: AsyncSession = Depends(get_session)
):
    try:
        dates = await DayTagService(session).get_dates_with_tag(tag_id, start_date, end_date)
    except SymptomLogError as e:
        raise _to_http_exception(e)

    return TagDatesResponse(data=dates, total=len(dates))


@router.get("/calendar/{year}/{month}", response_model=TaggedDatesResponse, summary="获取日历月份的标签")
async def get_tagged_dates_in_month(
    year: int = Path(..., ge=1, le=9999),
    month: int = Path(..., ge=1, le=12),
    session: AsyncSession = Depends(get_session)
):
    try:
        tagged_dates = await DayTagService(session).get_tagged_dates_in_month(year, month)
    except SymptomLogError as e:
        raise _to_http_exception(e)

    return TaggedDatesResponse(data=tagged_dates)


@router.post("/entries", response_model=EntriesByTagsResponse, summary="按日期标签筛选记录")
async def get_entries_by_tags(
    request: EntriesByTagsRequest,
    session: AsyncSession = Depends(get_session)
):
    """
    返回带有任一（match_mode=any）或全部（match_mode=all）指定标签的日期上的记录，
    每条记录附带其所在日期的全部标签
    """
    try:
        results = await DayTagService(session).get_entries_by_tags(
            request.tag_filter, request.start_date, request.end_date
        )
    except SymptomLogError as e:
        raise _to_http_exception(e)

    data = [TaggedEntryResponse.from_entry(entry, day_tags) for entry, day_tags in results]
    return EntriesByTagsResponse(data=data, total=len(data))


@router.post("/reconcile", response_model=ReconcileResponse, summary="校对标签使用次数")
async def reconcile_usage_counts(session: AsyncSession = Depends(get_session)):
    """管理操作：按关联表全量重算 usage_count"""
    try:
        corrected = await DayTagService(session).reconcile_usage_counts()
    except SymptomLogError as e:
        raise _to_http_exception(e)

    return ReconcileResponse(
        corrected={tag_id: [old, new] for tag_id, (old, new) in corrected.items()}
    )
