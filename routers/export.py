"""
导出路由
提供记录导出、日期标签导出、导出预览和分享的API接口
"""
# 标准库导包
import logging

# 第三方库导包
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from models import (
    ExportFormat,
    ExportOptions,
    ExportResult,
    ExportPreviewRequest,
    ExportPreviewResponse,
    ShareExportRequest,
    ShareExportResponse
)
from storage.database import get_session
from routers.services.export_service import ExportService

# 配置日志
logger = logging.getLogger(__name__)

# 创建路由器
router = APIRouter(
    prefix="/export",
    tags=["数据导出"]
)


def get_export_service(session: AsyncSession = Depends(get_session)) -> ExportService:
    """导出服务依赖，测试中可覆盖以替换文件出口"""
    return ExportService(session)


@router.post("", response_model=ExportResult, summary="导出记录")
async def export_data(
    options: ExportOptions,
    service: ExportService = Depends(get_export_service)
):
    """
    导出日期范围内的记录

    失败（如开始日期晚于结束日期）时返回 success=false 和错误描述，HTTP状态码仍为200。
    """
    return await service.export_data(options)


@router.post("/day-tags", response_model=ExportResult, summary="导出日期标签")
async def export_day_tags_data(
    export_format: ExportFormat = Query(ExportFormat.CSV, alias="format", description="导出格式"),
    service: ExportService = Depends(get_export_service)
):
    return await service.export_day_tags_data(export_format)


@router.post("/preview", response_model=ExportPreviewResponse, summary="导出预览")
async def get_export_preview(
    request: ExportPreviewRequest,
    service: ExportService = Depends(get_export_service)
):
    """返回前 limit 行的编码结果，不写文件"""
    preview = await service.get_export_preview(request.options, request.limit)
    return ExportPreviewResponse(data=preview)


@router.post("/share", response_model=ShareExportResponse, summary="分享导出文件")
async def share_export_file(
    request: ShareExportRequest,
    service: ExportService = Depends(get_export_service)
):
    shared = await service.share_export_file(request.file_path)
    return ShareExportResponse(
        success=shared,
        message="分享成功" if shared else "分享失败"
    )
