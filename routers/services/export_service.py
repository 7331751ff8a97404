"""
导出服务类
协调聚合器、编码器和文件出口，对外返回统一的导出结果
"""
# 标准库导包
import logging
from datetime import date
from pathlib import Path
from typing import Optional

# 第三方库导包
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from config import settings
from exceptions import SymptomLogError
from models import ExportFormat, ExportOptions, ExportResult
from routers.services.export_aggregator import AggregatedExport, ExportAggregator
from routers.utils.export_encoders import ENCODERS, get_encoder
from routers.utils.export_sinks import BaseExportSink, BaseShareSink, DirectoryShareSink, LocalFileSink
from storage.repositories.day_tag_repository import DayTagRepository
from storage.repositories.entry_repository import EntryRepository

# 配置日志
logger = logging.getLogger(__name__)


class ExportService:
    """导出服务类

    预期内的失败（日期范围错误、存储不可用、编码失败、写文件失败）都以
    ExportResult 返回，不向调用方抛出异常。
    """

    def __init__(
        self,
        session: AsyncSession,
        file_sink: Optional[BaseExportSink] = None,
        share_sink: Optional[BaseShareSink] = None
    ):
        """
        初始化导出服务

        Args:
            session: 数据库会话
            file_sink: 导出文件写入出口，默认写入 EXPORT_DIR
            share_sink: 分享出口，默认复制到 SHARE_DIR
        """
        self.session = session
        self.entry_repo = EntryRepository(session)
        self.day_tag_repo = DayTagRepository(session)
        self.aggregator = ExportAggregator(self.entry_repo, self.day_tag_repo)
        self.file_sink = file_sink or LocalFileSink(settings.EXPORT_DIR)
        self.share_sink = share_sink or DirectoryShareSink(settings.SHARE_DIR)

    @staticmethod
    def generate_filename(
        export_format: ExportFormat,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> str:
        """
        根据日期范围生成确定的文件名

        Args:
            export_format: 导出格式
            start_date: 开始日期，不传表示标签全表导出
            end_date: 结束日期

        Returns:
            文件名
        """
        extension = get_encoder(export_format).extension
        if start_date is None or end_date is None:
            return f"{settings.EXPORT_FILE_PREFIX}-day-tags.{extension}"
        return f"{settings.EXPORT_FILE_PREFIX}-{start_date.isoformat()}-to-{end_date.isoformat()}.{extension}"

    async def _write_export(
        self,
        aggregated: AggregatedExport,
        export_format: ExportFormat,
        filename: str
    ) -> ExportResult:
        """编码并写入文件，返回成功结果"""
        content = get_encoder(export_format).encode(aggregated.rows, aggregated.columns)
        file_path = await self.file_sink.write(filename, content)
        return ExportResult.succeeded(file_path, aggregated.rows_count)

    async def export_data(self, options: ExportOptions) -> ExportResult:
        """
        导出日期范围内的记录

        Args:
            options: 导出参数

        Returns:
            导出结果
        """
        try:
            aggregated = await self.aggregator.aggregate_entries(options)
            filename = self.generate_filename(options.format, options.start_date, options.end_date)
            result = await self._write_export(aggregated, options.format, filename)
        except SymptomLogError as e:
            logger.error(f"导出记录失败: {e.to_error_string()}")
            return ExportResult.failed(e.to_error_string())
        except OSError as e:
            logger.error(f"导出文件写入失败: {str(e)}")
            return ExportResult.failed(f"WriteFailure: 导出文件写入失败: {e}")

        logger.info(f"导出记录成功: file_path={result.file_path}, rows={result.entries_count}")
        return result

    async def export_day_tags_data(self, export_format: ExportFormat = ExportFormat.CSV) -> ExportResult:
        """
        导出全部日期标签关联

        Args:
            export_format: 导出格式

        Returns:
            导出结果
        """
        try:
            aggregated = await self.aggregator.aggregate_day_tags()
            filename = self.generate_filename(export_format)
            result = await self._write_export(aggregated, export_format, filename)
        except SymptomLogError as e:
            logger.error(f"导出日期标签失败: {e.to_error_string()}")
            return ExportResult.failed(e.to_error_string())
        except OSError as e:
            logger.error(f"导出文件写入失败: {str(e)}")
            return ExportResult.failed(f"WriteFailure: 导出文件写入失败: {e}")

        logger.info(f"导出日期标签成功: file_path={result.file_path}, rows={result.entries_count}")
        return result

    async def get_export_preview(self, options: ExportOptions, limit: Optional[int] = None) -> str:
        """
        生成导出预览，只编码前 limit 行，不写文件

        Args:
            options: 导出参数
            limit: 行数上限，默认 EXPORT_PREVIEW_DEFAULT_LIMIT

        Returns:
            预览文本，失败时返回错误描述
        """
        if limit is None:
            limit = settings.EXPORT_PREVIEW_DEFAULT_LIMIT
        limit = max(limit, 0)

        try:
            aggregated = await self.aggregator.aggregate_entries(options, limit=limit)
            rows = aggregated.rows[:limit]
            return get_encoder(options.format).encode(rows, aggregated.columns)
        except SymptomLogError as e:
            logger.error(f"生成导出预览失败: {e.to_error_string()}")
            return f"Error generating preview: {e.to_error_string()}"

    async def share_export_file(self, file_path: str) -> bool:
        """
        将导出文件交给分享出口，只接受导出目录内已存在的文件

        Args:
            file_path: 导出文件路径

        Returns:
            是否分享成功
        """
        try:
            source = await self.file_sink.locate(file_path)
        except (OSError, ValueError) as e:
            logger.error(f"定位导出文件失败: file_path={file_path}, error={str(e)}")
            return False
        if source is None:
            logger.warning(f"拒绝分享导出目录以外或不存在的文件: file_path={file_path}")
            return False

        mime_type = "text/plain"
        suffix = Path(source).suffix.lstrip(".")
        for encoder in ENCODERS.values():
            if encoder.extension == suffix:
                mime_type = encoder.mime_type
                break

        try:
            await self.share_sink.share(source, mime_type)
        except Exception as e:
            logger.error(f"分享导出文件失败: file_path={file_path}, error={str(e)}")
            return False
        return True

    async def delete_export_file(self, file_path: str) -> bool:
        """
        删除导出文件（分享完成后清理）

        Args:
            file_path: 导出文件路径

        Returns:
            是否删除了文件
        """
        try:
            return await self.file_sink.delete(file_path)
        except (OSError, ValueError) as e:
            logger.error(f"删除导出文件失败: file_path={file_path}, error={str(e)}")
            return False
