"""
导出格式编码器
每种导出格式对应一个编码器实现，通过 ExportFormat 选择
"""
# 标准库导包
import csv
import io
from abc import ABC, abstractmethod
from itertools import groupby
from typing import Any, Dict, List, Sequence

# 项目内部导包
from exceptions import EncodingFailure
from models import ExportFormat

ExportRow = Dict[str, Any]
SCALAR_TYPES = (str, int, float, bool)


class BaseExportEncoder(ABC):
    """导出编码器基类

    相同的行和列定义必须产生完全相同的输出，因此编码内容中不写入生成时间等易变信息。
    """

    extension: str = ""
    mime_type: str = "text/plain"

    def encode(self, rows: Sequence[ExportRow], columns: Sequence[str]) -> str:
        """
        将导出行编码为文本

        Args:
            rows: 导出行，键为列名
            columns: 列定义，决定列顺序

        Returns:
            编码后的文本
        """
        normalized = [self._normalize_row(index, row, columns) for index, row in enumerate(rows)]
        return self._encode(normalized, list(columns))

    @abstractmethod
    def _encode(self, rows: List[List[str]], columns: List[str]) -> str:
        """按列顺序排列好的字符串行 -> 文本"""

    @staticmethod
    def _normalize_row(index: int, row: ExportRow, columns: Sequence[str]) -> List[str]:
        """校验单行并按列顺序转为字符串列表"""
        unknown = set(row) - set(columns)
        if unknown:
            raise EncodingFailure(f"第{index + 1}行包含未定义的列: {sorted(unknown)}")

        values = []
        for column in columns:
            value = row.get(column)
            if value is None:
                values.append("")
            elif isinstance(value, SCALAR_TYPES):
                values.append(str(value))
            else:
                raise EncodingFailure(
                    f"第{index + 1}行列 {column} 的值类型 {type(value).__name__} 无法编码"
                )
        return values


class CsvExportEncoder(BaseExportEncoder):
    """CSV编码器，包含分隔符、引号或换行的字段按 RFC 4180 加引号转义"""

    extension = "csv"
    mime_type = "text/csv"

    def _encode(self, rows: List[List[str]], columns: List[str]) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
        writer.writerow(columns)
        writer.writerows(rows)
        return buffer.getvalue()


class TxtExportEncoder(BaseExportEncoder):
    """可读文本编码器，按日期分组输出"""

    extension = "txt"
    mime_type = "text/plain"
    separator = "=" * 36
    group_column = "Date"

    def _encode(self, rows: List[List[str]], columns: List[str]) -> str:
        lines = [
            self.separator,
            "Symptom Log Export",
            self.separator,
            "",
            f"Total Rows: {len(rows)}",
            "",
        ]

        if self.group_column not in columns:
            groups = [("", rows)]
        else:
            date_index = columns.index(self.group_column)
            groups = [(key, list(items)) for key, items in groupby(rows, key=lambda r: r[date_index])]

        for group_key, group_rows in groups:
            if group_key:
                lines.append(f"{self.group_column}: {group_key}")
                lines.append("-" * 36)
            for row in group_rows:
                for column, value in zip(columns, row):
                    if column == self.group_column or value == "":
                        continue
                    lines.append(f"  {column}: {value}")
                lines.append("")

        return "\n".join(lines) + "\n"


ENCODERS: Dict[ExportFormat, BaseExportEncoder] = {
    ExportFormat.CSV: CsvExportEncoder(),
    ExportFormat.TXT: TxtExportEncoder(),
}


def get_encoder(export_format: ExportFormat) -> BaseExportEncoder:
    """
    根据导出格式获取编码器

    Args:
        export_format: 导出格式

    Returns:
        编码器实例
    """
    try:
        return ENCODERS[ExportFormat(export_format)]
    except (KeyError, ValueError) as e:
        raise EncodingFailure(f"不支持的导出格式: {export_format}") from e
