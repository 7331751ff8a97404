"""
导出文件的写入与分享出口
"""
# 标准库导包
import asyncio
import logging
import os
import shutil
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

# 配置日志
logger = logging.getLogger(__name__)


class BaseExportSink(ABC):
    """导出文件写入出口"""

    @abstractmethod
    async def write(self, filename: str, content: str) -> str:
        """写入文件并返回文件路径，失败时抛出 OSError"""

    @abstractmethod
    async def delete(self, file_path: str) -> bool:
        """删除已导出的文件，返回是否删除"""

    @abstractmethod
    async def locate(self, file_path: str) -> Optional[str]:
        """返回出口目录内的导出文件路径，不在目录内或不存在时返回None"""


class LocalFileSink(BaseExportSink):
    """本地目录写入

    先写入同目录下的临时文件再原子替换，失败时不会留下不完整的目标文件。
    """

    def __init__(self, export_dir: Union[str, Path]):
        self.export_dir = Path(export_dir)

    async def write(self, filename: str, content: str) -> str:
        return await asyncio.to_thread(self._write_atomic, filename, content)

    def _write_atomic(self, filename: str, content: str) -> str:
        self.export_dir.mkdir(parents=True, exist_ok=True)
        target = self.export_dir / filename

        fd, temp_path = tempfile.mkstemp(dir=self.export_dir, prefix=".export-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as temp_file:
                temp_file.write(content)
            os.replace(temp_path, target)
        except BaseException:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise

        logger.info(f"导出文件写入完成: {target}")
        return str(target.resolve())

    def _resolve(self, file_path: str) -> Optional[Path]:
        # 只接受导出目录下的直接文件
        candidate = Path(file_path).resolve()
        if candidate.parent != self.export_dir.resolve() or candidate.name.startswith(".") or not candidate.is_file():
            return None
        return candidate

    async def locate(self, file_path: str) -> Optional[str]:
        target = await asyncio.to_thread(self._resolve, file_path)
        return str(target) if target is not None else None

    def _delete(self, file_path: str) -> bool:
        target = self._resolve(file_path)
        if target is None:
            return False
        target.unlink()
        logger.info(f"导出文件已删除: {target}")
        return True

    async def delete(self, file_path: str) -> bool:
        return await asyncio.to_thread(self._delete, file_path)


class BaseShareSink(ABC):
    """导出文件分享出口"""

    @abstractmethod
    async def share(self, file_path: str, mime_type: str) -> None:
        """分享文件，失败时抛出异常"""


class DirectoryShareSink(BaseShareSink):
    """将导出文件复制到共享目录（如同步盘或挂载目录）"""

    def __init__(self, share_dir: Union[str, Path]):
        self.share_dir = Path(share_dir)

    async def share(self, file_path: str, mime_type: str) -> None:
        source = Path(file_path)
        if not source.is_file():
            raise FileNotFoundError(f"导出文件不存在: {file_path}")

        self.share_dir.mkdir(parents=True, exist_ok=True)
        destination = self.share_dir / source.name
        await asyncio.to_thread(shutil.copyfile, source, destination)
        logger.info(f"导出文件已分享: {destination} ({mime_type})")
