"""
Note模型 - 文字备注详情
"""
# 标准库导包
from typing import Optional

# 第三方库导包
from sqlalchemy import Integer, String, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

# 项目内部导包
from storage.database import Base

NOTE_CATEGORIES = ("food", "exercise", "medication", "other")


class Note(Base):
    """文字备注详情表"""
    
    __tablename__ = "notes"
    
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entry_id: Mapped[int] = mapped_column(Integer, ForeignKey("entries.id", ondelete="CASCADE"), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(20), nullable=False, default="other", comment="分类：food/exercise/medication/other")
    content: Mapped[str] = mapped_column(Text, nullable=False)
    tags: Mapped[Optional[str]] = mapped_column(String(500), nullable=True, comment="逗号分隔的备注标签")
    
    entry: Mapped["Entry"] = relationship("Entry", back_populates="note")
    
    def __repr__(self):
        return f"<Note(entry_id={self.entry_id}, category={self.category})>"
