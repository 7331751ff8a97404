"""
Entry模型 - 症状记录表

记录本身由记录子系统写入，导出时只读。
"""
# 标准库导包
from datetime import datetime
from typing import Optional

# 第三方库导包
from sqlalchemy import Integer, String, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

# 项目内部导包
from storage.database import Base

ENTRY_TYPES = ("bowel_movement", "note")


class Entry(Base):
    """症状记录表"""
    
    __tablename__ = "entries"
    
    # 核心字段
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, comment="类型：bowel_movement/note")
    date: Mapped[str] = mapped_column(String(10), nullable=False, comment="日期，YYYY-MM-DD")
    time: Mapped[str] = mapped_column(String(5), nullable=False, comment="本地时间，HH:MM")
    timestamp: Mapped[str] = mapped_column(String(40), nullable=False, comment="ISO时间戳，用于排序")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # 关系定义
    bowel_movement: Mapped[Optional["BowelMovement"]] = relationship(
        "BowelMovement", back_populates="entry", uselist=False, cascade="all, delete-orphan"
    )
    note: Mapped[Optional["Note"]] = relationship(
        "Note", back_populates="entry", uselist=False, cascade="all, delete-orphan"
    )
    
    __table_args__ = (
        Index("idx_entries_date_time", "date", "time"),
    )
    
    def __repr__(self):
        return f"<Entry(id={self.id}, type={self.type}, date={self.date}, time={self.time})>"
