"""
DayTagAssociation模型 - 日期标签关联表
"""
# 标准库导包
from datetime import datetime

# 第三方库导包
from sqlalchemy import Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

# 项目内部导包
from storage.database import Base


class DayTagAssociation(Base):
    """日期标签关联表"""
    
    __tablename__ = "day_tag_associations"
    
    # 核心字段
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tag_id: Mapped[int] = mapped_column(Integer, ForeignKey("day_tags.id", ondelete="CASCADE"), nullable=False)
    date: Mapped[str] = mapped_column(String(10), nullable=False, comment="日期，YYYY-MM-DD")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    
    # 关系定义
    tag: Mapped["DayTag"] = relationship("DayTag", back_populates="associations")
    
    # 唯一索引和二级索引
    __table_args__ = (
        Index("idx_unique_tag_date", "tag_id", "date", unique=True),
        Index("idx_day_tag_assoc_date", "date"),
        Index("idx_day_tag_assoc_tag_id", "tag_id"),
    )
    
    def __repr__(self):
        return f"<DayTagAssociation(id={self.id}, tag_id={self.tag_id}, date={self.date})>"
