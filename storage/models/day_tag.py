"""
DayTag模型 - 日期标签表
"""
# 标准库导包
from datetime import datetime
from typing import Optional

# 第三方库导包
from sqlalchemy import Integer, String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

# 项目内部导包
from storage.database import Base


class DayTag(Base):
    """日期标签表"""
    
    __tablename__ = "day_tags"
    
    # 核心字段
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True, comment="规范化名称（去空格、小写），全局唯一")
    display_name: Mapped[str] = mapped_column(String(50), nullable=False, comment="用户输入的显示名称")
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True, comment="标签描述，如用药剂量")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    usage_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0", comment="当前关联的日期数")
    
    # 关系定义，删除由数据库外键级联完成
    associations: Mapped[list["DayTagAssociation"]] = relationship(
        "DayTagAssociation",
        back_populates="tag",
        cascade="all, delete-orphan",
        passive_deletes=True
    )
    
    def __repr__(self):
        return f"<DayTag(id={self.id}, name={self.name}, usage_count={self.usage_count})>"
