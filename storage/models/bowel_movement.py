"""
BowelMovement模型 - 排便记录详情
"""
# 标准库导包
from typing import Optional

# 第三方库导包
from sqlalchemy import Integer, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

# 项目内部导包
from storage.database import Base


class BowelMovement(Base):
    """排便记录详情表"""
    
    __tablename__ = "bowel_movements"
    
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entry_id: Mapped[int] = mapped_column(Integer, ForeignKey("entries.id", ondelete="CASCADE"), nullable=False, index=True)
    consistency: Mapped[int] = mapped_column(Integer, nullable=False, comment="布里斯托分级 1-7")
    urgency: Mapped[int] = mapped_column(Integer, nullable=False, comment="紧急程度 1-4")
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    
    entry: Mapped["Entry"] = relationship("Entry", back_populates="bowel_movement")
    
    def __repr__(self):
        return f"<BowelMovement(entry_id={self.entry_id}, consistency={self.consistency}, urgency={self.urgency})>"
