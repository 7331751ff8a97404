"""
Storage repositories package.
"""
# 项目内部导包
from .base import BaseRepository
from .entry_repository import EntryRepository
from .day_tag_repository import DayTagRepository
from .day_tag_association_repository import DayTagAssociationRepository

__all__ = [
    "BaseRepository",
    "EntryRepository",
    "DayTagRepository",
    "DayTagAssociationRepository",
]
