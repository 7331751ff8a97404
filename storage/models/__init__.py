"""
Storage models package.
"""
# 项目内部导包
from .entry import Entry
from .bowel_movement import BowelMovement
from .note import Note
from .day_tag import DayTag
from .day_tag_association import DayTagAssociation

__all__ = [
    "Entry",
    "BowelMovement",
    "Note",
    "DayTag",
    "DayTagAssociation",
]
