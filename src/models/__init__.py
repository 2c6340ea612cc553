"""Database models package."""

from .base import Base
from .user import UserModel
from .history import HistoryModel
from .reward import RewardModel
from .code import CodeModel, CodeRedemptionModel

__all__ = [
    "Base",
    "UserModel",
    "HistoryModel",
    "RewardModel",
    "CodeModel",
    "CodeRedemptionModel",
]
