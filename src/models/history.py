"""Point history database model."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from .base import Base


class HistoryModel(Base):
    """One entry in a user's point history, e.g. 'redeem:Coffee Mug'."""

    __tablename__ = "history"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    action = Column(String, nullable=False)
    created_at = Column(String, nullable=False)  # ISO format string

    user = relationship("UserModel", back_populates="history")
