"""User database model.

This module defines the User database model using SQLAlchemy.
"""

from sqlalchemy import CheckConstraint, Column, Integer, String
from sqlalchemy.orm import relationship

from .base import Base


class UserModel(Base):
    """User database model."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("points >= 0", name="ck_users_points_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    points = Column(Integer, nullable=False, default=0)
    role = Column(String, nullable=False, default="user")  # 'user' or 'admin'
    create_at = Column(String, nullable=False)  # ISO format string

    history = relationship(
        "HistoryModel",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="HistoryModel.id.desc()",
    )
