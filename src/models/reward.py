"""Reward catalog database model."""

from sqlalchemy import CheckConstraint, Column, Integer, String

from .base import Base


class RewardModel(Base):
    """A catalog reward with a point cost and a finite quantity."""

    __tablename__ = "rewards"
    __table_args__ = (
        CheckConstraint("points > 0", name="ck_rewards_points_positive"),
        CheckConstraint("quantity >= 0", name="ck_rewards_quantity_non_negative"),
    )

    name = Column(String, primary_key=True, index=True)
    points = Column(Integer, nullable=False)  # cost in points
    quantity = Column(Integer, nullable=False, default=0)
    image = Column(String, nullable=False, default="")  # URL path under /uploads
