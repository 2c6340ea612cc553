"""Promo code database models.

This module defines redeemable promo codes and the per-user record of which
codes have been applied.
"""

from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint

from .base import Base


class CodeModel(Base):
    """Promo code worth a fixed number of points."""

    __tablename__ = "codes"

    code = Column(String, primary_key=True, index=True)
    points = Column(Integer, nullable=False)


class CodeRedemptionModel(Base):
    __tablename__ = "code_redemptions"
    __table_args__ = (
        UniqueConstraint("user_id", "code", name="uq_code_redemptions_user_code"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    code = Column(String, ForeignKey("codes.code"), nullable=False)
    created_at = Column(String, nullable=False)  # ISO format string
