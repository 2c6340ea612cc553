"""Promo code schema definitions."""

from pydantic import BaseModel, Field


class CheckCodeRequest(BaseModel):
    code: str = Field(min_length=1)


class CodeApplication(BaseModel):
    """Outcome of applying a promo code."""
    points_granted: int
    new_total: int


class CheckCodeResponse(BaseModel):
    msg: str
    reward: int = Field(description="Points granted by the code.")
    points: int = Field(description="The user's new balance.")
