"""Reward schema definitions."""

from pydantic import AliasChoices, BaseModel, Field

from config import MAX_AMOUNT


class Reward(BaseModel):
    name: str = Field(description="Unique reward name.")
    points: int = Field(gt=0, description="Cost in points.")
    quantity: int = Field(ge=0, description="Remaining stock.")
    image: str = Field(default="", description="Image URL path, empty when none was uploaded.")


class RedeemRequest(BaseModel):
    # Older clients send 'rewardName'
    name: str = Field(
        min_length=1,
        validation_alias=AliasChoices("name", "rewardName"),
    )


class RedemptionResult(BaseModel):
    """Balances after a successful redemption."""
    new_points: int
    new_quantity: int


class RedeemResponse(BaseModel):
    msg: str
    points: int
    quantity: int


class UpdateQuantityRequest(BaseModel):
    name: str = Field(min_length=1)
    quantity: int = Field(ge=0, le=MAX_AMOUNT)


class UpdateQuantityResponse(BaseModel):
    msg: str
    quantity: int


class AddRewardResponse(BaseModel):
    msg: str
    reward: Reward
