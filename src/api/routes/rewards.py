"""Reward catalog and redemption routes."""

from typing import Dict

from fastapi import APIRouter, Depends

from api.routes.auth import get_current_user
from core.dependencies import RedemptionManagerDep, RewardManagerDep
from schemas.reward import RedeemRequest, RedeemResponse, Reward
from schemas.user import User

router = APIRouter(prefix="/api", tags=["Rewards"])


@router.get("/rewards", response_model=Dict[str, Reward], summary="List rewards")
def list_rewards(reward_manager: RewardManagerDep = None) -> Dict[str, Reward]:
    """List the catalog keyed by reward name."""
    return reward_manager.list_rewards()


@router.post("/redeem", response_model=RedeemResponse, summary="Redeem a reward")
def redeem(
    req: RedeemRequest,
    current_user: User = Depends(get_current_user),
    redemption_manager: RedemptionManagerDep = None,
) -> RedeemResponse:
    """Spend points on one unit of a reward.

    Args:
        req: Request with the reward name.
        current_user: Current authenticated user.
        redemption_manager: Injected RedemptionManager instance.

    Returns:
        RedeemResponse with the user's new balance and the remaining quantity.

    Raises:
        RewardNotFoundError: If the reward does not exist.
        OutOfStockError: If the reward is sold out.
        InsufficientPointsError: If the user cannot afford it.
    """
    result = redemption_manager.redeem(current_user.id, req.name)
    return RedeemResponse(
        msg=f"Redeemed {req.name} successfully",
        points=result.new_points,
        quantity=result.new_quantity,
    )
