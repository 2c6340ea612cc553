"""Admin routes.

Every endpoint here depends on ``require_admin``, which re-reads the
caller's role from the database instead of trusting the token.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from api.routes.auth import require_admin
from config import MAX_AMOUNT
from core.dependencies import RewardManagerDep, UserManagerDep
from schemas.reward import AddRewardResponse, UpdateQuantityRequest, UpdateQuantityResponse
from schemas.user import AddPointsRequest, AddPointsResponse, User, UserSummary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Admin"])


@router.post("/admin/add-points", response_model=AddPointsResponse, summary="Grant points")
def add_points(
    req: AddPointsRequest,
    admin: User = Depends(require_admin),
    user_manager: UserManagerDep = None,
) -> AddPointsResponse:
    """Add points to (or, with a negative value, remove points from) a user.

    Raises:
        UserNotFoundError: If the target user does not exist.
        InsufficientPointsError: If the balance would become negative.
    """
    new_points = user_manager.grant_points(req.username, req.points)
    logger.info("Admin %s granted %+d points to %s", admin.username, req.points, req.username)
    return AddPointsResponse(
        msg=f"Added {req.points} points to {req.username}",
        points=new_points,
    )


@router.post(
    "/admin/update-quantity",
    response_model=UpdateQuantityResponse,
    summary="Set reward stock",
)
def update_quantity(
    req: UpdateQuantityRequest,
    admin: User = Depends(require_admin),
    reward_manager: RewardManagerDep = None,
) -> UpdateQuantityResponse:
    reward = reward_manager.set_quantity(req.name, req.quantity)
    logger.info("Admin %s set quantity of '%s' to %d", admin.username, req.name, req.quantity)
    return UpdateQuantityResponse(
        msg=f"Quantity of {reward.name} set to {reward.quantity}",
        quantity=reward.quantity,
    )


@router.post("/admin/add-reward", response_model=AddRewardResponse, summary="Add a reward")
def add_reward(
    name: str = Form(..., description="Unique reward name"),
    points: int = Form(..., gt=0, le=MAX_AMOUNT, description="Cost in points"),
    quantity: int = Form(..., ge=0, le=MAX_AMOUNT, description="Initial stock"),
    image: Optional[UploadFile] = File(default=None, description="Reward image"),
    admin: User = Depends(require_admin),
    reward_manager: RewardManagerDep = None,
) -> AddRewardResponse:
    """Add a reward to the catalog, optionally with an uploaded image.

    Raises:
        ValidationError: If a field or the image is invalid.
        RewardAlreadyExistsError: If the name is taken.
    """
    image_content = None
    image_filename = None
    if image is not None and image.filename:
        image_content = image.file.read()
        image_filename = image.filename

    reward = reward_manager.add_reward(
        name=name,
        points=points,
        quantity=quantity,
        image_content=image_content,
        image_filename=image_filename,
    )
    logger.info("Admin %s added reward '%s'", admin.username, reward.name)
    return AddRewardResponse(msg=f"Reward {reward.name} added", reward=reward)


@router.get("/all-users", response_model=List[UserSummary], summary="List all users")
def list_all_users(
    admin: User = Depends(require_admin),
    user_manager: UserManagerDep = None,
) -> List[UserSummary]:
    return user_manager.list_users()
