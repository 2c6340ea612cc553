"""Promo code routes."""

from fastapi import APIRouter, Depends

from api.routes.auth import get_current_user
from core.dependencies import CodeManagerDep
from schemas.code import CheckCodeRequest, CheckCodeResponse
from schemas.user import User

router = APIRouter(prefix="/api", tags=["Codes"])


@router.post("/check-code", response_model=CheckCodeResponse, summary="Apply a promo code")
def check_code(
    req: CheckCodeRequest,
    current_user: User = Depends(get_current_user),
    code_manager: CodeManagerDep = None,
) -> CheckCodeResponse:
    """Credit the points of a promo code to the current user.

    Raises:
        CodeNotFoundError: If the code does not exist.
        CodeAlreadyUsedError: If the user already applied it.
    """
    result = code_manager.apply_code(current_user.id, req.code.strip())
    return CheckCodeResponse(
        msg=f"Code accepted: +{result.points_granted} points",
        reward=result.points_granted,
        points=result.new_total,
    )
