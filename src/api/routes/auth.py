"""Authentication routes.

This module handles HTTP endpoints for registration, login, password reset
and the current user's profile, plus the bearer-token dependencies used by
the other routers.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

import pytz
from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM, JWT_SECRET_KEY
from core.dependencies import UserManagerDep
from core.exceptions import AuthError, PermissionDeniedError
from schemas.user import (
    CurrentUserResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    User,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Auth"])

# Missing headers are reported by get_current_user as AuthError
security = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token.

    Args:
        data: Data to encode in the token.
        expires_delta: Optional expiration time delta.

    Returns:
        Encoded JWT token string.
    """
    to_encode = data.copy()
    now = datetime.now(pytz.utc)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"iat": now, "exp": expire})
    encoded_jwt = jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)
    return encoded_jwt


def decode_access_token(token: str) -> str:
    """Verify a JWT access token and return its username.

    Args:
        token: Encoded JWT token string.

    Returns:
        The username stored in the 'sub' claim.

    Raises:
        AuthError: If the token is expired, malformed or badly signed.
    """
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise AuthError("Token has expired")
    except JWTError:
        raise AuthError("Invalid token")

    username = payload.get("sub")
    if not username:
        raise AuthError("Invalid token")
    return username


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    user_manager: UserManagerDep = None,
) -> User:
    """Get current authenticated user.

    The user is always re-read from the database, so role changes take
    effect on the next request.

    Args:
        credentials: HTTP Bearer token credentials.
        user_manager: Injected UserManager instance.

    Returns:
        Current User object.

    Raises:
        AuthError: If the token is missing or invalid, or the user is gone.
    """
    if credentials is None or not credentials.credentials:
        raise AuthError("Missing token")

    username = decode_access_token(credentials.credentials)
    user = user_manager.get_user_by_username(username)
    if user is None:
        raise AuthError("User not found")
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Get current user, rejecting anyone whose stored role is not admin."""
    if not current_user.is_admin:
        logger.warning("Admin access denied for user: %s", current_user.username)
        raise PermissionDeniedError("Admin access required")
    return current_user


@router.post("/register", response_model=MessageResponse, summary="Register")
def register(
    req: RegisterRequest,
    user_manager: UserManagerDep = None,
) -> MessageResponse:
    """Register a new user with zero points and the 'user' role.

    Raises:
        UserAlreadyExistsError: If the username is taken.
    """
    user_manager.create_user(username=req.username, password=req.password)
    return MessageResponse(msg="Registration successful")


@router.post("/login", response_model=LoginResponse, summary="Log in")
def login(
    req: LoginRequest,
    user_manager: UserManagerDep = None,
) -> LoginResponse:
    """Login with username and password.

    Args:
        req: Login request with username and password.
        user_manager: Injected UserManager instance.

    Returns:
        LoginResponse with the JWT token.

    Raises:
        AuthError: If the credentials are wrong.
    """
    user = user_manager.authenticate(req.username, req.password)
    if user is None:
        logger.warning("Failed login attempt for username: %s", req.username)
        raise AuthError("Invalid username or password")

    access_token = create_access_token(data={"sub": user.username})
    logger.info("Successful login for user: %s", user.username)
    return LoginResponse(token=access_token)


@router.post("/reset-password", response_model=MessageResponse, summary="Reset password")
def reset_password(
    req: ResetPasswordRequest,
    user_manager: UserManagerDep = None,
) -> MessageResponse:
    user_manager.reset_password(req.username, req.new_password)
    return MessageResponse(msg="Password has been reset")


@router.get("/me", response_model=CurrentUserResponse, summary="Current user")
def get_current_user_info(
    current_user: User = Depends(get_current_user),
    user_manager: UserManagerDep = None,
) -> CurrentUserResponse:
    """Get the current user's balance, role and recent history."""
    return CurrentUserResponse(
        username=current_user.username,
        points=current_user.points,
        role=current_user.role,
        history=user_manager.get_history(current_user.id),
    )
