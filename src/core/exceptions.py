"""Custom exception classes for the Loyalty Rewards API.

Every domain error carries the HTTP status it maps to. Route handlers let
these propagate; the handlers registered in ``app.py`` turn them into a
``{"msg": ...}`` JSON body.
"""


class LoyaltyError(Exception):
    """Base exception for all Loyalty Rewards API errors."""

    status_code = 500

    def __init__(self, message: str):
        """Initialize the exception.

        Args:
            message: Human readable message returned to the client.
        """
        self.message = message
        super().__init__(message)


class ValidationError(LoyaltyError):
    """Raised when request data is missing or malformed."""

    status_code = 400


class AuthError(LoyaltyError):
    """Raised for bad credentials or a missing, invalid or expired token."""

    status_code = 401


class PermissionDeniedError(LoyaltyError):
    """Raised when the caller lacks the required role."""

    status_code = 403


class NotFoundError(LoyaltyError):
    """Base class for unknown user, reward or code."""

    status_code = 404


class UserNotFoundError(NotFoundError):
    """Raised when a requested user cannot be found."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"User '{username}' not found")


class RewardNotFoundError(NotFoundError):
    """Raised when a requested reward cannot be found."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Reward '{name}' not found")


class CodeNotFoundError(NotFoundError):
    """Raised when a promo code does not exist."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Code '{code}' not found")


class StateConflictError(LoyaltyError):
    """Base class for requests that conflict with the current state."""

    status_code = 400


class InsufficientPointsError(StateConflictError):
    """Raised when a balance would drop below zero."""

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(
            f"Insufficient points: {required} required, {available} available"
        )


class OutOfStockError(StateConflictError):
    """Raised when a reward has no remaining quantity."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Reward '{name}' is out of stock")


class UserAlreadyExistsError(StateConflictError):
    """Raised when registering a username that is taken."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"User '{username}' already exists")


class RewardAlreadyExistsError(StateConflictError):
    """Raised when adding a reward whose name is taken."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Reward '{name}' already exists")


class CodeAlreadyUsedError(StateConflictError):
    """Raised when a user applies the same promo code twice."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Code '{code}' has already been used")


class InternalError(LoyaltyError):
    """Raised when storage fails in a way the caller cannot fix."""

    status_code = 500
