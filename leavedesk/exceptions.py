from fastapi import HTTPException, status


class LeaveDeskError(Exception):
    """Base class for errors raised by the leave workflow."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(LeaveDeskError):
    status_code = status.HTTP_404_NOT_FOUND


class InsufficientBalanceError(LeaveDeskError):
    status_code = status.HTTP_400_BAD_REQUEST


class LeaveValidationError(LeaveDeskError):
    status_code = status.HTTP_400_BAD_REQUEST


class AccountExistsError(LeaveDeskError):
    status_code = status.HTTP_400_BAD_REQUEST


class TransitionConflictError(LeaveDeskError):
    status_code = status.HTTP_409_CONFLICT


def get_user_exception():
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    return credentials_exception


def get_forbidden_exception():
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="You are not authorized to perform this function"
    )
