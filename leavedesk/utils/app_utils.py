import logging
from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from leavedesk.config import settings
from leavedesk.exceptions import get_forbidden_exception, get_user_exception

logger = logging.getLogger(__name__)

oauth2_bearer = OAuth2PasswordBearer(tokenUrl="auth/login/")

secret_key = settings.SECRET_KEY
algorithm = settings.ALGORITHM

USER_TYPES = ("admin", "employee")


def decode_token(token: str) -> tuple:
    """
    Resolve a token issued by the auth service into an identity.
    Returns:
        tuple: ({"id": <subject>}, user_type) where user_type is "admin" or "employee"
    """
    try:
        payload = jwt.decode(token, secret_key, algorithms=[algorithm])
    except JWTError as e:
        logger.info("Rejected token: %s", e)
        raise get_user_exception()

    data = payload.get("data")
    if not isinstance(data, dict):
        raise HTTPException(status_code=401, detail="Invalid token data.")

    pk = data.get("sub")
    if not pk:
        raise HTTPException(status_code=401, detail="Could not validate user.")

    user_type = data.get("role", "employee")
    if user_type not in USER_TYPES:
        raise HTTPException(status_code=401, detail="Could not validate user.")

    return {"id": str(pk)}, user_type


async def get_current_user(token: str = Depends(oauth2_bearer)) -> tuple:
    return decode_token(token)


async def get_current_admin(user_and_type: tuple = Depends(get_current_user)) -> tuple:
    user, user_type = user_and_type
    if user_type != "admin":
        raise get_forbidden_exception()
    return user, user_type
