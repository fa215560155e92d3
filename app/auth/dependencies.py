from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError

from app.auth.schemas import CurrentUser
from app.auth.security import decode_access_token
from app.core.enums import UserRole


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


async def get_current_user(token: str = Depends(oauth2_scheme)) -> CurrentUser:
    """Resolve the authenticated user from the access token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_access_token(token)
    except JWTError:
        raise credentials_exception

    user_id = payload.get("user_id") or payload.get("sub")
    role_name = payload.get("role")
    if not user_id or not role_name:
        raise credentials_exception

    try:
        role = UserRole(role_name)
    except ValueError:
        raise credentials_exception

    student_id: Optional[str] = payload.get("student_id")
    return CurrentUser(id=str(user_id), role=role, student_id=student_id)


def require_roles(*roles: UserRole):
    """
    Dependency factory restricting a route to the given roles.

    Example:
        Depends(require_roles(UserRole.ADMIN))
    SUPER_ADMIN passes every check.
    """

    async def _checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role == UserRole.SUPER_ADMIN or current_user.role in roles:
            return current_user
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions",
        )

    return _checker


async def require_student(
    current_user: CurrentUser = Depends(require_roles(UserRole.STUDENT)),
) -> CurrentUser:
    """Student routes need a token bound to a student profile."""
    if not current_user.student_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Token is not linked to a student profile",
        )
    return current_user
