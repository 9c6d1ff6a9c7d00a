from fastapi import Depends, HTTPException, status
from deps.auth import get_current_user, CurrentUser
from security import ROLE_ADMIN


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if (user.role or "").lower() != ROLE_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="FORBIDDEN",
        )
    return user
