from fastapi import Depends, HTTPException, status
from warehouse.utils.get_user import get_current_user
from warehouse.models.users.user_models import User


def require_role(roles: list[str]):
    allowed = {r.lower() for r in roles} | {"admin"}

    async def role_checker(user: User = Depends(get_current_user)):
        if user.role.lower() not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Permission denied"
            )
        return user
    return role_checker
