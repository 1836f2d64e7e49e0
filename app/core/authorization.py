from enum import Enum

from fastapi import Depends, HTTPException, Request

from app.deps.auth import require_auth


class Role(Enum):
    ADMIN = "ADMIN"
    EMPLOYEE = "EMPLOYEE"


_RANK = {
    Role.EMPLOYEE: 1,
    Role.ADMIN: 2,
}


def require_role(role: Role):
    def dependency(request: Request, _auth: tuple[int, str] = Depends(require_auth)):
        try:
            user_role = Role(str(request.state.role).upper())
        except ValueError as exc:
            raise HTTPException(status_code=403, detail="Invalid role claim") from exc

        if _RANK[user_role] < _RANK[role]:
            raise HTTPException(status_code=403, detail="Insufficient role")

        return user_role

    return dependency


def require_self_or_admin(request: Request, employee_id: int) -> None:
    if request.state.role == Role.ADMIN.value:
        return
    if int(request.state.employee_id) != int(employee_id):
        raise HTTPException(status_code=403, detail="Not allowed for another employee")
