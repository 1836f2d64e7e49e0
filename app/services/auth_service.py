from datetime import datetime, timedelta, timezone
import os

import jwt

JWT_ALGORITHM = "HS256"
DEFAULT_JWT_EXP_HOURS = 12

ROLES = frozenset({"ADMIN", "EMPLOYEE"})


def _get_jwt_secret() -> str:
    secret = os.getenv("JWT_SECRET")
    if not secret:
        raise ValueError("JWT_SECRET is required")
    if len(secret) < 32:
        raise ValueError("JWT_SECRET must be at least 32 characters")
    return secret


def _get_exp_hours() -> int:
    return int(os.getenv("JWT_EXP_HOURS", str(DEFAULT_JWT_EXP_HOURS)))


def _normalize_role(role) -> str:
    value = str(role or "EMPLOYEE").strip().upper()
    if value not in ROLES:
        raise ValueError(f"Invalid role: {role}")
    return value


def create_access_token(employee_id: int, role: str = "EMPLOYEE") -> str:
    """Sign a token for one employee; a field shift fits inside the default lifetime."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(int(employee_id)),
        "role": _normalize_role(role),
        "iat": now,
        "exp": now + timedelta(hours=_get_exp_hours()),
    }
    return jwt.encode(payload, _get_jwt_secret(), algorithm=JWT_ALGORITHM)


def verify_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, _get_jwt_secret(), algorithms=[JWT_ALGORITHM])
    except jwt.PyJWTError as exc:
        raise ValueError("Invalid or expired token") from exc

    if "sub" not in payload:
        raise ValueError("Invalid token claims")

    payload["role"] = _normalize_role(payload.get("role"))
    return payload
