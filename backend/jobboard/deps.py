"""FastAPI dependencies for authentication and role checks."""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from .db import get_db
from .models import User
from .security import TOKEN_COOKIE, decode_token


def _token_from_request(request: Request) -> Optional[str]:
    auth = request.headers.get("authorization")
    if auth and auth.startswith("Bearer "):
        return auth[7:]
    return request.cookies.get(TOKEN_COOKIE)


def get_current_user(request: Request, db: Session = Depends(get_db)) -> Optional[User]:
    """Return the authenticated user, or None for anonymous requests."""
    token = _token_from_request(request)
    if not token:
        return None
    payload = decode_token(token)
    if not payload:
        return None
    try:
        user_id = int(payload.get("sub", ""))
    except ValueError:
        return None
    return db.get(User, user_id)


def require_user(user: Optional[User] = Depends(get_current_user)) -> User:
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user


def require_role(*roles: str):
    def dependency(user: User = Depends(require_user)) -> User:
        if user.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return user

    return dependency


require_admin = require_role("admin")
require_recruiter = require_role("recruiter")
require_job_seeker = require_role("job-seeker")
require_recruiter_or_admin = require_role("recruiter", "admin")
