import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from .. import audit
from ..config import COOKIE_SECURE, JWT_EXPIRE_DAYS
from ..db import get_db
from ..deps import get_current_user, require_user
from ..models import User, utcnow
from ..schemas import LoginIn, RegisterIn, UserOut, dump
from ..security import TOKEN_COOKIE, create_token, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter()


def _set_session(response: Response, user: User) -> None:
    response.set_cookie(
        TOKEN_COOKIE,
        create_token(user),
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="lax",
        max_age=60 * 60 * 24 * JWT_EXPIRE_DAYS,
    )


@router.post("/register", status_code=201)
def register(body: RegisterIn, request: Request, response: Response, db: Session = Depends(get_db)):
    email = body.email.strip().lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=400, detail="User already exists")
    user = User(email=email, password_hash=hash_password(body.password), name=body.name.strip(), role=body.role)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s as %s", user.id, user.role)
    audit.record(db, request, action="register", entity_type="user", entity_id=user.id, actor=user,
                 after={"email": user.email, "name": user.name, "role": user.role})
    _set_session(response, user)
    return {"message": "User created successfully", "user": dump(UserOut, user)}


@router.post("/login")
def login(body: LoginIn, request: Request, response: Response, db: Session = Depends(get_db)):
    if not body.email or not body.password:
        raise HTTPException(status_code=400, detail="Email and password are required")
    user = db.query(User).filter(User.email == body.email.strip().lower()).first()
    if not user or not verify_password(body.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    user.last_online = utcnow()
    db.commit()
    audit.record(db, request, action="login", entity_type="user", entity_id=user.id, actor=user)
    _set_session(response, user)
    return {"message": "Login successful", "user": dump(UserOut, user)}


@router.post("/logout")
def logout(request: Request, response: Response, db: Session = Depends(get_db), user=Depends(get_current_user)):
    if user is not None:
        audit.record(db, request, action="logout", entity_type="user", entity_id=user.id, actor=user)
    response.delete_cookie(TOKEN_COOKIE)
    return {"message": "Logout successful"}


@router.get("/me")
def me(user: User = Depends(require_user)):
    return {"user": dump(UserOut, user)}
