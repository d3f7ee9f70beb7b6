from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from .. import audit
from ..db import get_db
from ..deps import require_user
from ..models import Application, User
from ..schemas import AccountUpdate, ChangePasswordIn, UserOut, dump
from ..security import TOKEN_COOKIE, hash_password, verify_password

router = APIRouter()


@router.get("")
def get_account(user: User = Depends(require_user)):
    return {"user": dump(UserOut, user)}


@router.put("")
def update_account(body: AccountUpdate, request: Request, user: User = Depends(require_user), db: Session = Depends(get_db)):
    before = audit.snapshot(user, ("name", "email"))
    if body.email:
        email = body.email.strip().lower()
        taken = db.query(User).filter(User.email == email, User.id != user.id).first()
        if taken:
            raise HTTPException(status_code=400, detail="Email is already in use")
        user.email = email
    if body.name:
        user.name = body.name.strip()
    db.commit()
    db.refresh(user)
    audit.record(db, request, action="update", entity_type="user", entity_id=user.id, actor=user,
                 before=before, after=audit.snapshot(user, ("name", "email")))
    return {"message": "Account updated successfully", "user": dump(UserOut, user)}


@router.post("/change-password")
def change_password(body: ChangePasswordIn, user: User = Depends(require_user), db: Session = Depends(get_db)):
    if not verify_password(body.current_password, user.password_hash):
        raise HTTPException(status_code=400, detail="Current password is incorrect")
    if len(body.new_password) < 6:
        raise HTTPException(status_code=400, detail="New password must be at least 6 characters")
    user.password_hash = hash_password(body.new_password)
    db.commit()
    return {"message": "Password changed successfully"}


@router.delete("")
def delete_account(request: Request, response: Response, user: User = Depends(require_user), db: Session = Depends(get_db)):
    before = audit.snapshot(user, ("email", "name", "role"))
    audit.record(db, request, action="delete", entity_type="user", entity_id=user.id, actor=user, before=before)
    db.query(Application).filter(
        (Application.candidate_id == user.id) | (Application.recruiter_id == user.id)
    ).delete(synchronize_session=False)
    db.delete(user)
    db.commit()
    response.delete_cookie(TOKEN_COOKIE)
    return {"message": "Account deleted successfully"}
