from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from .. import audit
from ..db import get_db
from ..deps import require_job_seeker
from ..models import CV, User
from ..schemas import CVIn, CVOut, CVUpdate, dump

router = APIRouter()

AUDIT_FIELDS = ("full_name", "email", "phone", "summary", "published", "pictures")


def _my_cv(db: Session, user: User) -> CV:
    cv = db.query(CV).filter(CV.job_seeker_id == user.id).first()
    if not cv:
        raise HTTPException(status_code=404, detail="CV not found")
    return cv


@router.get("")
def get_cv(user: User = Depends(require_job_seeker), db: Session = Depends(get_db)):
    return {"cv": dump(CVOut, _my_cv(db, user))}


@router.post("", status_code=201)
def create_cv(body: CVIn, request: Request, user: User = Depends(require_job_seeker), db: Session = Depends(get_db)):
    if db.query(CV).filter(CV.job_seeker_id == user.id).first():
        raise HTTPException(status_code=400, detail="CV already exists. Please update your existing CV.")
    cv = CV(job_seeker_id=user.id, published=True, **body.model_dump(exclude_unset=True))
    db.add(cv)
    db.commit()
    db.refresh(cv)
    audit.record(db, request, action="create", entity_type="cv", entity_id=cv.id, actor=user,
                 after=audit.snapshot(cv, AUDIT_FIELDS))
    return {"message": "CV created successfully", "cv": dump(CVOut, cv)}


@router.put("")
def update_cv(body: CVUpdate, request: Request, user: User = Depends(require_job_seeker), db: Session = Depends(get_db)):
    cv = _my_cv(db, user)
    before = audit.snapshot(cv, AUDIT_FIELDS)
    for name, value in body.model_dump(exclude_unset=True).items():
        if value is None and name in ("full_name", "email"):
            continue
        setattr(cv, name, value)
    db.commit()
    db.refresh(cv)
    audit.record(db, request, action="update", entity_type="cv", entity_id=cv.id, actor=user,
                 before=before, after=audit.snapshot(cv, AUDIT_FIELDS))
    return {"message": "CV updated successfully", "cv": dump(CVOut, cv)}


@router.delete("")
def delete_cv(request: Request, user: User = Depends(require_job_seeker), db: Session = Depends(get_db)):
    cv = _my_cv(db, user)
    before = audit.snapshot(cv, AUDIT_FIELDS)
    cv_id = cv.id
    db.delete(cv)
    db.commit()
    audit.record(db, request, action="delete", entity_type="cv", entity_id=cv_id, actor=user, before=before)
    return {"message": "CV deleted successfully"}


@router.post("/toggle-publish")
def toggle_publish(user: User = Depends(require_job_seeker), db: Session = Depends(get_db)):
    cv = _my_cv(db, user)
    cv.published = not cv.published
    db.commit()
    state = "published" if cv.published else "unpublished"
    return {"message": f"CV {state} successfully", "published": cv.published}
