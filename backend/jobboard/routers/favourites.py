"""Job seekers' favourite jobs and recruiters' favourite candidates."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import require_job_seeker, require_recruiter_or_admin
from ..models import CV, Job, User
from ..schemas import JobOut, dump
from .listings import cv_with_seeker

logger = logging.getLogger(__name__)

router = APIRouter()


def _toggle(db: Session, user: User, attr: str, entity_id: int) -> dict:
    current: List[int] = list(getattr(user, attr) or [])
    if entity_id in current:
        current.remove(entity_id)
        added = False
    else:
        current.append(entity_id)
        added = True
    # assign a new list so the JSON column is flagged dirty
    setattr(user, attr, current)
    db.commit()
    logger.info("User %s %s %s %s", user.id, "added" if added else "removed", attr, entity_id)
    return {"message": "Added to favourites" if added else "Removed from favourites", "isFavourite": added}


@router.get("/jobs/favourites")
def favourite_jobs(user: User = Depends(require_job_seeker), db: Session = Depends(get_db)):
    ids = user.favourite_jobs or []
    if not ids:
        return {"jobs": []}
    jobs = (
        db.query(Job)
        .filter(Job.id.in_(ids), Job.published.is_(True), Job.spam != "yes")
        .order_by(Job.created_at.desc())
        .all()
    )
    return {"jobs": [dump(JobOut, j) for j in jobs]}


@router.get("/jobs/{job_id}/favourite")
def is_favourite_job(job_id: int, user: User = Depends(require_job_seeker)):
    return {"isFavourite": job_id in (user.favourite_jobs or [])}


@router.post("/jobs/{job_id}/favourite")
def toggle_favourite_job(job_id: int, user: User = Depends(require_job_seeker), db: Session = Depends(get_db)):
    if not db.get(Job, job_id):
        raise HTTPException(status_code=404, detail="Job not found")
    return _toggle(db, user, "favourite_jobs", job_id)


@router.get("/candidates-list/favourites")
def favourite_candidates(user: User = Depends(require_recruiter_or_admin), db: Session = Depends(get_db)):
    ids = user.favourite_candidates or []
    if not ids:
        return {"cvs": []}
    cvs = (
        db.query(CV)
        .filter(CV.id.in_(ids), CV.published.is_(True))
        .order_by(CV.created_at.desc())
        .all()
    )
    return {"cvs": [cv_with_seeker(cv) for cv in cvs]}


@router.get("/candidates-list/{cv_id}/favourite")
def is_favourite_candidate(cv_id: int, user: User = Depends(require_recruiter_or_admin)):
    return {"isFavourite": cv_id in (user.favourite_candidates or [])}


@router.post("/candidates-list/{cv_id}/favourite")
def toggle_favourite_candidate(cv_id: int, user: User = Depends(require_recruiter_or_admin), db: Session = Depends(get_db)):
    if not db.get(CV, cv_id):
        raise HTTPException(status_code=404, detail="CV not found")
    return _toggle(db, user, "favourite_candidates", cv_id)
