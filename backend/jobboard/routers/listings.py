"""Public and recruiter-facing listing endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import listing
from ..db import get_db
from ..deps import require_recruiter_or_admin
from ..models import CV, Company, Job, User
from ..schemas import CompanyOut, CVOut, JobOut, dump

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/jobs-list")
def jobs_list(
    featured: Optional[str] = None,
    keyword: Optional[str] = None,
    location: Optional[str] = None,
    country: Optional[str] = None,
    category: Optional[str] = None,
    sport: Optional[str] = None,
    language: Optional[str] = None,
    db: Session = Depends(get_db),
):
    q = db.query(Job).filter(Job.published.is_(True), Job.spam != "yes")
    if featured == "true":
        q = q.filter(Job.featured.is_(True))
    jobs = [dump(JobOut, j) for j in q.order_by(Job.created_at.desc()).all()]

    filters = listing.JobFilters(keyword, location, country, category, sport, language)
    if filters.active():
        jobs = listing.filter_items(jobs, filters)
    return {"jobs": listing.sort_jobs(jobs)}


@router.get("/companies-list")
def companies_list(featured: Optional[str] = None, db: Session = Depends(get_db)):
    q = db.query(Company)
    if featured == "true":
        q = q.filter(Company.featured.is_(True))
    companies = q.order_by(Company.created_at.desc()).all()
    return {"companies": [dump(CompanyOut, c) for c in companies]}


def cv_with_seeker(cv: CV) -> dict:
    data = dump(CVOut, cv)
    seeker = cv.job_seeker
    data["jobSeeker"] = {
        "id": seeker.id,
        "name": seeker.name,
        "email": seeker.email,
        "lastOnline": seeker.last_online.isoformat() if seeker.last_online else None,
    }
    return data


@router.get("/candidates-list")
def candidates_list(user: User = Depends(require_recruiter_or_admin), db: Session = Depends(get_db)):
    cvs = db.query(CV).filter(CV.published.is_(True)).order_by(CV.created_at.desc()).all()
    items = [cv_with_seeker(cv) for cv in cvs]
    logger.debug("candidates-list: %d CVs for user %s", len(items), user.id)
    return {"cvs": items, "filters": listing.candidate_filter_options(items)}


@router.get("/candidates-list/{cv_id}")
def candidate_detail(cv_id: int, user: User = Depends(require_recruiter_or_admin), db: Session = Depends(get_db)):
    cv = db.get(CV, cv_id)
    if not cv or (cv.published is False and user.role != "admin"):
        raise HTTPException(status_code=404, detail="CV not found")
    return {"cv": cv_with_seeker(cv)}


@router.get("/resumes")
def resumes(db: Session = Depends(get_db)):
    cvs = db.query(CV).filter(CV.published.is_(True)).order_by(CV.created_at.desc()).all()
    return {"resumes": [dump(CVOut, cv) for cv in cvs]}
