import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from .. import audit
from ..db import get_db
from ..deps import get_current_user, require_recruiter, require_user
from ..models import Company, Job, User
from ..schemas import JobIn, JobOut, JobUpdate, dump

logger = logging.getLogger(__name__)

router = APIRouter()

AUDIT_FIELDS = ("title", "description", "location", "country", "type", "published", "featured", "spam")
# columns a null in the payload must not overwrite
NON_NULL_FIELDS = {
    "title", "description", "location", "type", "published", "apply_by_email", "apply_by_website", "apply_by_whatsapp",
}


def _get_job(db: Session, job_id: int) -> Job:
    job = db.get(Job, job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job


def _check_owner(job: Job, user: User) -> None:
    if user.role != "admin" and job.recruiter_id != user.id:
        raise HTTPException(status_code=403, detail="Forbidden")


@router.get("")
def list_jobs(db: Session = Depends(get_db)):
    jobs = db.query(Job).filter(Job.spam != "yes").order_by(Job.created_at.desc()).all()
    return {"jobs": [dump(JobOut, j) for j in jobs]}


@router.post("", status_code=201)
def create_job(body: JobIn, request: Request, user: User = Depends(require_recruiter), db: Session = Depends(get_db)):
    company = db.query(Company).filter(Company.owner_id == user.id).first()
    if not company:
        raise HTTPException(status_code=400, detail="You must create a company profile before posting jobs")
    if company.coordinates is None:
        raise HTTPException(status_code=400, detail="Set your company location on the map before posting jobs")

    fields = {k: v for k, v in body.model_dump(exclude_unset=True).items() if not (v is None and k in NON_NULL_FIELDS)}
    job = Job(company=company.name, company_id=company.id, recruiter_id=user.id, **fields)
    db.add(job)
    db.commit()
    db.refresh(job)
    logger.info("Recruiter %s created job %s", user.id, job.id)
    audit.record(db, request, action="create", entity_type="job", entity_id=job.id, actor=user,
                 after=audit.snapshot(job, AUDIT_FIELDS))
    return {"message": "Job created successfully", "job": dump(JobOut, job)}


@router.get("/my")
def my_jobs(user: User = Depends(require_recruiter), db: Session = Depends(get_db)):
    jobs = db.query(Job).filter(Job.recruiter_id == user.id).order_by(Job.created_at.desc()).all()
    return {"jobs": [dump(JobOut, j) for j in jobs]}


@router.get("/{job_id}")
def get_job(job_id: int, db: Session = Depends(get_db), user: Optional[User] = Depends(get_current_user)):
    job = _get_job(db, job_id)
    is_owner = user is not None and (user.role == "admin" or job.recruiter_id == user.id)
    if job.published is False and not is_owner:
        raise HTTPException(status_code=404, detail="Job not found")
    if not is_owner:
        job.visit_count = (job.visit_count or 0) + 1
        db.commit()
        db.refresh(job)
    return {"job": dump(JobOut, job)}


@router.put("/{job_id}")
def update_job(job_id: int, body: JobUpdate, request: Request, user: User = Depends(require_user), db: Session = Depends(get_db)):
    job = _get_job(db, job_id)
    _check_owner(job, user)
    before = audit.snapshot(job, AUDIT_FIELDS)
    for name, value in body.model_dump(exclude_unset=True).items():
        if value is None and name in NON_NULL_FIELDS:
            continue
        setattr(job, name, value)
    db.commit()
    db.refresh(job)
    audit.record(db, request, action="update", entity_type="job", entity_id=job.id, actor=user,
                 before=before, after=audit.snapshot(job, AUDIT_FIELDS))
    return {"message": "Job updated successfully", "job": dump(JobOut, job)}


@router.delete("/{job_id}")
def delete_job(job_id: int, request: Request, user: User = Depends(require_user), db: Session = Depends(get_db)):
    job = _get_job(db, job_id)
    _check_owner(job, user)
    before = audit.snapshot(job, AUDIT_FIELDS)
    db.delete(job)
    db.commit()
    audit.record(db, request, action="delete", entity_type="job", entity_id=job_id, actor=user, before=before)
    return {"message": "Job deleted successfully"}


@router.post("/{job_id}/report-spam")
def report_spam(job_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    job = _get_job(db, job_id)
    job.spam = "yes"
    db.commit()
    logger.info("User %s reported job %s as spam", user.id, job_id)
    return {"message": "Job reported as spam"}
