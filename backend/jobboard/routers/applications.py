"""Job applications and recruiter contacts.

A job seeker applying to a job creates an application in status `new`; a
recruiter reaching out to a candidate creates one in status `contacted`.
Recruiter notes are only ever serialized for recruiters and admins.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import require_job_seeker, require_recruiter, require_user
from ..models import CV, Application, Job, User, utcnow
from ..schemas import ApplicationCreate, ApplicationOut, ApplicationSeekerOut, ApplicationUpdate, ArchiveIn, dump

logger = logging.getLogger(__name__)

router = APIRouter()
my_router = APIRouter()


def serialize(application: Application, user: User) -> dict:
    if user.role == "job-seeker":
        return dump(ApplicationSeekerOut, application)
    return dump(ApplicationOut, application)


def _get_application(db: Session, application_id: int) -> Application:
    application = db.get(Application, application_id)
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")
    return application


def _check_party(application: Application, user: User) -> None:
    if user.role == "job-seeker":
        allowed = application.candidate_id == user.id
    else:
        allowed = application.recruiter_id == user.id
    if not allowed:
        raise HTTPException(status_code=403, detail="Forbidden")


@router.get("")
def list_applications(jobId: Optional[int] = None, user: User = Depends(require_user), db: Session = Depends(get_db)):
    if jobId is not None:
        application = (
            db.query(Application)
            .filter(Application.job_id == jobId, Application.candidate_id == user.id)
            .first()
        )
        return {
            "hasApplied": application is not None,
            "application": serialize(application, user) if application else None,
        }

    if user.role != "recruiter":
        raise HTTPException(status_code=400, detail="Job ID is required")
    applications = (
        db.query(Application)
        .filter(Application.recruiter_id == user.id, Application.archived_by_recruiter.is_(False))
        .order_by(Application.applied_at.desc())
        .all()
    )
    return {"applications": [serialize(a, user) for a in applications]}


def _apply(db: Session, user: User, job_id: Optional[int]) -> Application:
    if not job_id:
        raise HTTPException(status_code=400, detail="Job ID is required")
    job = db.get(Job, job_id)
    if not job or job.published is False:
        raise HTTPException(status_code=404, detail="Job not found")
    if db.query(Application).filter(Application.job_id == job.id, Application.candidate_id == user.id).first():
        raise HTTPException(status_code=400, detail="You have already applied to this job")
    return Application(job_id=job.id, recruiter_id=job.recruiter_id, candidate_id=user.id, status="new")


def _contact(db: Session, user: User, candidate_id: Optional[int], job_id: Optional[int]):
    if not candidate_id:
        raise HTTPException(status_code=400, detail="Candidate ID is required")
    if not db.query(CV).filter(CV.job_seeker_id == candidate_id).first():
        raise HTTPException(status_code=404, detail="Candidate not found")

    if not job_id:
        published = (
            db.query(Job)
            .filter(Job.recruiter_id == user.id, Job.published.is_(True))
            .order_by(Job.created_at.desc())
            .all()
        )
        if not published:
            raise HTTPException(status_code=400, detail="You need at least one published job to contact candidates")
        if len(published) > 1:
            choices = [{"id": j.id, "title": j.title, "company": j.company, "location": j.location} for j in published]
            return JSONResponse(status_code=400, content={"detail": "Please select a job", "jobs": choices})
        job_id = published[0].id
    else:
        job = db.get(Job, job_id)
        if not job:
            raise HTTPException(status_code=404, detail="Job not found")
        if job.recruiter_id != user.id:
            raise HTTPException(status_code=403, detail="You do not own this job")

    if db.query(Application).filter(Application.recruiter_id == user.id, Application.candidate_id == candidate_id).first():
        raise HTTPException(status_code=400, detail="You have already contacted this candidate")
    return Application(job_id=job_id, recruiter_id=user.id, candidate_id=candidate_id, status="contacted")


@router.post("", status_code=201)
def create_application(body: ApplicationCreate, user: User = Depends(require_user), db: Session = Depends(get_db)):
    if user.role == "job-seeker":
        result = _apply(db, user, body.job_id)
        message = "Application submitted successfully"
        duplicate = "You have already applied to this job"
    elif user.role in ("recruiter", "admin"):
        result = _contact(db, user, body.candidate_id, body.job_id)
        message = "Candidate contacted successfully"
        duplicate = "You have already contacted this candidate"
    else:
        raise HTTPException(status_code=403, detail="Forbidden")
    if isinstance(result, JSONResponse):
        return result

    now = utcnow()
    result.applied_at = now
    result.last_activity_at = now
    db.add(result)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail=duplicate)
    db.refresh(result)
    logger.info("Application %s created by %s (%s)", result.id, user.id, result.status)
    return {"message": message, "application": serialize(result, user)}


@router.get("/{application_id}")
def get_application(application_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    application = _get_application(db, application_id)
    _check_party(application, user)
    if user.role == "recruiter" and application.viewed_at is None:
        application.viewed_at = utcnow()
        db.commit()
        db.refresh(application)
    return {"application": serialize(application, user)}


@router.patch("/{application_id}")
def update_application(application_id: int, body: ApplicationUpdate, user: User = Depends(require_recruiter), db: Session = Depends(get_db)):
    if body.status is None and body.recruiter_notes is None:
        raise HTTPException(status_code=400, detail="Either status or recruiterNotes must be provided")
    application = _get_application(db, application_id)
    _check_party(application, user)
    if application.status == "withdrawn":
        raise HTTPException(
            status_code=400,
            detail="Cannot change a withdrawn application. Withdrawn applications cannot be modified.",
        )

    now = utcnow()
    status_changed = body.status is not None and body.status != application.status
    if status_changed:
        application.status = body.status
        if body.status == "withdrawn":
            application.withdrawn_at = now
    if body.recruiter_notes is not None:
        application.recruiter_notes = body.recruiter_notes
    if status_changed or body.recruiter_notes is not None:
        application.last_activity_at = now
    db.commit()
    db.refresh(application)

    if status_changed and body.recruiter_notes is not None:
        message = "Application status and notes updated successfully"
    elif status_changed:
        message = "Application status updated successfully"
    elif body.recruiter_notes is not None:
        message = "Application notes updated successfully"
    else:
        message = "Application updated successfully"
    return {"message": message, "application": serialize(application, user)}


@router.post("/{application_id}/withdraw")
def withdraw_application(application_id: int, user: User = Depends(require_job_seeker), db: Session = Depends(get_db)):
    application = _get_application(db, application_id)
    _check_party(application, user)
    if application.status == "withdrawn" or application.withdrawn_at is not None:
        raise HTTPException(status_code=400, detail="Application is already withdrawn")
    now = utcnow()
    application.status = "withdrawn"
    application.withdrawn_at = now
    application.last_activity_at = now
    db.commit()
    db.refresh(application)
    return {"message": "Application withdrawn successfully", "application": serialize(application, user)}


@router.post("/{application_id}/archive")
def archive_application(application_id: int, body: ArchiveIn, user: User = Depends(require_user), db: Session = Depends(get_db)):
    application = _get_application(db, application_id)
    _check_party(application, user)
    if user.role == "job-seeker":
        if body.archived_by_recruiter is not None:
            raise HTTPException(status_code=403, detail="Job seekers can only archive applications for themselves")
        if body.archived_by_job_seeker is None:
            raise HTTPException(status_code=400, detail="archivedByJobSeeker is required for job seekers")
        application.archived_by_job_seeker = body.archived_by_job_seeker
        archived = body.archived_by_job_seeker
    else:
        if body.archived_by_job_seeker is not None:
            raise HTTPException(status_code=403, detail="Recruiters can only archive applications for themselves")
        if body.archived_by_recruiter is None:
            raise HTTPException(status_code=400, detail="archivedByRecruiter is required for recruiters")
        application.archived_by_recruiter = body.archived_by_recruiter
        archived = body.archived_by_recruiter
    db.commit()
    db.refresh(application)
    message = "Application archived successfully" if archived else "Application unarchived successfully"
    return {"message": message, "application": serialize(application, user)}


@my_router.get("")
def my_applications(user: User = Depends(require_job_seeker), db: Session = Depends(get_db)):
    applications = (
        db.query(Application)
        .filter(Application.candidate_id == user.id, Application.archived_by_job_seeker.is_(False))
        .order_by(Application.applied_at.desc())
        .all()
    )
    return {"applications": [serialize(a, user) for a in applications]}
