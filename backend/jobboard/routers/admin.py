"""Admin-only management endpoints. Every mutation is written to the audit log."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from .. import audit
from ..db import get_db
from ..deps import require_admin
from ..models import CV, Application, AuditLog, Company, Job, User
from ..schemas import (
    AdminCompanyUpdate,
    AdminJobUpdate,
    AdminUserUpdate,
    AuditLogOut,
    CompanyOut,
    CVOut,
    JobOut,
    UserOut,
    dump,
)
from ..security import hash_password
from . import companies as company_routes
from . import jobs as job_routes

logger = logging.getLogger(__name__)

router = APIRouter()

USER_FIELDS = ("email", "name", "role")


def _person(user: Optional[User]) -> Optional[dict]:
    if user is None:
        return None
    return {"id": user.id, "name": user.name, "email": user.email}


def _user_detail(db: Session, user: User) -> dict:
    data = dump(UserOut, user)
    if user.role == "recruiter":
        jobs = db.query(Job).filter(Job.recruiter_id == user.id).order_by(Job.created_at.desc()).all()
        data["jobs"] = [dump(JobOut, j) for j in jobs]
    elif user.role == "job-seeker":
        cv = db.query(CV).filter(CV.job_seeker_id == user.id).first()
        data["cv"] = dump(CVOut, cv) if cv else None
    return data


def _get(db: Session, model, entity_id: int, label: str):
    obj = db.get(model, entity_id)
    if not obj:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return obj


# --- users ---

@router.get("/users")
def list_users(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    users = db.query(User).order_by(User.created_at.desc()).all()
    return {"users": [_user_detail(db, u) for u in users]}


@router.get("/users/{user_id}")
def get_user(user_id: int, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return {"user": _user_detail(db, _get(db, User, user_id, "User"))}


@router.put("/users/{user_id}")
def update_user(user_id: int, body: AdminUserUpdate, request: Request, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    user = _get(db, User, user_id, "User")
    if body.password and len(body.password) < 6:
        raise HTTPException(status_code=400, detail="Password must be at least 6 characters")
    before = audit.snapshot(user, USER_FIELDS)
    if body.email:
        email = body.email.strip().lower()
        if db.query(User).filter(User.email == email, User.id != user.id).first():
            raise HTTPException(status_code=400, detail="Email is already in use")
        user.email = email
    if body.name:
        user.name = body.name.strip()
    if body.role:
        user.role = body.role
    if body.password:
        user.password_hash = hash_password(body.password)
    db.commit()
    db.refresh(user)
    audit.record(db, request, action="update", entity_type="user", entity_id=user.id, actor=admin,
                 before=before, after=audit.snapshot(user, USER_FIELDS),
                 metadata={"passwordChanged": bool(body.password)})
    return {"message": "User updated successfully", "user": dump(UserOut, user)}


@router.delete("/users/{user_id}")
def delete_user(user_id: int, request: Request, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    user = _get(db, User, user_id, "User")
    if user.id == admin.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account here")
    before = audit.snapshot(user, USER_FIELDS)
    db.query(Application).filter(
        (Application.candidate_id == user.id) | (Application.recruiter_id == user.id)
    ).delete(synchronize_session=False)
    # jobs, company, CV and saved searches go with the user via relationship cascades
    db.delete(user)
    db.commit()
    logger.info("Admin %s deleted user %s", admin.id, user_id)
    audit.record(db, request, action="delete", entity_type="user", entity_id=user_id, actor=admin, before=before)
    return {"message": "User deleted successfully"}


# --- companies ---

@router.get("/companies")
def list_companies(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    companies = db.query(Company).order_by(Company.created_at.desc()).all()
    items = []
    for company in companies:
        data = dump(CompanyOut, company)
        data["owner"] = _person(company.owner)
        items.append(data)
    return {"companies": items}


@router.get("/companies/{company_id}")
def get_company(company_id: int, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    company = _get(db, Company, company_id, "Company")
    data = dump(CompanyOut, company)
    data["owner"] = _person(company.owner)
    return {"company": data}


@router.put("/companies/{company_id}")
def update_company(company_id: int, body: AdminCompanyUpdate, request: Request, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    company = _get(db, Company, company_id, "Company")
    before = audit.snapshot(company, company_routes.AUDIT_FIELDS)
    old_name = company.name
    fields = body.model_dump(exclude_unset=True)
    if fields.get("featured") is None:
        fields.pop("featured", None)
    company_routes.apply_company_fields(company, fields)
    if company.name != old_name:
        db.query(Job).filter(Job.company_id == company.id).update({Job.company: company.name})
    db.commit()
    db.refresh(company)
    audit.record(db, request, action="update", entity_type="company", entity_id=company.id, actor=admin,
                 before=before, after=audit.snapshot(company, company_routes.AUDIT_FIELDS))
    return {"message": "Company updated successfully", "company": dump(CompanyOut, company)}


@router.delete("/companies/{company_id}")
def delete_company(company_id: int, request: Request, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    company = _get(db, Company, company_id, "Company")
    before = audit.snapshot(company, company_routes.AUDIT_FIELDS)
    removed = db.query(Job).filter(Job.company_id == company.id).delete(synchronize_session=False)
    db.delete(company)
    db.commit()
    audit.record(db, request, action="delete", entity_type="company", entity_id=company_id, actor=admin,
                 before=before, metadata={"jobsDeleted": removed})
    return {"message": "Company deleted successfully"}


# --- jobs ---

@router.get("/jobs")
def list_jobs(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    jobs = db.query(Job).order_by(Job.created_at.desc()).all()
    items = []
    for job in jobs:
        data = dump(JobOut, job)
        data["recruiter"] = _person(job.recruiter)
        items.append(data)
    return {"jobs": items}


@router.get("/jobs/{job_id}")
def get_job(job_id: int, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    job = _get(db, Job, job_id, "Job")
    data = dump(JobOut, job)
    data["recruiter"] = _person(job.recruiter)
    return {"job": data}


@router.put("/jobs/{job_id}")
def update_job(job_id: int, body: AdminJobUpdate, request: Request, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    job = _get(db, Job, job_id, "Job")
    before = audit.snapshot(job, job_routes.AUDIT_FIELDS)
    for name, value in body.model_dump(exclude_unset=True).items():
        if value is None and (name in job_routes.NON_NULL_FIELDS or name in ("featured", "spam")):
            continue
        setattr(job, name, value)
    db.commit()
    db.refresh(job)
    audit.record(db, request, action="update", entity_type="job", entity_id=job.id, actor=admin,
                 before=before, after=audit.snapshot(job, job_routes.AUDIT_FIELDS))
    return {"message": "Job updated successfully", "job": dump(JobOut, job)}


@router.delete("/jobs/{job_id}")
def delete_job(job_id: int, request: Request, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    job = _get(db, Job, job_id, "Job")
    before = audit.snapshot(job, job_routes.AUDIT_FIELDS)
    db.delete(job)
    db.commit()
    audit.record(db, request, action="delete", entity_type="job", entity_id=job_id, actor=admin, before=before)
    return {"message": "Job deleted successfully"}


# --- CVs, audit logs, statistics ---

@router.get("/cvs")
def list_cvs(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    cvs = db.query(CV).order_by(CV.created_at.desc()).all()
    items = []
    for cv in cvs:
        data = dump(CVOut, cv)
        data["jobSeeker"] = _person(cv.job_seeker)
        items.append(data)
    return {"cvs": items}


@router.get("/audit-logs")
def list_audit_logs(
    action: Optional[str] = None,
    entityType: Optional[str] = None,
    userId: Optional[int] = None,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    q = db.query(AuditLog)
    if action:
        q = q.filter(AuditLog.action == action)
    if entityType:
        q = q.filter(AuditLog.entity_type == entityType)
    if userId is not None:
        q = q.filter(AuditLog.user_id == userId)
    total = q.count()
    rows = q.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).offset(offset).limit(limit).all()
    return {
        "auditLogs": [AuditLogOut.from_row(r).model_dump(by_alias=True, mode="json") for r in rows],
        "total": total,
        "limit": limit,
        "offset": offset,
    }


@router.get("/statistics")
def statistics(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return {
        "statistics": {
            "jobSeekers": db.query(User).filter(User.role == "job-seeker").count(),
            "recruiters": db.query(User).filter(User.role == "recruiter").count(),
            "jobs": db.query(Job).count(),
            "cvs": db.query(CV).count(),
            "companies": db.query(Company).count(),
        }
    }
