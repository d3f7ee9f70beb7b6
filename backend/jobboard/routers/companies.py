from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from .. import audit
from ..db import get_db
from ..deps import require_recruiter, require_recruiter_or_admin
from ..models import Company, Job, User
from ..schemas import CompanyIn, CompanyOut, CompanyUpdate, JobOut, dump

router = APIRouter()

AUDIT_FIELDS = ("name", "description", "website", "latitude", "longitude", "featured", "logo", "pictures")


def apply_company_fields(company: Company, fields: Dict[str, Any]) -> None:
    """Copy validated payload fields onto the row, flattening coordinates."""
    if "coordinates" in fields:
        coords = fields.pop("coordinates")
        if coords is None:
            raise HTTPException(status_code=400, detail="Company location (coordinates) is required")
        company.latitude = coords["latitude"]
        company.longitude = coords["longitude"]
    if fields.get("name") is None:
        fields.pop("name", None)
    for name, value in fields.items():
        setattr(company, name, value)


@router.get("")
def get_my_company(user: User = Depends(require_recruiter_or_admin), db: Session = Depends(get_db)):
    company = db.query(Company).filter(Company.owner_id == user.id).first()
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")
    return {"company": dump(CompanyOut, company)}


@router.post("", status_code=201)
def create_company(body: CompanyIn, request: Request, user: User = Depends(require_recruiter), db: Session = Depends(get_db)):
    if db.query(Company).filter(Company.owner_id == user.id).first():
        raise HTTPException(status_code=400, detail="You already have a company. Please update your existing company.")
    if body.coordinates is None:
        raise HTTPException(status_code=400, detail="Company location (coordinates) is required")
    company = Company(owner_id=user.id)
    apply_company_fields(company, body.model_dump(exclude_unset=True))
    db.add(company)
    db.commit()
    db.refresh(company)
    audit.record(db, request, action="create", entity_type="company", entity_id=company.id, actor=user,
                 after=audit.snapshot(company, AUDIT_FIELDS))
    return {"message": "Company created successfully", "company": dump(CompanyOut, company)}


@router.put("")
def update_my_company(body: CompanyUpdate, request: Request, user: User = Depends(require_recruiter), db: Session = Depends(get_db)):
    company = db.query(Company).filter(Company.owner_id == user.id).first()
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")
    before = audit.snapshot(company, AUDIT_FIELDS)
    old_name = company.name
    apply_company_fields(company, body.model_dump(exclude_unset=True))
    if company.name != old_name:
        # jobs carry the company name denormalized
        db.query(Job).filter(Job.company_id == company.id).update({Job.company: company.name})
    db.commit()
    db.refresh(company)
    audit.record(db, request, action="update", entity_type="company", entity_id=company.id, actor=user,
                 before=before, after=audit.snapshot(company, AUDIT_FIELDS))
    return {"message": "Company updated successfully", "company": dump(CompanyOut, company)}


public_router = APIRouter()


@public_router.get("/{company_id}")
def get_company(company_id: int, db: Session = Depends(get_db)):
    company = db.get(Company, company_id)
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")
    jobs = (
        db.query(Job)
        .filter(Job.company_id == company.id, Job.published.is_(True), Job.spam != "yes")
        .order_by(Job.created_at.desc())
        .all()
    )
    return {"company": dump(CompanyOut, company), "jobs": [dump(JobOut, j) for j in jobs]}
