from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel

from . import vocab

JobType = Literal["full-time", "part-time", "contract", "freelance"]
Role = Literal["recruiter", "job-seeker", "admin"]
Status = Literal["new", "contacted", "interviewed", "offered", "rejected", "withdrawn"]


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


def _check_pictures(v: Optional[List[str]]) -> Optional[List[str]]:
    if v is not None and len(v) > vocab.MAX_PICTURES:
        raise ValueError(f"Maximum {vocab.MAX_PICTURES} pictures allowed")
    return v


def _check_vocab(v: Optional[List[str]], allowed: List[str], label: str) -> Optional[List[str]]:
    if v is None:
        return v
    bad = vocab.invalid_values(v, allowed)
    if bad:
        raise ValueError(f"Unknown {label}: {', '.join(bad)}")
    return v


def _null_as_empty(v: Any) -> Any:
    return [] if v is None else v


def _normalize_country(v: Optional[str]) -> Optional[str]:
    if v is None or not v.strip():
        return None
    return v.strip().upper()


# --- users / auth ---

class UserOut(CamelModel):
    id: int
    email: str
    name: str
    role: Role
    last_online: Optional[datetime] = None
    created_at: Optional[datetime] = None


class RegisterIn(CamelModel):
    email: str
    password: str
    name: str
    role: Literal["recruiter", "job-seeker"]

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v


class LoginIn(CamelModel):
    email: str
    password: str


class AccountUpdate(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None


class ChangePasswordIn(CamelModel):
    current_password: str
    new_password: str


# --- company ---

class Address(CamelModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None

    @field_validator("country")
    @classmethod
    def normalize_country(cls, v):
        return _normalize_country(v)


class Coordinates(CamelModel):
    latitude: float
    longitude: float

    @field_validator("latitude")
    @classmethod
    def latitude_range(cls, v: float) -> float:
        if not -90 <= v <= 90:
            raise ValueError("Latitude must be between -90 and 90")
        return v

    @field_validator("longitude")
    @classmethod
    def longitude_range(cls, v: float) -> float:
        if not -180 <= v <= 180:
            raise ValueError("Longitude must be between -180 and 180")
        return v


class Contact(CamelModel):
    email: Optional[str] = None
    office_phone: Optional[str] = None
    whatsapp: Optional[str] = None


class SocialMedia(CamelModel):
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    tiktok: Optional[str] = None
    youtube: Optional[str] = None
    twitter: Optional[str] = None


class CompanyUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    address: Optional[Address] = None
    coordinates: Optional[Coordinates] = None
    website: Optional[str] = None
    contact: Optional[Contact] = None
    social_media: Optional[SocialMedia] = None
    offered_activities: Optional[List[str]] = None
    offered_services: Optional[List[str]] = None
    logo: Optional[str] = None
    pictures: Optional[List[str]] = None

    @field_validator("offered_activities", "offered_services", "pictures", mode="before")
    @classmethod
    def lists_not_null(cls, v):
        return _null_as_empty(v)

    @field_validator("pictures")
    @classmethod
    def pictures_limit(cls, v):
        return _check_pictures(v)


class CompanyIn(CompanyUpdate):
    name: str


class AdminCompanyUpdate(CompanyUpdate):
    featured: Optional[bool] = None


class CompanyOut(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    address: Optional[Address] = None
    coordinates: Optional[Coordinates] = None
    website: Optional[str] = None
    contact: Optional[Contact] = None
    social_media: Optional[SocialMedia] = None
    offered_activities: List[str] = []
    offered_services: List[str] = []
    logo: Optional[str] = None
    pictures: List[str] = []
    featured: bool = False
    owner_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# --- jobs ---

class JobUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    country: Optional[str] = None
    salary: Optional[str] = None
    type: Optional[JobType] = None
    languages: Optional[List[str]] = None
    qualifications: Optional[List[str]] = None
    sports: Optional[List[str]] = None
    occupational_areas: Optional[List[str]] = None
    pictures: Optional[List[str]] = None
    published: Optional[bool] = None
    apply_by_email: Optional[bool] = None
    apply_by_website: Optional[bool] = None
    apply_by_whatsapp: Optional[bool] = None
    application_email: Optional[str] = None
    application_website: Optional[str] = None
    application_whatsapp: Optional[str] = None

    @field_validator("languages", "qualifications", "sports", "occupational_areas", "pictures", mode="before")
    @classmethod
    def lists_not_null(cls, v):
        return _null_as_empty(v)

    @field_validator("country")
    @classmethod
    def normalize_country(cls, v):
        return _normalize_country(v)

    @field_validator("pictures")
    @classmethod
    def pictures_limit(cls, v):
        return _check_pictures(v)

    @field_validator("languages")
    @classmethod
    def languages_allowed(cls, v):
        if v is not None and len(v) > vocab.MAX_JOB_LANGUAGES:
            raise ValueError(f"Maximum {vocab.MAX_JOB_LANGUAGES} languages allowed")
        return _check_vocab(v, vocab.LANGUAGES, "languages")

    @field_validator("qualifications")
    @classmethod
    def qualifications_allowed(cls, v):
        return _check_vocab(v, vocab.ALL_QUALIFICATIONS, "qualifications")

    @field_validator("sports")
    @classmethod
    def sports_allowed(cls, v):
        return _check_vocab(v, vocab.SPORTS, "sports")

    @field_validator("occupational_areas")
    @classmethod
    def areas_allowed(cls, v):
        return _check_vocab(v, vocab.OCCUPATIONAL_AREAS, "occupational areas")


class JobIn(JobUpdate):
    title: str
    description: str
    location: str
    type: JobType


class AdminJobUpdate(JobUpdate):
    featured: Optional[bool] = None
    spam: Optional[Literal["yes", "no"]] = None


class JobOut(CamelModel):
    id: int
    title: str
    description: str
    company: str
    company_id: Optional[int] = None
    location: str
    country: Optional[str] = None
    salary: Optional[str] = None
    type: JobType
    languages: List[str] = []
    qualifications: List[str] = []
    sports: List[str] = []
    occupational_areas: List[str] = []
    pictures: List[str] = []
    spam: str = "no"
    published: bool = True
    featured: bool = False
    apply_by_email: bool = False
    apply_by_website: bool = False
    apply_by_whatsapp: bool = False
    application_email: Optional[str] = None
    application_website: Optional[str] = None
    application_whatsapp: Optional[str] = None
    visit_count: int = 0
    recruiter_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# --- CVs ---

class ExperienceItem(CamelModel):
    company: Optional[str] = None
    position: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    description: Optional[str] = None


class EducationItem(CamelModel):
    institution: Optional[str] = None
    degree: Optional[str] = None
    field: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class CVUpdate(CamelModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    summary: Optional[str] = None
    experience: Optional[List[ExperienceItem]] = None
    education: Optional[List[EducationItem]] = None
    skills: Optional[List[str]] = None
    certifications: Optional[List[str]] = None
    experience_and_skill: Optional[List[str]] = None
    professional_certifications: Optional[List[str]] = None
    languages: Optional[List[str]] = None
    looking_for_work_in_areas: Optional[List[str]] = None
    pictures: Optional[List[str]] = None

    @field_validator(
        "experience", "education", "skills", "certifications", "experience_and_skill",
        "professional_certifications", "languages", "looking_for_work_in_areas", "pictures",
        mode="before",
    )
    @classmethod
    def lists_not_null(cls, v):
        return _null_as_empty(v)

    @field_validator("pictures")
    @classmethod
    def pictures_limit(cls, v):
        return _check_pictures(v)

    @field_validator("languages")
    @classmethod
    def languages_allowed(cls, v):
        return _check_vocab(v, vocab.LANGUAGES, "languages")

    @field_validator("experience_and_skill")
    @classmethod
    def sports_allowed(cls, v):
        return _check_vocab(v, vocab.SPORTS, "sports")

    @field_validator("professional_certifications")
    @classmethod
    def certifications_allowed(cls, v):
        return _check_vocab(v, vocab.ALL_QUALIFICATIONS, "certifications")

    @field_validator("looking_for_work_in_areas")
    @classmethod
    def areas_allowed(cls, v):
        return _check_vocab(v, vocab.OCCUPATIONAL_AREAS, "work areas")


class CVIn(CVUpdate):
    full_name: str
    email: str


class CVOut(CamelModel):
    id: int
    full_name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    summary: Optional[str] = None
    experience: List[ExperienceItem] = []
    education: List[EducationItem] = []
    skills: List[str] = []
    certifications: List[str] = []
    experience_and_skill: List[str] = []
    professional_certifications: List[str] = []
    languages: List[str] = []
    looking_for_work_in_areas: List[str] = []
    pictures: List[str] = []
    published: bool = True
    job_seeker_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CandidateFilterOptions(CamelModel):
    languages: List[str] = []
    work_areas: List[str] = []
    sports: List[str] = []
    certifications: List[str] = []


# --- applications ---

class ApplicationCreate(CamelModel):
    job_id: Optional[int] = None
    candidate_id: Optional[int] = None


class ApplicationUpdate(CamelModel):
    status: Optional[Status] = None
    recruiter_notes: Optional[str] = None


class ArchiveIn(CamelModel):
    archived_by_job_seeker: Optional[bool] = None
    archived_by_recruiter: Optional[bool] = None


class JobSummary(CamelModel):
    id: int
    title: str
    company: str
    location: str
    country: Optional[str] = None
    type: Optional[JobType] = None


class PersonSummary(CamelModel):
    id: int
    name: str
    email: str


class ApplicationSeekerOut(CamelModel):
    """Application as seen by the candidate: never carries recruiter notes."""

    id: int
    status: Status
    applied_at: datetime
    last_activity_at: datetime
    withdrawn_at: Optional[datetime] = None
    viewed_at: Optional[datetime] = None
    archived_by_job_seeker: bool = False
    job: Optional[JobSummary] = None
    recruiter: Optional[PersonSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ApplicationOut(ApplicationSeekerOut):
    job_id: Optional[int] = None
    recruiter_id: int
    candidate_id: int
    candidate: Optional[PersonSummary] = None
    recruiter_notes: Optional[str] = ""
    internal_notes: Optional[str] = None
    archived_by_recruiter: bool = False


# --- saved searches ---

class SavedSearchUpdate(CamelModel):
    name: Optional[str] = None
    keyword: Optional[str] = None
    location: Optional[str] = None
    country: Optional[str] = None
    category: Optional[str] = None
    sport: Optional[str] = None
    language: Optional[str] = None
    frequency: Optional[Literal["daily", "weekly", "never"]] = None
    active: Optional[bool] = None

    @field_validator("country")
    @classmethod
    def normalize_country(cls, v):
        return _normalize_country(v)


class SavedSearchIn(SavedSearchUpdate):
    frequency: Literal["daily", "weekly"] = "daily"


class SavedSearchOut(CamelModel):
    id: int
    user_id: int
    name: Optional[str] = None
    keyword: Optional[str] = None
    location: Optional[str] = None
    country: Optional[str] = None
    category: Optional[str] = None
    sport: Optional[str] = None
    language: Optional[str] = None
    frequency: str
    active: bool
    last_sent: Optional[datetime] = None
    created_at: Optional[datetime] = None


# --- admin / audit / misc ---

class AdminUserUpdate(CamelModel):
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[Role] = None
    password: Optional[str] = None


class AuditLogOut(CamelModel):
    id: int
    action: str
    entity_type: str
    entity_id: Optional[int] = None
    user_id: int
    user_email: str
    user_name: str
    changes: Optional[Dict[str, Any]] = None
    reason: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    created_at: datetime

    @classmethod
    def from_row(cls, row) -> "AuditLogOut":
        # the ORM attribute is `extra`; `metadata` is taken by the declarative base
        return cls(
            id=row.id,
            action=row.action,
            entity_type=row.entity_type,
            entity_id=row.entity_id,
            user_id=row.user_id,
            user_email=row.user_email,
            user_name=row.user_name,
            changes=row.changes,
            reason=row.reason,
            ip_address=row.ip_address,
            user_agent=row.user_agent,
            metadata=row.extra,
            created_at=row.created_at,
        )


class ConsentIn(CamelModel):
    necessary: bool = True
    analytics: bool = False
    marketing: bool = False
    functional: bool = False
    timestamp: Optional[datetime] = None
    version: str = "1.0"


class GeocodeIn(CamelModel):
    address: Optional[Address] = None


class GeocodeResult(CamelModel):
    display_name: str
    latitude: float
    longitude: float
    address: Address


def dump(schema, obj) -> Dict[str, Any]:
    """Serialize an ORM row through `schema` into the camelCase JSON shape."""
    return schema.model_validate(obj).model_dump(by_alias=True, mode="json")
