from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, JSON, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from .db import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TimestampMixin:
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class User(TimestampMixin, Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(256), unique=True, index=True, nullable=False)
    password_hash = Column(String(128), nullable=False)
    name = Column(String(256), nullable=False)
    role = Column(String(32), index=True, nullable=False)
    last_online = Column(DateTime)
    favourite_jobs = Column(JSON, default=list)
    favourite_candidates = Column(JSON, default=list)

    company = relationship("Company", back_populates="owner", uselist=False, cascade="all, delete-orphan")
    cv = relationship("CV", back_populates="job_seeker", uselist=False, cascade="all, delete-orphan")
    jobs = relationship("Job", back_populates="recruiter", cascade="all, delete-orphan")
    saved_searches = relationship("SavedSearch", back_populates="user", cascade="all, delete-orphan")


class Company(TimestampMixin, Base):
    __tablename__ = "companies"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(256), index=True, nullable=False)
    description = Column(Text)
    address = Column(JSON, default=dict)
    latitude = Column(Float)
    longitude = Column(Float)
    website = Column(String(512))
    contact = Column(JSON, default=dict)
    social_media = Column(JSON, default=dict)
    offered_activities = Column(JSON, default=list)
    offered_services = Column(JSON, default=list)
    logo = Column(String(512))
    pictures = Column(JSON, default=list)
    featured = Column(Boolean, default=False, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)

    owner = relationship("User", back_populates="company")

    @property
    def coordinates(self):
        if self.latitude is None or self.longitude is None:
            return None
        return {"latitude": self.latitude, "longitude": self.longitude}


class Job(TimestampMixin, Base):
    __tablename__ = "jobs"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(256), index=True, nullable=False)
    description = Column(Text, nullable=False)
    company = Column(String(256), nullable=False)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"), index=True)
    location = Column(String(256), nullable=False)
    country = Column(String(2), index=True)
    salary = Column(String(128))
    type = Column(String(32), nullable=False)
    languages = Column(JSON, default=list)
    qualifications = Column(JSON, default=list)
    sports = Column(JSON, default=list)
    occupational_areas = Column(JSON, default=list)
    pictures = Column(JSON, default=list)
    spam = Column(String(3), default="no")
    published = Column(Boolean, default=True, index=True)
    featured = Column(Boolean, default=False, index=True)
    apply_by_email = Column(Boolean, default=False)
    apply_by_website = Column(Boolean, default=False)
    apply_by_whatsapp = Column(Boolean, default=False)
    application_email = Column(String(256))
    application_website = Column(String(512))
    application_whatsapp = Column(String(64))
    visit_count = Column(Integer, default=0)
    recruiter_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)

    recruiter = relationship("User", back_populates="jobs")


class CV(TimestampMixin, Base):
    __tablename__ = "cvs"
    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(256), index=True, nullable=False)
    email = Column(String(256), nullable=False)
    phone = Column(String(64))
    address = Column(String(512))
    summary = Column(Text)
    experience = Column(JSON, default=list)
    education = Column(JSON, default=list)
    skills = Column(JSON, default=list)
    certifications = Column(JSON, default=list)
    experience_and_skill = Column(JSON, default=list)
    professional_certifications = Column(JSON, default=list)
    languages = Column(JSON, default=list)
    looking_for_work_in_areas = Column(JSON, default=list)
    pictures = Column(JSON, default=list)
    published = Column(Boolean, default=True, index=True)
    job_seeker_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)

    job_seeker = relationship("User", back_populates="cv")


class Application(TimestampMixin, Base):
    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("job_id", "candidate_id", name="uq_application_job_candidate"),
        UniqueConstraint("recruiter_id", "candidate_id", name="uq_application_recruiter_candidate"),
    )
    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="SET NULL"), index=True)
    recruiter_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    candidate_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    status = Column(String(32), default="new", index=True, nullable=False)
    applied_at = Column(DateTime, default=utcnow, nullable=False)
    last_activity_at = Column(DateTime, default=utcnow, nullable=False)
    withdrawn_at = Column(DateTime)
    viewed_at = Column(DateTime)
    recruiter_notes = Column(Text, default="")
    internal_notes = Column(Text)
    archived_by_job_seeker = Column(Boolean, default=False)
    archived_by_recruiter = Column(Boolean, default=False)

    job = relationship("Job")
    recruiter = relationship("User", foreign_keys=[recruiter_id])
    candidate = relationship("User", foreign_keys=[candidate_id])


class SavedSearch(TimestampMixin, Base):
    __tablename__ = "saved_searches"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    name = Column(String(256))
    keyword = Column(String(256))
    location = Column(String(256))
    country = Column(String(2))
    category = Column(String(128))
    sport = Column(String(128))
    language = Column(String(64))
    frequency = Column(String(16), default="daily", nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    last_sent = Column(DateTime)

    user = relationship("User", back_populates="saved_searches")


class AuditLog(Base):
    __tablename__ = "audit_logs"
    id = Column(Integer, primary_key=True, index=True)
    action = Column(String(16), index=True, nullable=False)
    entity_type = Column(String(16), index=True, nullable=False)
    entity_id = Column(Integer, index=True)
    user_id = Column(Integer, index=True, nullable=False)
    user_email = Column(String(256), nullable=False)
    user_name = Column(String(256), nullable=False)
    changes = Column(JSON)
    reason = Column(Text)
    ip_address = Column(String(64))
    user_agent = Column(String(512))
    extra = Column("metadata", JSON)
    created_at = Column(DateTime, default=utcnow, index=True)


class CookieConsent(Base):
    __tablename__ = "cookie_consents"
    id = Column(Integer, primary_key=True)
    necessary = Column(Boolean, default=True, nullable=False)
    analytics = Column(Boolean, default=False, nullable=False)
    marketing = Column(Boolean, default=False, nullable=False)
    functional = Column(Boolean, default=False, nullable=False)
    timestamp = Column(DateTime, nullable=False)
    version = Column(String(16), nullable=False)
    ip_address = Column(String(64))
    user_agent = Column(String(512))
    created_at = Column(DateTime, default=utcnow)
