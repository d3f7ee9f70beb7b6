"""Editable state behind the company, job and CV forms.

Each form is created from the entity as served by the API (or empty for a
new one), is mutated field by field, and on `save()` uploads its pending
pictures before creating or updating the entity.
"""

import logging
from typing import Any, Dict, List, Optional

from .. import vocab
from .api import JobBoardApi
from .location_search import location_from_result
from .multiselect import MultiSelect
from .pictures import LOGO, PictureField

logger = logging.getLogger(__name__)


class FormInvalid(ValueError):
    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class CoordinatesRequired(Exception):
    """Saving is blocked until a location has been picked on the map."""


def _has_coordinates(entity: Optional[Dict[str, Any]]) -> bool:
    coords = (entity or {}).get("coordinates") or {}
    return coords.get("latitude") is not None and coords.get("longitude") is not None


class _Form:
    def _picture_fields(self) -> List[PictureField]:
        return [self.pictures]

    def discard(self) -> None:
        """Tear the form down: drop pending files and release their previews."""
        for field in self._picture_fields():
            field.pending.clear()
            field.release_all()


class CompanyForm(_Form):
    def __init__(self, company: Optional[Dict[str, Any]] = None):
        company = company or {}
        self.id = company.get("id")
        self.name = company.get("name", "")
        self.description = company.get("description") or ""
        self.address: Dict[str, Any] = dict(company.get("address") or {})
        self.coordinates: Optional[Dict[str, float]] = company.get("coordinates")
        self.website = company.get("website") or ""
        self.contact: Dict[str, Any] = dict(company.get("contact") or {})
        self.social_media: Dict[str, Any] = dict(company.get("socialMedia") or {})
        self.activities = MultiSelect(vocab.OFFERED_ACTIVITIES, company.get("offeredActivities") or [])
        self.services = MultiSelect(vocab.OFFERED_SERVICES, company.get("offeredServices") or [])
        self.pictures = PictureField(company.get("pictures") or [])
        self.logo = PictureField([company["logo"]] if company.get("logo") else [], cap=1)

    def _picture_fields(self) -> List[PictureField]:
        return [self.pictures, self.logo]

    def apply_location(self, result: Dict[str, Any]) -> None:
        location = location_from_result(result)
        self.address = location["address"]
        self.coordinates = location["coordinates"]

    def validate(self) -> List[str]:
        errors = []
        if not self.name.strip():
            errors.append("Company name is required")
        return errors

    def payload(self) -> Dict[str, Any]:
        return {
            "name": self.name.strip(),
            "description": self.description,
            "address": self.address,
            "coordinates": self.coordinates,
            "website": self.website,
            "contact": self.contact,
            "socialMedia": self.social_media,
            "offeredActivities": list(self.activities),
            "offeredServices": list(self.services),
        }

    async def save(self, api: JobBoardApi) -> Dict[str, Any]:
        errors = self.validate()
        if errors:
            raise FormInvalid(errors)
        if not _has_coordinates({"coordinates": self.coordinates}):
            raise CoordinatesRequired("Please set your company location on the map before saving")

        data = self.payload()
        data["pictures"] = await self.pictures.submit(api.upload, "company")
        logos = await self.logo.submit(api.upload, LOGO)
        data["logo"] = logos[0] if logos else None

        if self.id is None:
            company = await api.company.create(data)
        else:
            company = await api.company.update(data)
        self.id = company["id"]
        logger.info("Saved company %s", self.id)
        return company


class JobForm(_Form):
    def __init__(self, job: Optional[Dict[str, Any]] = None, company: Optional[Dict[str, Any]] = None):
        job = job or {}
        self.company = company
        self.id = job.get("id")
        self.title = job.get("title", "")
        self.description = job.get("description", "")
        self.location = job.get("location", "")
        self.country = job.get("country") or ""
        self.salary = job.get("salary") or ""
        self.type = job.get("type", "full-time")
        self.published = job.get("published", True)
        self.languages = MultiSelect(vocab.LANGUAGES, job.get("languages") or [], limit=vocab.MAX_JOB_LANGUAGES)
        self.sports = MultiSelect(vocab.SPORTS, job.get("sports") or [])
        self.qualifications = MultiSelect(vocab.ALL_QUALIFICATIONS, job.get("qualifications") or [])
        self.occupational_areas = MultiSelect(vocab.OCCUPATIONAL_AREAS, job.get("occupationalAreas") or [])
        self.pictures = PictureField(job.get("pictures") or [])
        self.apply_by = {
            channel: {
                "enabled": bool(job.get(f"applyBy{channel}")),
                "value": job.get(f"application{channel}") or "",
            }
            for channel in ("Email", "Website", "Whatsapp")
        }

    def validate(self) -> List[str]:
        errors = []
        for label, value in (("Title", self.title), ("Description", self.description), ("Location", self.location)):
            if not value.strip():
                errors.append(f"{label} is required")
        if self.type not in vocab.JOB_TYPES:
            errors.append(f"Invalid job type: {self.type}")
        for channel, state in self.apply_by.items():
            if state["enabled"] and not state["value"].strip():
                errors.append(f"Application {channel.lower()} is required when applying by {channel.lower()}")
        return errors

    def payload(self) -> Dict[str, Any]:
        data = {
            "title": self.title.strip(),
            "description": self.description,
            "location": self.location.strip(),
            "country": self.country or None,
            "salary": self.salary or None,
            "type": self.type,
            "published": self.published,
            "languages": list(self.languages),
            "sports": list(self.sports),
            "qualifications": list(self.qualifications),
            "occupationalAreas": list(self.occupational_areas),
        }
        for channel, state in self.apply_by.items():
            data[f"applyBy{channel}"] = state["enabled"]
            data[f"application{channel}"] = state["value"] or None
        return data

    async def save(self, api: JobBoardApi) -> Dict[str, Any]:
        errors = self.validate()
        if errors:
            raise FormInvalid(errors)
        if self.id is None and not _has_coordinates(self.company):
            raise CoordinatesRequired("Set your company location on the map before posting jobs")

        data = self.payload()
        data["pictures"] = await self.pictures.submit(api.upload, "jobs")
        if self.id is None:
            job = await api.jobs.create(data)
        else:
            job = await api.jobs.update(self.id, data)
        self.id = job["id"]
        return job


class CVForm(_Form):
    def __init__(self, cv: Optional[Dict[str, Any]] = None):
        cv = cv or {}
        self.id = cv.get("id")
        self.full_name = cv.get("fullName", "")
        self.email = cv.get("email", "")
        self.phone = cv.get("phone") or ""
        self.address = cv.get("address") or ""
        self.summary = cv.get("summary") or ""
        self.experience: List[Dict[str, Any]] = [dict(e) for e in cv.get("experience") or []]
        self.education: List[Dict[str, Any]] = [dict(e) for e in cv.get("education") or []]
        self.skills: List[str] = list(cv.get("skills") or [])
        self.certifications: List[str] = list(cv.get("certifications") or [])
        self.languages = MultiSelect(vocab.LANGUAGES, cv.get("languages") or [])
        self.experience_and_skill = MultiSelect(vocab.SPORTS, cv.get("experienceAndSkill") or [])
        self.professional_certifications = MultiSelect(vocab.ALL_QUALIFICATIONS, cv.get("professionalCertifications") or [])
        self.work_areas = MultiSelect(vocab.OCCUPATIONAL_AREAS, cv.get("lookingForWorkInAreas") or [])
        self.pictures = PictureField(cv.get("pictures") or [])

    def add_experience(self, **item) -> None:
        self.experience.append(item)

    def add_education(self, **item) -> None:
        self.education.append(item)

    def validate(self) -> List[str]:
        errors = []
        if not self.full_name.strip():
            errors.append("Full name is required")
        if not self.email.strip():
            errors.append("Email is required")
        return errors

    def payload(self) -> Dict[str, Any]:
        return {
            "fullName": self.full_name.strip(),
            "email": self.email.strip(),
            "phone": self.phone or None,
            "address": self.address or None,
            "summary": self.summary or None,
            "experience": self.experience,
            "education": self.education,
            "skills": self.skills,
            "certifications": self.certifications,
            "languages": list(self.languages),
            "experienceAndSkill": list(self.experience_and_skill),
            "professionalCertifications": list(self.professional_certifications),
            "lookingForWorkInAreas": list(self.work_areas),
        }

    async def save(self, api: JobBoardApi) -> Dict[str, Any]:
        errors = self.validate()
        if errors:
            raise FormInvalid(errors)
        data = self.payload()
        data["pictures"] = await self.pictures.submit(api.upload, "cv")
        if self.id is None:
            cv = await api.cv.create(data)
        else:
            cv = await api.cv.update(data)
        self.id = cv["id"]
        return cv
