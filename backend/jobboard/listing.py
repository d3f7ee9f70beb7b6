"""Filtering, ordering and pagination of job and CV listings.

Listings are handled as the JSON-shaped dicts served by the API (camelCase
keys), so the same code runs over a list fetched by the client and over
serialized rows on the server.
"""

import math
from dataclasses import dataclass, fields
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, TypeVar, Union

PAGE_SIZE = 20

_EPOCH = datetime(1970, 1, 1)

T = TypeVar("T")


def _contains(value: Any, needle: str) -> bool:
    return isinstance(value, str) and needle.lower() in value.lower()


def _has(item: Mapping[str, Any], field: str, value: str) -> bool:
    values = item.get(field) or []
    return value in values


class _Filters:
    def active(self) -> bool:
        return any(getattr(self, f.name) for f in fields(self))

    def matches(self, item: Mapping[str, Any]) -> bool:
        raise NotImplementedError


@dataclass
class JobFilters(_Filters):
    keyword: Optional[str] = None
    location: Optional[str] = None
    country: Optional[str] = None
    category: Optional[str] = None
    sport: Optional[str] = None
    language: Optional[str] = None

    def matches(self, job: Mapping[str, Any]) -> bool:
        return self.match_reasons(job) is not None

    def match_reasons(self, job: Mapping[str, Any]) -> Optional[List[str]]:
        """Reasons the job matches every active filter, or None if one fails."""
        reasons: List[str] = []
        if self.keyword:
            title = _contains(job.get("title"), self.keyword)
            description = _contains(job.get("description"), self.keyword)
            company = _contains(job.get("company"), self.keyword)
            if not (title or description or company):
                return None
            if title:
                reasons.append(f'Title contains "{self.keyword}"')
            if company:
                reasons.append(f'Company contains "{self.keyword}"')
        if self.location:
            if not _contains(job.get("location"), self.location):
                return None
            reasons.append(f"Location: {job.get('location')}")
        if self.country:
            country = job.get("country")
            if not country or country.upper() != self.country.upper():
                return None
            reasons.append(f"Country: {country}")
        if self.category:
            if not _has(job, "occupationalAreas", self.category):
                return None
            reasons.append(f"Category: {self.category}")
        if self.sport:
            if not _has(job, "sports", self.sport):
                return None
            reasons.append(f"Sport: {self.sport}")
        if self.language:
            if not _has(job, "languages", self.language):
                return None
            reasons.append(f"Language: {self.language}")
        return reasons


@dataclass
class CandidateFilters(_Filters):
    language: Optional[str] = None
    work_area: Optional[str] = None
    sport: Optional[str] = None
    certification: Optional[str] = None

    def matches(self, cv: Mapping[str, Any]) -> bool:
        if self.language and not _has(cv, "languages", self.language):
            return False
        if self.work_area and not _has(cv, "lookingForWorkInAreas", self.work_area):
            return False
        if self.sport and not _has(cv, "experienceAndSkill", self.sport):
            return False
        if self.certification and not _has(cv, "professionalCertifications", self.certification):
            return False
        return True


Filters = Union[JobFilters, CandidateFilters]


def filter_items(items: Iterable[Mapping[str, Any]], filters: Filters) -> List[Mapping[str, Any]]:
    return [item for item in items if filters.matches(item)]


def _created_at(item: Mapping[str, Any]) -> datetime:
    value = item.get("createdAt")
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return _EPOCH
    if not isinstance(value, datetime):
        return _EPOCH
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def sort_jobs(jobs: Iterable[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
    """Featured jobs first, then newest first within each group."""
    by_date = sorted(jobs, key=_created_at, reverse=True)
    return sorted(by_date, key=lambda job: not job.get("featured"))


def _unique(items: Iterable[Mapping[str, Any]], field: str) -> List[str]:
    values = set()
    for item in items:
        raw = item.get(field)
        if isinstance(raw, str):
            raw = [raw]
        values.update(v for v in raw or [] if v)
    return sorted(values)


def job_filter_options(jobs: Sequence[Mapping[str, Any]]) -> Dict[str, List[str]]:
    return {
        "countries": sorted({j["country"].upper() for j in jobs if j.get("country")}),
        "categories": _unique(jobs, "occupationalAreas"),
        "sports": _unique(jobs, "sports"),
        "languages": _unique(jobs, "languages"),
    }


def candidate_filter_options(cvs: Sequence[Mapping[str, Any]]) -> Dict[str, List[str]]:
    return {
        "languages": _unique(cvs, "languages"),
        "workAreas": _unique(cvs, "lookingForWorkInAreas"),
        "sports": _unique(cvs, "experienceAndSkill"),
        "certifications": _unique(cvs, "professionalCertifications"),
    }


# --- pagination ---

def total_pages(count: int, size: int = PAGE_SIZE) -> int:
    return math.ceil(count / size) if count > 0 else 0


def clamp_page(page: int, pages: int) -> int:
    return min(max(page, 1), max(pages, 1))


def page_slice(items: Sequence[T], page: int, size: int = PAGE_SIZE) -> Sequence[T]:
    start = (page - 1) * size
    return items[start:start + size]


def page_selector(current: int, pages: int) -> List[Optional[int]]:
    """Page buttons to render; None stands for an ellipsis.

    First, last, current and its direct neighbours are shown. The pages two
    away from current become an ellipsis unless already shown.
    """
    if pages <= 1:
        return []
    out: List[Optional[int]] = []
    for page in range(1, pages + 1):
        if page == 1 or page == pages or current - 1 <= page <= current + 1:
            out.append(page)
        elif page == current - 2 or page == current + 2:
            out.append(None)
    return out


class Paginator:
    """Current-page state over an already fetched list."""

    def __init__(self, items: Sequence[T] = (), size: int = PAGE_SIZE):
        self.size = size
        self.items = list(items)
        self.page = 1

    @property
    def pages(self) -> int:
        return total_pages(len(self.items), self.size)

    @property
    def visible(self) -> Sequence[T]:
        return page_slice(self.items, self.page, self.size)

    def reset(self, items: Sequence[T]) -> None:
        self.items = list(items)
        self.page = 1

    def go(self, page: int) -> int:
        self.page = clamp_page(page, self.pages)
        return self.page

    def next(self) -> int:
        return self.go(self.page + 1)

    def previous(self) -> int:
        return self.go(self.page - 1)

    def selector(self) -> List[Optional[int]]:
        return page_selector(self.page, self.pages)
