"""Job and candidate listing views: fetch once, then filter, sort and page locally."""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Set

import httpx

from .. import listing
from .api import ApiError, JobBoardApi, describe

logger = logging.getLogger(__name__)


class _Browser:
    def __init__(self, api: JobBoardApi, filters: listing.Filters, page_size: int = listing.PAGE_SIZE):
        self.api = api
        self.filters = filters
        self.items: List[Dict[str, Any]] = []
        self.paginator = listing.Paginator(size=page_size)
        self.loading = False
        self.error: Optional[str] = None

    def _arrange(self, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return items

    def _refresh(self) -> None:
        self.paginator.reset(self._arrange(listing.filter_items(self.items, self.filters)))

    def set_filter(self, **changes: Optional[str]) -> None:
        """Change one or more filters; the view goes back to page 1."""
        self.filters = replace(self.filters, **changes)
        self._refresh()

    def clear_filters(self) -> None:
        self.filters = type(self.filters)()
        self._refresh()

    @property
    def results(self) -> List[Dict[str, Any]]:
        return self.paginator.items

    @property
    def visible(self):
        return self.paginator.visible

    @property
    def page(self) -> int:
        return self.paginator.page

    @property
    def pages(self) -> int:
        return self.paginator.pages

    def go(self, page: int) -> int:
        return self.paginator.go(page)

    def next(self) -> int:
        return self.paginator.next()

    def previous(self) -> int:
        return self.paginator.previous()

    def selector(self):
        return self.paginator.selector()


class JobBrowser(_Browser):
    def __init__(self, api: JobBoardApi, featured: bool = False, page_size: int = listing.PAGE_SIZE):
        super().__init__(api, listing.JobFilters(), page_size)
        self.featured = featured
        self.options: Dict[str, List[str]] = {}

    def _arrange(self, items):
        return listing.sort_jobs(items)

    async def load(self) -> None:
        self.loading = True
        self.error = None
        try:
            self.items = listing.sort_jobs(await self.api.jobs.listing(featured=self.featured))
        except (ApiError, httpx.HTTPError) as exc:
            self.error = describe(exc)
            self.items = []
        finally:
            self.loading = False
        self.options = listing.job_filter_options(self.items)
        self._refresh()


class CandidateBrowser(_Browser):
    def __init__(self, api: JobBoardApi, page_size: int = listing.PAGE_SIZE):
        super().__init__(api, listing.CandidateFilters(), page_size)
        self.options: Dict[str, List[str]] = {}
        self.contacted: Set[int] = set()

    async def load(self) -> None:
        self.loading = True
        self.error = None
        try:
            data = await self.api.cv.candidates()
            self.items = data.get("cvs", [])
            self.options = data.get("filters") or listing.candidate_filter_options(self.items)
        except (ApiError, httpx.HTTPError) as exc:
            self.error = describe(exc)
            self.items = []
        finally:
            self.loading = False
        self._refresh()
        await self.load_contacted()

    async def load_contacted(self) -> None:
        """Candidate ids this recruiter has already contacted; best effort."""
        try:
            applications = await self.api.applications.for_recruiter()
        except (ApiError, httpx.HTTPError) as exc:
            logger.warning("Could not load contacted candidates: %s", exc)
            return
        self.contacted = {a["candidateId"] for a in applications if a.get("candidateId") is not None}

    def is_contacted(self, cv: Dict[str, Any]) -> bool:
        return cv.get("jobSeekerId") in self.contacted
