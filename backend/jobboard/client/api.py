"""Typed wrappers over the job board REST API."""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

import httpx

logger = logging.getLogger(__name__)

Upload = Tuple[str, bytes, str]  # (filename, content, content type)


class ApiError(Exception):
    def __init__(self, status: int, message: str, body: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.body = body or {}


class NotAuthenticated(ApiError):
    pass


NETWORK_ERROR = "Could not reach the server. Please check your connection and try again."


def describe(exc: Exception) -> str:
    """User-facing message for a failed call."""
    if isinstance(exc, ApiError):
        return exc.message
    logger.warning("Request failed: %s", exc)
    return NETWORK_ERROR


def _error_message(response: httpx.Response) -> Tuple[str, Dict[str, Any]]:
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase or f"HTTP {response.status_code}", {}
    if not isinstance(body, dict):
        return response.reason_phrase or f"HTTP {response.status_code}", {}
    for key in ("error", "detail", "message"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value, body
        if isinstance(value, list) and value:
            # pydantic validation errors
            first = value[0]
            if isinstance(first, dict) and first.get("msg"):
                return first["msg"], body
    return response.reason_phrase or f"HTTP {response.status_code}", body


class ApiClient:
    """Thin async client; the session token lives in the cookie jar."""

    def __init__(self, base_url: str = "http://localhost:8000", transport: Optional[httpx.AsyncBaseTransport] = None,
                 timeout: float = 15.0):
        self.http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def aclose(self) -> None:
        await self.http.aclose()

    async def request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        response = await self.http.request(method, path, **kwargs)
        if response.is_success:
            return response.json() if response.content else {}
        message, body = _error_message(response)
        if response.status_code == 401:
            raise NotAuthenticated(401, message, body)
        raise ApiError(response.status_code, message, body)

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if params:
            params = {k: v for k, v in params.items() if v not in (None, "")}
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Dict[str, Any]:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Dict[str, Any]:
        return await self.request("PUT", path, json=json)

    async def patch(self, path: str, json: Any = None) -> Dict[str, Any]:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> Dict[str, Any]:
        return await self.request("DELETE", path)

    async def upload(self, path: str, field: str, files: Iterable[Upload]) -> Dict[str, Any]:
        parts = [(field, (name, data, content_type)) for name, data, content_type in files]
        return await self.request("POST", path, files=parts)


class AuthApi:
    def __init__(self, api: ApiClient):
        self.api = api

    async def register(self, email: str, password: str, name: str, role: str) -> Dict[str, Any]:
        data = await self.api.post("/api/auth/register", {"email": email, "password": password, "name": name, "role": role})
        return data["user"]

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        data = await self.api.post("/api/auth/login", {"email": email, "password": password})
        return data["user"]

    async def logout(self) -> None:
        await self.api.post("/api/auth/logout")

    async def me(self) -> Dict[str, Any]:
        return (await self.api.get("/api/auth/me"))["user"]


class AccountApi:
    def __init__(self, api: ApiClient):
        self.api = api

    async def get(self) -> Dict[str, Any]:
        return (await self.api.get("/api/account"))["user"]

    async def update(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        return (await self.api.put("/api/account", changes))["user"]

    async def change_password(self, current: str, new: str) -> None:
        await self.api.post("/api/account/change-password", {"currentPassword": current, "newPassword": new})

    async def delete(self) -> None:
        await self.api.delete("/api/account")


class JobsApi:
    def __init__(self, api: ApiClient):
        self.api = api

    async def listing(self, featured: bool = False, **filters) -> List[Dict[str, Any]]:
        params = dict(filters)
        if featured:
            params["featured"] = "true"
        return (await self.api.get("/api/jobs-list", params))["jobs"]

    async def mine(self) -> List[Dict[str, Any]]:
        return (await self.api.get("/api/jobs/my"))["jobs"]

    async def get(self, job_id: int) -> Dict[str, Any]:
        return (await self.api.get(f"/api/jobs/{job_id}"))["job"]

    async def create(self, job: Dict[str, Any]) -> Dict[str, Any]:
        return (await self.api.post("/api/jobs", job))["job"]

    async def update(self, job_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
        return (await self.api.put(f"/api/jobs/{job_id}", changes))["job"]

    async def delete(self, job_id: int) -> None:
        await self.api.delete(f"/api/jobs/{job_id}")

    async def report_spam(self, job_id: int) -> None:
        await self.api.post(f"/api/jobs/{job_id}/report-spam")

    async def favourites(self) -> List[Dict[str, Any]]:
        return (await self.api.get("/api/jobs/favourites"))["jobs"]

    async def is_favourite(self, job_id: int) -> bool:
        return (await self.api.get(f"/api/jobs/{job_id}/favourite"))["isFavourite"]

    async def toggle_favourite(self, job_id: int) -> bool:
        """Add or remove the job; returns whether it is now a favourite."""
        return (await self.api.post(f"/api/jobs/{job_id}/favourite"))["isFavourite"]


class CompanyApi:
    def __init__(self, api: ApiClient):
        self.api = api

    async def mine(self) -> Dict[str, Any]:
        return (await self.api.get("/api/company"))["company"]

    async def create(self, company: Dict[str, Any]) -> Dict[str, Any]:
        return (await self.api.post("/api/company", company))["company"]

    async def update(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        return (await self.api.put("/api/company", changes))["company"]

    async def get(self, company_id: int) -> Dict[str, Any]:
        return await self.api.get(f"/api/companies/{company_id}")

    async def listing(self, featured: bool = False) -> List[Dict[str, Any]]:
        params = {"featured": "true"} if featured else None
        return (await self.api.get("/api/companies-list", params))["companies"]


class CVApi:
    def __init__(self, api: ApiClient):
        self.api = api

    async def mine(self) -> Dict[str, Any]:
        return (await self.api.get("/api/cv"))["cv"]

    async def create(self, cv: Dict[str, Any]) -> Dict[str, Any]:
        return (await self.api.post("/api/cv", cv))["cv"]

    async def update(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        return (await self.api.put("/api/cv", changes))["cv"]

    async def delete(self) -> None:
        await self.api.delete("/api/cv")

    async def toggle_publish(self) -> bool:
        return (await self.api.post("/api/cv/toggle-publish"))["published"]

    async def candidates(self) -> Dict[str, Any]:
        """Published CVs plus the server-computed filter options."""
        return await self.api.get("/api/candidates-list")

    async def candidate(self, cv_id: int) -> Dict[str, Any]:
        return (await self.api.get(f"/api/candidates-list/{cv_id}"))["cv"]

    async def favourites(self) -> List[Dict[str, Any]]:
        return (await self.api.get("/api/candidates-list/favourites"))["cvs"]

    async def is_favourite(self, cv_id: int) -> bool:
        return (await self.api.get(f"/api/candidates-list/{cv_id}/favourite"))["isFavourite"]

    async def toggle_favourite(self, cv_id: int) -> bool:
        return (await self.api.post(f"/api/candidates-list/{cv_id}/favourite"))["isFavourite"]


class ApplicationsApi:
    def __init__(self, api: ApiClient):
        self.api = api

    async def apply(self, job_id: int) -> Dict[str, Any]:
        return (await self.api.post("/api/applications", {"jobId": job_id}))["application"]

    async def contact(self, candidate_id: int, job_id: Optional[int] = None) -> Dict[str, Any]:
        """Contact a candidate; a 400 carrying `jobs` means a job has to be picked first."""
        payload = {"candidateId": candidate_id, "jobId": job_id}
        return (await self.api.post("/api/applications", payload))["application"]

    async def status_for_job(self, job_id: int) -> Dict[str, Any]:
        return await self.api.get("/api/applications", {"jobId": job_id})

    async def for_recruiter(self) -> List[Dict[str, Any]]:
        return (await self.api.get("/api/applications"))["applications"]

    async def mine(self) -> List[Dict[str, Any]]:
        return (await self.api.get("/api/my-applications"))["applications"]

    async def get(self, application_id: int) -> Dict[str, Any]:
        return (await self.api.get(f"/api/applications/{application_id}"))["application"]

    async def update(self, application_id: int, status: Optional[str] = None, notes: Optional[str] = None) -> Dict[str, Any]:
        payload = {k: v for k, v in (("status", status), ("recruiterNotes", notes)) if v is not None}
        return (await self.api.patch(f"/api/applications/{application_id}", payload))["application"]

    async def withdraw(self, application_id: int) -> Dict[str, Any]:
        return (await self.api.post(f"/api/applications/{application_id}/withdraw"))["application"]

    async def archive(self, application_id: int, role: str, archived: bool = True) -> Dict[str, Any]:
        key = "archivedByJobSeeker" if role == "job-seeker" else "archivedByRecruiter"
        return (await self.api.post(f"/api/applications/{application_id}/archive", {key: archived}))["application"]


class SavedSearchesApi:
    def __init__(self, api: ApiClient):
        self.api = api

    async def list(self) -> List[Dict[str, Any]]:
        return (await self.api.get("/api/saved-searches"))["savedSearches"]

    async def create(self, search: Dict[str, Any]) -> Dict[str, Any]:
        return (await self.api.post("/api/saved-searches", search))["savedSearch"]

    async def update(self, search_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
        return (await self.api.put(f"/api/saved-searches/{search_id}", changes))["savedSearch"]

    async def delete(self, search_id: int) -> None:
        await self.api.delete(f"/api/saved-searches/{search_id}")

    async def matches(self, search_id: int) -> List[Dict[str, Any]]:
        return (await self.api.get(f"/api/saved-searches/{search_id}/matches"))["matches"]


class AdminApi:
    def __init__(self, api: ApiClient):
        self.api = api

    async def list(self, resource: str, **params) -> Dict[str, Any]:
        return await self.api.get(f"/api/admin/{resource}", params or None)

    async def get(self, resource: str, entity_id: int) -> Dict[str, Any]:
        return await self.api.get(f"/api/admin/{resource}/{entity_id}")

    async def update(self, resource: str, entity_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
        return await self.api.put(f"/api/admin/{resource}/{entity_id}", changes)

    async def delete(self, resource: str, entity_id: int) -> None:
        await self.api.delete(f"/api/admin/{resource}/{entity_id}")

    async def statistics(self) -> Dict[str, int]:
        return (await self.api.get("/api/admin/statistics"))["statistics"]


class GeocodeApi:
    def __init__(self, api: ApiClient):
        self.api = api

    async def search(self, query: str) -> List[Dict[str, Any]]:
        return (await self.api.get("/api/geocode/search", {"q": query}))["results"]

    async def geocode(self, address: Dict[str, Any]) -> Dict[str, Any]:
        return await self.api.post("/api/geocode", {"address": address})


class UploadApi:
    PICTURE_ENDPOINTS = {
        "company": "/api/company/upload",
        "cv": "/api/cv/upload",
        "jobs": "/api/jobs/upload",
    }

    def __init__(self, api: ApiClient):
        self.api = api

    async def pictures(self, endpoint: str, files: Iterable[Upload]) -> List[str]:
        path = self.PICTURE_ENDPOINTS.get(endpoint, endpoint)
        return (await self.api.upload(path, "pictures", files))["paths"]

    async def logo(self, file: Upload) -> str:
        return (await self.api.upload("/api/company/upload-logo", "logo", [file]))["url"]


class JobBoardApi:
    """All resource wrappers over one shared ApiClient."""

    def __init__(self, client: ApiClient):
        self.client = client
        self.auth = AuthApi(client)
        self.account = AccountApi(client)
        self.jobs = JobsApi(client)
        self.company = CompanyApi(client)
        self.cv = CVApi(client)
        self.applications = ApplicationsApi(client)
        self.saved_searches = SavedSearchesApi(client)
        self.admin = AdminApi(client)
        self.geocode = GeocodeApi(client)
        self.upload = UploadApi(client)

    async def aclose(self) -> None:
        await self.client.aclose()
