"""Session-wide client state: the API client, the signed-in user and cookie consent."""

import json
import logging
import pathlib
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from .api import ApiClient, ApiError, JobBoardApi, NotAuthenticated

logger = logging.getLogger(__name__)

CONSENT_VERSION = "1.0"
CONSENT_CATEGORIES = ("necessary", "analytics", "marketing", "functional")

_current: Optional["AppContext"] = None


class AppContext:
    def __init__(self, api: JobBoardApi, consent_path: pathlib.Path):
        self.api = api
        self.consent_path = pathlib.Path(consent_path)
        self.user: Optional[Dict[str, Any]] = None
        self.loading = True
        self.consent: Optional[Dict[str, Any]] = None
        self.banner_visible = False

    @classmethod
    def start(cls, base_url: str = "http://localhost:8000", consent_path="cookie-consent.json",
              transport: Optional[httpx.AsyncBaseTransport] = None) -> "AppContext":
        global _current
        _current = cls(JobBoardApi(ApiClient(base_url, transport=transport)), consent_path)
        _current.load_consent()
        return _current

    @classmethod
    def current(cls) -> "AppContext":
        if _current is None:
            raise RuntimeError("AppContext.start() has not been called")
        return _current

    async def close(self) -> None:
        global _current
        await self.api.aclose()
        if _current is self:
            _current = None

    # --- auth ---

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def role(self) -> Optional[str]:
        return self.user["role"] if self.user else None

    async def init(self) -> Optional[Dict[str, Any]]:
        await self.refresh_user()
        self.loading = False
        return self.user

    async def refresh_user(self) -> Optional[Dict[str, Any]]:
        try:
            self.user = await self.api.auth.me()
        except NotAuthenticated:
            self.user = None
        except (ApiError, httpx.HTTPError) as exc:
            logger.warning("Could not load the current user: %s", exc)
            self.user = None
        return self.user

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        self.user = await self.api.auth.login(email, password)
        return self.user

    async def register(self, email: str, password: str, name: str, role: str) -> Dict[str, Any]:
        self.user = await self.api.auth.register(email, password, name, role)
        return self.user

    async def logout(self) -> None:
        try:
            await self.api.auth.logout()
        finally:
            self.user = None
            self.api.client.http.cookies.clear()

    # --- cookie consent ---

    def load_consent(self) -> Optional[Dict[str, Any]]:
        try:
            data = json.loads(self.consent_path.read_text())
        except FileNotFoundError:
            data = None
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable consent file %s: %s", self.consent_path, exc)
            data = None
        if not isinstance(data, dict) or data.get("version") != CONSENT_VERSION:
            self.consent = None
            self.banner_visible = True
        else:
            self.consent = data
            self.banner_visible = False
        return self.consent

    async def set_consent(self, analytics: bool = False, marketing: bool = False, functional: bool = False) -> Dict[str, Any]:
        consent = {
            "necessary": True,
            "analytics": analytics,
            "marketing": marketing,
            "functional": functional,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": CONSENT_VERSION,
        }
        self.consent_path.parent.mkdir(parents=True, exist_ok=True)
        self.consent_path.write_text(json.dumps(consent))
        self.consent = consent
        self.banner_visible = False
        try:
            await self.api.client.post("/api/cookie-consent/log", consent)
        except (ApiError, httpx.HTTPError) as exc:
            logger.warning("Failed to log cookie consent: %s", exc)
        return consent

    async def accept_all(self) -> Dict[str, Any]:
        return await self.set_consent(analytics=True, marketing=True, functional=True)

    async def reject_all(self) -> Dict[str, Any]:
        return await self.set_consent()

    def has_consented(self, category: str) -> bool:
        if category == "necessary":
            return True
        return bool(self.consent and self.consent.get(category))

    def show_banner(self) -> None:
        self.banner_visible = True

    def hide_banner(self) -> None:
        self.banner_visible = False
