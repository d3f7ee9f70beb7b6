import logging
from typing import Any, Callable, Dict, List, Optional

import httpx

from .api import ApiError, JobBoardApi, describe

logger = logging.getLogger(__name__)

TABS = ("users", "companies", "jobs", "audit-logs")
EDITABLE = ("users", "companies", "jobs")

Confirm = Callable[[str], bool]


class AdminDashboard:
    """Tabbed admin view. Destructive actions go through the `confirm` gate."""

    def __init__(self, api: JobBoardApi, confirm: Confirm, audit_page_size: int = 50):
        self.api = api
        self.confirm = confirm
        self.tab = "users"
        self.data: Dict[str, List[Dict[str, Any]]] = {tab: [] for tab in TABS}
        self.statistics: Dict[str, int] = {}
        self.audit_filters: Dict[str, Optional[str]] = {"action": None, "entityType": None}
        self.audit_page_size = audit_page_size
        self.audit_offset = 0
        self.audit_total = 0
        self.error: Optional[str] = None

    def _check_tab(self, tab: str, allowed=TABS) -> None:
        if tab not in allowed:
            raise ValueError(f"Unknown or read-only tab: {tab}")

    def dismiss_error(self) -> None:
        self.error = None

    async def load(self, tab: Optional[str] = None) -> List[Dict[str, Any]]:
        tab = tab or self.tab
        self._check_tab(tab)
        self.tab = tab
        try:
            if tab == "audit-logs":
                data = await self.api.admin.list(
                    "audit-logs", limit=self.audit_page_size, offset=self.audit_offset, **self.audit_filters
                )
                self.audit_total = data["total"]
                items = data["auditLogs"]
            else:
                data = await self.api.admin.list(tab)
                items = data[tab]
        except (ApiError, httpx.HTTPError) as exc:
            self.error = describe(exc)
            return self.data[tab]
        self.data[tab] = items
        return items

    async def load_statistics(self) -> Dict[str, int]:
        try:
            self.statistics = await self.api.admin.statistics()
        except (ApiError, httpx.HTTPError) as exc:
            self.error = describe(exc)
        return self.statistics

    async def filter_audit_logs(self, action: Optional[str] = None, entity_type: Optional[str] = None) -> None:
        self.audit_filters = {"action": action, "entityType": entity_type}
        self.audit_offset = 0
        await self.load("audit-logs")

    async def audit_page(self, page: int) -> None:
        self.audit_offset = max(page - 1, 0) * self.audit_page_size
        await self.load("audit-logs")

    async def edit(self, tab: str, entity_id: int, changes: Dict[str, Any]) -> bool:
        self._check_tab(tab, EDITABLE)
        try:
            await self.api.admin.update(tab, entity_id, changes)
        except (ApiError, httpx.HTTPError) as exc:
            self.error = describe(exc)
            return False
        await self.load(tab)
        return True

    async def delete(self, tab: str, entity_id: int) -> bool:
        self._check_tab(tab, EDITABLE)
        noun = tab.rstrip("s").replace("companie", "company")
        message = f"Are you sure you want to delete this {noun}? This cannot be undone."
        if not self.confirm(message):
            return False
        try:
            await self.api.admin.delete(tab, entity_id)
        except (ApiError, httpx.HTTPError) as exc:
            self.error = describe(exc)
            return False
        logger.info("Deleted %s %s", noun, entity_id)
        self.data[tab] = [item for item in self.data[tab] if item.get("id") != entity_id]
        return True
