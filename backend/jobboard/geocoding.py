"""Address lookups against the OpenStreetMap Nominatim API."""

import logging
from typing import Any, Dict, List, Optional

import httpx

from . import config

logger = logging.getLogger(__name__)


class GeocoderUnavailable(Exception):
    pass


def _headers() -> Dict[str, str]:
    # Nominatim's usage policy requires an identifying User-Agent
    return {"User-Agent": config.GEOCODER_USER_AGENT, "Accept-Language": "en"}


async def _query(params: Dict[str, Any]) -> List[Dict[str, Any]]:
    try:
        async with httpx.AsyncClient(timeout=10) as client:
            r = await client.get(config.NOMINATIM_URL, params={"format": "json", **params}, headers=_headers())
            r.raise_for_status()
            return r.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Geocoder request failed: %s", exc)
        raise GeocoderUnavailable(str(exc)) from exc


def _format(item: Dict[str, Any]) -> Dict[str, Any]:
    address = item.get("address") or {}
    return {
        "display_name": item.get("display_name", ""),
        "latitude": float(item["lat"]),
        "longitude": float(item["lon"]),
        "address": {
            "street": address.get("road") or address.get("pedestrian") or address.get("footway") or "",
            "city": address.get("city") or address.get("town") or address.get("village") or address.get("municipality") or "",
            "state": address.get("state") or address.get("region") or "",
            "postal_code": address.get("postcode") or "",
            "country": (address.get("country_code") or "").upper(),
        },
    }


async def search(query: str, limit: int = 10) -> List[Dict[str, Any]]:
    items = await _query({"q": query.strip(), "limit": limit, "addressdetails": 1})
    return [_format(item) for item in items]


def address_line(address: Dict[str, Optional[str]]) -> str:
    parts = [address.get(k) for k in ("street", "city", "state", "postal_code", "country")]
    return ", ".join(p for p in parts if p)


async def geocode(address: Dict[str, Optional[str]]) -> Optional[Dict[str, Any]]:
    """First match for a structured address, or None when nothing is found."""
    items = await _query({"q": address_line(address), "limit": 1})
    if not items:
        return None
    item = items[0]
    return {
        "latitude": float(item["lat"]),
        "longitude": float(item["lon"]),
        "display_name": item.get("display_name", ""),
    }
