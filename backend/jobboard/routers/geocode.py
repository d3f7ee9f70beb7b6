from fastapi import APIRouter, HTTPException

from .. import geocoding
from ..schemas import GeocodeIn, GeocodeResult

router = APIRouter()


@router.get("/search")
async def search_locations(q: str = ""):
    if not q.strip():
        raise HTTPException(status_code=400, detail="Search query is required")
    try:
        results = await geocoding.search(q)
    except geocoding.GeocoderUnavailable:
        raise HTTPException(status_code=503, detail="Search service unavailable")
    return {"results": [GeocodeResult(**r).model_dump(by_alias=True) for r in results]}


@router.post("")
async def geocode_address(body: GeocodeIn):
    if body.address is None:
        raise HTTPException(status_code=400, detail="Address is required")
    address = body.address.model_dump()
    if not geocoding.address_line(address):
        raise HTTPException(status_code=400, detail="At least one address field is required")
    try:
        hit = await geocoding.geocode(address)
    except geocoding.GeocoderUnavailable:
        raise HTTPException(status_code=503, detail="Geocoding service unavailable")
    except (KeyError, ValueError):
        raise HTTPException(status_code=500, detail="Invalid geocoding response")
    if hit is None:
        raise HTTPException(status_code=404, detail="Address not found")
    return {"latitude": hit["latitude"], "longitude": hit["longitude"], "displayName": hit["display_name"]}
