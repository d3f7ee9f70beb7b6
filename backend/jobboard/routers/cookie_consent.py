import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ..audit import client_ip
from ..db import get_db
from ..models import CookieConsent, utcnow
from ..schemas import ConsentIn

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/log")
def log_consent(body: ConsentIn, request: Request, db: Session = Depends(get_db)):
    timestamp = body.timestamp or utcnow()
    if timestamp.tzinfo is not None:
        timestamp = timestamp.replace(tzinfo=None) - timestamp.utcoffset()
    record = CookieConsent(
        necessary=body.necessary,
        analytics=body.analytics,
        marketing=body.marketing,
        functional=body.functional,
        timestamp=timestamp,
        version=body.version,
        ip_address=client_ip(request) or "unknown",
        user_agent=request.headers.get("user-agent", "unknown"),
    )
    db.add(record)
    db.commit()
    logger.debug("Logged cookie consent %s (v%s)", record.id, record.version)
    return {"success": True, "id": record.id}
