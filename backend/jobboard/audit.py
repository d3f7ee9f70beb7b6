"""Audit trail for account and admin actions.

Writing an audit entry must never break the operation being audited, so
every failure here is logged and swallowed.
"""

import logging
from typing import Any, Dict, Iterable, Optional

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .models import AuditLog, User

logger = logging.getLogger(__name__)


def client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip
    return request.client.host if request.client else None


def snapshot(obj, fields: Iterable[str]) -> Dict[str, Any]:
    """Plain-dict copy of the given attributes, safe to store as JSON."""
    out = {}
    for name in fields:
        value = getattr(obj, name, None)
        out[name] = value.isoformat() if hasattr(value, "isoformat") else value
    return out


def record(
    db: Session,
    request: Request,
    *,
    action: str,
    entity_type: str,
    actor: User,
    entity_id: Optional[int] = None,
    before: Optional[Dict[str, Any]] = None,
    after: Optional[Dict[str, Any]] = None,
    reason: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> None:
    changes = None
    if before is not None or after is not None:
        changes = {"before": before, "after": after}
        if before is not None and after is not None:
            changes["fields"] = sorted(k for k in after if before.get(k) != after.get(k))
    try:
        db.add(AuditLog(
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            user_id=actor.id,
            user_email=actor.email,
            user_name=actor.name,
            changes=changes,
            reason=reason,
            ip_address=client_ip(request),
            user_agent=request.headers.get("user-agent"),
            extra=metadata,
        ))
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to write audit log for %s %s %s", action, entity_type, entity_id)
