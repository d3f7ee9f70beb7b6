from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import listing
from ..db import get_db
from ..deps import require_user
from ..models import Job, SavedSearch, User
from ..schemas import JobOut, SavedSearchIn, SavedSearchOut, SavedSearchUpdate, dump

router = APIRouter()

CRITERIA = ("keyword", "location", "country", "category", "sport", "language")


def to_filters(search: SavedSearch) -> listing.JobFilters:
    return listing.JobFilters(**{name: getattr(search, name) for name in CRITERIA})


def _get_own(db: Session, search_id: int, user: User) -> SavedSearch:
    search = db.get(SavedSearch, search_id)
    if not search:
        raise HTTPException(status_code=404, detail="Saved search not found")
    if search.user_id != user.id:
        raise HTTPException(status_code=403, detail="Forbidden")
    return search


@router.get("")
def list_saved_searches(user: User = Depends(require_user), db: Session = Depends(get_db)):
    searches = (
        db.query(SavedSearch)
        .filter(SavedSearch.user_id == user.id)
        .order_by(SavedSearch.created_at.desc())
        .all()
    )
    return {"savedSearches": [dump(SavedSearchOut, s) for s in searches]}


@router.post("", status_code=201)
def create_saved_search(body: SavedSearchIn, user: User = Depends(require_user), db: Session = Depends(get_db)):
    fields = body.model_dump()
    criteria = {name: fields[name] or None for name in CRITERIA}
    if not any(criteria.values()):
        raise HTTPException(status_code=400, detail="At least one filter must be provided")
    search = SavedSearch(user_id=user.id, name=fields["name"] or None, frequency=body.frequency, active=True, **criteria)
    db.add(search)
    db.commit()
    db.refresh(search)
    return {"message": "Saved search created successfully", "savedSearch": dump(SavedSearchOut, search)}


@router.put("/{search_id}")
def update_saved_search(search_id: int, body: SavedSearchUpdate, user: User = Depends(require_user), db: Session = Depends(get_db)):
    search = _get_own(db, search_id, user)
    for name, value in body.model_dump(exclude_unset=True).items():
        if value is None and name in ("frequency", "active"):
            continue
        if name in CRITERIA:
            value = value or None
        setattr(search, name, value)
    if not to_filters(search).active():
        db.rollback()
        raise HTTPException(status_code=400, detail="At least one filter must be provided")
    db.commit()
    db.refresh(search)
    return {"message": "Saved search updated successfully", "savedSearch": dump(SavedSearchOut, search)}


@router.delete("/{search_id}")
def delete_saved_search(search_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    search = _get_own(db, search_id, user)
    db.delete(search)
    db.commit()
    return {"message": "Saved search deleted successfully"}


@router.get("/{search_id}/matches")
def saved_search_matches(search_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    """Published jobs matching the saved criteria, with the reasons they match."""
    search = _get_own(db, search_id, user)
    filters = to_filters(search)
    jobs = db.query(Job).filter(Job.published.is_(True), Job.spam != "yes").all()
    matches = []
    for job in listing.sort_jobs(dump(JobOut, j) for j in jobs):
        reasons = filters.match_reasons(job)
        if reasons is not None:
            matches.append({"job": job, "matchReasons": reasons})
    return {"savedSearch": dump(SavedSearchOut, search), "matches": matches}
