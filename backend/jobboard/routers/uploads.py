import logging
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from ..deps import require_job_seeker, require_recruiter, require_recruiter_or_admin
from ..models import User
from ..storage import MAX_FILES_PER_UPLOAD, UploadRejected, check_image, get_store

logger = logging.getLogger(__name__)

router = APIRouter()


async def _store_pictures(files: List[UploadFile], folder: str, user: User) -> List[str]:
    if not files:
        raise HTTPException(status_code=400, detail="No files uploaded")
    if len(files) > MAX_FILES_PER_UPLOAD:
        raise HTTPException(status_code=400, detail=f"Maximum {MAX_FILES_PER_UPLOAD} files allowed")

    payloads = []
    for f in files:
        data = await f.read()
        try:
            check_image(f.filename or "", f.content_type, len(data))
        except UploadRejected as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        payloads.append((f.filename or "upload", data))

    store = get_store()
    paths = [store.put(folder, str(user.id), name, data) for name, data in payloads]
    logger.info("User %s uploaded %d file(s) to %s", user.id, len(paths), folder)
    return paths


@router.post("/company/upload")
async def upload_company_pictures(pictures: List[UploadFile] = File(...), user: User = Depends(require_recruiter_or_admin)):
    paths = await _store_pictures(pictures, "company-pictures", user)
    return {"message": "Files uploaded successfully", "paths": paths}


@router.post("/company/upload-logo")
async def upload_company_logo(logo: UploadFile = File(...), user: User = Depends(require_recruiter_or_admin)):
    paths = await _store_pictures([logo], "company-logos", user)
    return {"url": paths[0]}


@router.post("/cv/upload")
async def upload_cv_pictures(pictures: List[UploadFile] = File(...), user: User = Depends(require_job_seeker)):
    paths = await _store_pictures(pictures, "cv-pictures", user)
    return {"message": "Files uploaded successfully", "paths": paths}


@router.post("/jobs/upload")
async def upload_job_pictures(pictures: List[UploadFile] = File(...), user: User = Depends(require_recruiter)):
    paths = await _store_pictures(pictures, "job-pictures", user)
    return {"message": "Files uploaded successfully", "paths": paths}
