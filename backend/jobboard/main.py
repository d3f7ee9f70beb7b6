import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .config import ALLOWED_ORIGINS, UPLOAD_BASE_URL, UPLOAD_DIR
from .db import init_db
from .logging_config import setup_logging
from .routers import (
    account,
    admin,
    applications,
    auth,
    companies,
    cookie_consent,
    cv,
    favourites,
    geocode,
    jobs,
    listings,
    saved_searches,
    uploads,
)
from .storage import get_store

logger = logging.getLogger(__name__)

app = FastAPI(title="watersports-jobboard")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup():
    setup_logging()
    init_db()
    get_store()
    logger.info("Job board API started")


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# upload and favourite routes sit under /api/jobs, /api/cv and /api/candidates-list, so they go in before the {id} routes
app.include_router(uploads.router, prefix="/api", tags=["uploads"])
app.include_router(favourites.router, prefix="/api", tags=["favourites"])
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(account.router, prefix="/api/account", tags=["account"])
app.include_router(jobs.router, prefix="/api/jobs", tags=["jobs"])
app.include_router(companies.router, prefix="/api/company", tags=["company"])
app.include_router(companies.public_router, prefix="/api/companies", tags=["company"])
app.include_router(cv.router, prefix="/api/cv", tags=["cv"])
app.include_router(listings.router, prefix="/api", tags=["listings"])
app.include_router(applications.router, prefix="/api/applications", tags=["applications"])
app.include_router(applications.my_router, prefix="/api/my-applications", tags=["applications"])
app.include_router(saved_searches.router, prefix="/api/saved-searches", tags=["saved-searches"])
app.include_router(geocode.router, prefix="/api/geocode", tags=["geocode"])
app.include_router(admin.router, prefix="/api/admin", tags=["admin"])
app.include_router(cookie_consent.router, prefix="/api/cookie-consent", tags=["cookie-consent"])

app.mount(UPLOAD_BASE_URL, StaticFiles(directory=UPLOAD_DIR, check_dir=False), name="uploads")


@app.get("/")
def root():
    return {"ok": True, "service": "watersports-jobboard"}
