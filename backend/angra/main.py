"""
# `angra/main.py` — Application entry point

## General
Builds the FastAPI app: logging, CORS, routers, and the background scheduler.

---

## Routers
**Public:**
- `/auth` — sign-in, sign-up, password reset / update, sign-out, session
- `/galleries` — read-only galleries for the marketing site
- `/accommodations` — multilingual house catalog
- `/client` — the signed-in client's purchases

**Role update:** `POST /api/update-role` (administrators only).

**Admin (prefix `/admin`, admin or operator unless noted):**
- `/users` (administrators only)
- `/clients`
- `/sales`
- `/galleries`
- `/dashboard`

---

## Background scheduler
- **Library:** APScheduler (`AsyncIOScheduler`)
- **Job:** `run_reconciliation` creates missing `client` profiles
- **Interval:** `settings.profile_reconcile_minutes` (`0` disables the job)

Started and stopped with the application lifespan.
"""
import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from angra.config import get_settings
from angra.routers import (
    accommodations,
    auth,
    client_portal,
    clients,
    dashboard,
    galleries,
    role_update,
    sales,
    users,
)
from angra.services.profile_sync import run_reconciliation

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.profile_reconcile_minutes > 0:
        scheduler.add_job(
            run_reconciliation,
            "interval",
            minutes=settings.profile_reconcile_minutes,
            id="profile-reconcile",
            replace_existing=True,
        )
        if not scheduler.running:
            scheduler.start()
        logger.info("Profile reconciliation every %d min", settings.profile_reconcile_minutes)
    yield
    if scheduler.running:
        scheduler.shutdown(wait=False)


app = FastAPI(
    title="The Best of Angra API",
    description="Back-office and public API for a holiday-rental business.",
    version="1.0.0",
    redirect_slashes=False,
    debug=settings.debug,
    lifespan=lifespan,
)

# Configure CORS (allow front-end domain or all origins as specified)
allow_origins = [origin.strip() for origin in settings.allowed_origins.split(',')] if settings.allowed_origins else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include public routers
app.include_router(auth.router)
app.include_router(galleries.router)
app.include_router(accommodations.router)
app.include_router(client_portal.router)
app.include_router(role_update.router)

# Include admin routers (with prefix /admin)
app.include_router(users.admin_router, prefix="/admin")
app.include_router(clients.admin_router, prefix="/admin")
app.include_router(sales.admin_router, prefix="/admin")
app.include_router(galleries.admin_router, prefix="/admin")
app.include_router(dashboard.admin_router, prefix="/admin")


# Run the app directly with uvicorn (for development)
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("angra.main:app", host="0.0.0.0", port=8000, reload=True)
