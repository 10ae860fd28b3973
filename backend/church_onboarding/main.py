import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from church_onboarding.config import settings
from church_onboarding.middleware.exceptions import register_exception_handlers
from church_onboarding.middleware.security import SecurityHeadersMiddleware
from church_onboarding.routers import health, plans, wizard
from church_onboarding.utils.cache import close_redis

logger = logging.getLogger("church_onboarding")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level="DEBUG" if settings.debug else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info("Onboarding service starting (%s)", settings.environment)
    yield
    await close_redis()
    logger.info("Onboarding service stopped")


app = FastAPI(
    title="Church Onboarding",
    description="Organization onboarding wizard for the church-management dashboard",
    version="0.1.0",
    lifespan=lifespan,
)

# ── Exception Handlers ───────────────────────────────────────
register_exception_handlers(app)

# ── Middleware (outermost first) ─────────────────────────────
app.add_middleware(SecurityHeadersMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ──────────────────────────────────────────────────
app.include_router(health.router)
app.include_router(wizard.router, prefix="/api/wizard", tags=["wizard"])
app.include_router(plans.router, prefix="/api/plans", tags=["plans"])
