import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core import config
from app.core.exceptions import ConfigurationError, NotFoundError, TransientStoreError, CreditLimitExceeded
from app.core.logging_config import setup_logging, sanitize_log_data
from app.db.session import build_engine, build_session_factory
from app.api.routes import auth, plans, subscription, usage, admin, support, health

logger = logging.getLogger(__name__)


# ============================================
# ✅ LIFESPAN: ENGINE + SESSION FACTORY
# ============================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    if not config.SECRET_KEY:
        raise ConfigurationError("SECRET_KEY is not set")

    setup_logging(config.LOG_LEVEL, config.LOG_DIR)
    logger.info(f"Starting AnimatePDF credit service: {sanitize_log_data({'database_url': config.DATABASE_URL, 'log_level': config.LOG_LEVEL})}")

    if config.RUN_MIGRATIONS:
        from app.db.migrate import run_migrations
        run_migrations()

    engine = build_engine(config.DATABASE_URL)
    app.state.session_factory = build_session_factory(engine)

    from app.db.init_db import create_tables, seed_plans
    if config.AUTO_CREATE_TABLES:
        create_tables(engine)
    if config.SEED_PLANS:
        seed_plans(app.state.session_factory)

    try:
        yield
    finally:
        engine.dispose()
        logger.info("Database engine disposed")


# ============================================
# ✅ FASTAPI APP INIT
# ============================================

app = FastAPI(title="AnimatePDF Credit Service", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Authorization", "Content-Type"],
)


# ============================================
# ✅ ERROR MAPPING
# ============================================

@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"Configuration error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": {"error": "configuration_error", "message": str(exc)}},
    )


@app.exception_handler(TransientStoreError)
async def transient_store_error_handler(request: Request, exc: TransientStoreError):
    logger.warning(f"Transient store error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": {"error": "store_unavailable", "message": str(exc), "retryable": True}},
        headers={"Retry-After": "5"},
    )


@app.exception_handler(NotFoundError)
async def not_found_error_handler(request: Request, exc: NotFoundError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc)},
    )


@app.exception_handler(CreditLimitExceeded)
async def credit_limit_exceeded_handler(request: Request, exc: CreditLimitExceeded):
    check = exc.check
    return JSONResponse(
        status_code=status.HTTP_402_PAYMENT_REQUIRED,
        content={"detail": {
            "error": "credit_limit_reached",
            "code": "PAYWALL",
            "plan": check.plan_name,
            "limit": check.limit,
            "used": check.current_usage,
            "remaining": 0,
            "message": check.message,
            "upgrade_url": f"{config.FRONTEND_URL}/pricing",
        }},
    )


# ============================================
# ✅ REGISTER ALL ROUTERS
# ============================================

app.include_router(auth.router)
app.include_router(plans.router)
app.include_router(subscription.router)
app.include_router(usage.router)
app.include_router(admin.router)
app.include_router(support.router)
app.include_router(health.router)


@app.get("/")
def root():
    return {"status": "AnimatePDF credit service running"}
