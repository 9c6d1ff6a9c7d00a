#main.py
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.payouts.errors import AuthorizationError
from middleware import RequestContextMiddleware
from routes.admin_payhero import router as admin_payhero_router
from routes.admin_payouts import router as admin_payouts_router
from routes.cron import router as cron_router
from routes.health import router as health_router
from settings import settings, validate_env_settings

logger = logging.getLogger("payouts")


def create_app() -> FastAPI:
    validate_env_settings()
    logger.setLevel((settings.LOG_LEVEL or "INFO").upper())

    app = FastAPI(title="Revenue Payout Service", version="1.0.0")
    app.add_middleware(RequestContextMiddleware)

    # -----------------------------
    # ROUTERS
    # -----------------------------

    app.include_router(health_router)
    app.include_router(cron_router)
    app.include_router(admin_payouts_router)
    app.include_router(admin_payhero_router)

    @app.exception_handler(AuthorizationError)
    async def authorization_error_handler(request: Request, exc: AuthorizationError):
        logger.warning("unauthorized request path=%s reason=%s", request.url.path, exc)
        return JSONResponse(status_code=401, content={"message": "Unauthorized"})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("unhandled error path=%s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app


app = create_app()
