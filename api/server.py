"""
FastAPI application entry point.

Sets up the application with:
- Lifespan management (startup/shutdown)
- Route registration
- Error handling
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse

from api.dependencies import set_services
from api.routes import health_router, memos_router, users_router
from api.routes.memos import AuthErrorRedirect
from auth.credentials import CredentialStore
from auth.tokens import TokenService
from core.config import Settings, settings as default_settings
from core.errors import MemoAppError, StorageUnavailable
from core.logging import configure_logging, get_logger
from core.storage import create_memo_store, create_user_store
from manager.memo_service import MemoService


logger = get_logger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application.
    """
    app_settings = app_settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        Application lifespan manager.

        Startup: bootstrap both collections and wire up the services.
        Shutdown: release the stores and clear the service singletons.
        """
        configure_logging(app_settings)

        logger.info(
            "Starting memo service...",
            storage_backend=app_settings.storage_backend,
            data_dir=str(app_settings.data_dir),
        )
        if app_settings.uses_default_secret:
            logger.warning(
                "JWT_SECRET is not set, using the built-in default. "
                "Set it to a stable secret before deploying."
            )

        user_store = create_user_store(app_settings)
        memo_store = create_memo_store(app_settings)
        await user_store.setup()
        await memo_store.setup()

        token_service = TokenService(
            secret=app_settings.jwt_secret,
            expires_minutes=app_settings.token_expire_minutes,
        )
        credential_store = CredentialStore(
            user_store,
            hash_iterations=app_settings.password_hash_iterations,
        )
        memo_service = MemoService(memo_store, token_service)
        set_services(memo_service, credential_store, token_service)

        logger.info(
            "Memo service started",
            host=app_settings.server_host,
            port=app_settings.port,
        )

        yield

        logger.info("Shutting down memo service...")
        set_services(None, None, None)
        await user_store.close()
        await memo_store.close()
        logger.info("Memo service stopped")

    app = FastAPI(
        title="Memo Service",
        description=(
            "Memos with per-user ownership on top of flat JSON collections.\n\n"
            "Anyone can read memos; only their owner can change them."
        ),
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Register routes
    app.include_router(health_router)
    app.include_router(users_router)
    app.include_router(memos_router)

    @app.get("/", include_in_schema=False)
    async def index() -> RedirectResponse:
        return RedirectResponse("/memos", status_code=303)

    @app.exception_handler(AuthErrorRedirect)
    async def auth_error_redirect_handler(request: Request, exc: AuthErrorRedirect):
        return RedirectResponse(exc.location, status_code=303)

    @app.exception_handler(StorageUnavailable)
    async def storage_exception_handler(request: Request, exc: StorageUnavailable):
        logger.error(
            "Storage unavailable",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Storage unavailable",
                "message": str(exc) if app_settings.debug else "An error occurred",
            },
        )

    @app.exception_handler(MemoAppError)
    async def app_exception_handler(request: Request, exc: MemoAppError):
        logger.error(
            "Unhandled application error",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "message": str(exc) if app_settings.debug else "An error occurred",
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "message": str(exc) if app_settings.debug else "An error occurred",
            },
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.server:app",
        host=default_settings.server_host,
        port=default_settings.port,
        reload=default_settings.debug,
    )
