import logging
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from chirpy.core.config import Settings, get_settings
from chirpy.core.metrics import HitCounter
from chirpy.repositories.errors import StoreError
from chirpy.repositories.json_storage import JSONStore
from chirpy.routers import admin as admin_router
from chirpy.routers import auth as auth_router
from chirpy.routers import chirps as chirps_router
from chirpy.routers import hooks as hooks_router
from chirpy.routers import users as users_router
from chirpy.services.auth_service import AuthService
from chirpy.services.chirp_service import ChirpService

logger = logging.getLogger(__name__)

FILESERVER_PREFIX = "/app"


class FileserverMetricsMiddleware(BaseHTTPMiddleware):
    """Count every request served under the static file prefix."""

    def __init__(self, app, *, counter: HitCounter) -> None:
        super().__init__(app)
        self._counter = counter

    async def dispatch(self, request, call_next):
        path = request.url.path
        if path == FILESERVER_PREFIX or path.startswith(FILESERVER_PREFIX + "/"):
            hits = self._counter.increment()
            logger.debug("Incremented fileserver hits to %s", hits)
        return await call_next(request)


def _error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    def http_exception_handler(request: Request, exc: StarletteHTTPException):  # noqa: ARG001
        detail = exc.detail if isinstance(exc.detail, str) else "Something went wrong"
        return _error_response(exc.status_code, detail, getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    def validation_exception_handler(request: Request, exc: RequestValidationError):  # noqa: ARG001
        return _error_response(400, "Invalid request")

    @app.exception_handler(StoreError)
    def store_exception_handler(request: Request, exc: StoreError):
        logger.error("Store failure on %s %s: %s (%s)", request.method, request.url.path, exc.message, exc.kind.value)
        return _error_response(500, "Something went wrong")


def create_app(settings: Optional[Settings] = None, store: Optional[JSONStore] = None) -> FastAPI:
    """Factory compatible with uvicorn (``uvicorn --factory chirpy.app:create_app``)."""
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if store is None:
        store = JSONStore(settings.database_path, refresh_ttl=timedelta(days=settings.refresh_token_ttl_days))

    app = FastAPI(title="Chirpy API")
    hits = HitCounter()
    app.state.settings = settings
    app.state.store = store
    app.state.hits = hits
    app.state.auth_service = AuthService(store, settings)
    app.state.chirp_service = ChirpService(store)

    app.add_middleware(FileserverMetricsMiddleware, counter=hits)
    _install_error_handlers(app)

    @app.get("/api/healthz", response_class=PlainTextResponse)
    def healthz():
        return "OK"

    app.include_router(admin_router.router)
    app.include_router(users_router.router)
    app.include_router(auth_router.router)
    app.include_router(chirps_router.router)
    app.include_router(hooks_router.router)

    app.mount(
        FILESERVER_PREFIX,
        StaticFiles(directory=settings.fileserver_root, html=True, check_dir=False),
        name="app",
    )
    logger.info("Serving files from %s, database at %s", settings.fileserver_root, store.path)
    return app
