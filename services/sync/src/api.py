"""
HTTP trigger endpoints for the sync service.

 - POST /api/sync-bills       manual sync of one or more states (webhook secret)
 - GET|POST /api/scheduled-sync  sync of every jurisdiction (cron secret)

Run:
   uvicorn services.sync.src.api:create_app --factory --host 0.0.0.0 --port 8000
"""
import hmac
import logging
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.utils.config import Settings, get_settings

from .errors import ValidationError
from .scheduled import ScheduledSync
from .sync import SyncService

logger = logging.getLogger(__name__)


class SyncRequest(BaseModel):
    state: Optional[str] = None
    states: Optional[List[str]] = None
    limit: Optional[int] = Field(None, gt=0)


class UnauthorizedError(Exception):
    """Raised when a trigger request does not carry the expected bearer token."""
    pass


def _check_bearer(request: Request, secret: Optional[str]) -> None:
    auth_header = request.headers.get("authorization") or ""
    if not secret or not hmac.compare_digest(auth_header, f"Bearer {secret}"):
        logger.warning(f"Rejected unauthorized request to {request.url.path}")
        raise UnauthorizedError()


def require_webhook_secret(request: Request) -> None:
    _check_bearer(request, request.app.state.settings.webhook_secret)


def require_cron_secret(request: Request) -> None:
    _check_bearer(request, request.app.state.settings.cron_secret)


def create_app(
    settings: Optional[Settings] = None,
    sync_service: Optional[SyncService] = None,
    scheduled_sync_factory: Optional[Callable[[SyncService], ScheduledSync]] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Explicit configuration (default: loaded from environment)
        sync_service: Pre-built service; created lazily on first request if omitted
        scheduled_sync_factory: Builds the scheduled runner from the service
    """
    app = FastAPI(
        title="Bill Sync",
        description="Sync Open States bills into the record store",
        version="1.0.0",
    )
    app.state.settings = settings or get_settings()
    app.state.sync_service = sync_service
    app.state.scheduled_sync_factory = scheduled_sync_factory or ScheduledSync

    def get_sync_service() -> SyncService:
        if app.state.sync_service is None:
            app.state.sync_service = SyncService(settings=app.state.settings)
        return app.state.sync_service

    @app.exception_handler(UnauthorizedError)
    async def unauthorized_handler(request: Request, exc: UnauthorizedError):
        return JSONResponse(status_code=401, content={"error": "Unauthorized"})

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Rejected malformed sync request: {exc.errors()}")
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 405:
            message = "Method not allowed"
        else:
            message = str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": message},
            headers=getattr(exc, "headers", None),
        )

    @app.post("/api/sync-bills", dependencies=[Depends(require_webhook_secret)])
    def sync_bills(
        payload: SyncRequest,
        service: SyncService = Depends(get_sync_service),
    ) -> Dict[str, Any]:
        if payload.states:
            states = payload.states
        elif payload.state:
            states = [payload.state]
        else:
            raise ValidationError("State or states parameter is required")

        summary = service.sync_states(states, limit=payload.limit)
        return summary.model_dump(by_alias=True, exclude_none=True)

    @app.api_route(
        "/api/scheduled-sync",
        methods=["GET", "POST"],
        dependencies=[Depends(require_cron_secret)],
    )
    def scheduled_sync(service: SyncService = Depends(get_sync_service)) -> Dict[str, Any]:
        summary = app.state.scheduled_sync_factory(service).run()
        return summary.model_dump(by_alias=True)

    return app
