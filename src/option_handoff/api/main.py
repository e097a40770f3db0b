from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from option_handoff.api.http_logging import install_http_logging
from option_handoff.api.routes.autofill import router as autofill_router
from option_handoff.api.routes.handoff import router as handoff_router
from option_handoff.api.routes.options import router as options_router
from option_handoff.api.utils import error_body, new_request_id
from option_handoff.config import HandoffSettings, load_dotenv_files, load_settings
from option_handoff.errors import HandoffError

logger = logging.getLogger("option_handoff.api")


def _repo_root() -> Path:
    # src/option_handoff/api/main.py -> repo root
    return Path(__file__).resolve().parents[3]


def _api_router() -> APIRouter:
    router = APIRouter()
    router.include_router(options_router)
    router.include_router(handoff_router)
    router.include_router(autofill_router)
    return router


def create_app(settings: Optional[HandoffSettings] = None) -> FastAPI:
    if settings is None:
        # `.env` + `.env.local` when present (local dev convenience).
        load_dotenv_files(_repo_root())
        settings = load_settings()

    app = FastAPI(title="option-handoff-service", version="1.0.0")
    app.state.settings = settings

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        request_id = new_request_id("val")
        logger.warning(
            "422 validation_error requestId=%s path=%s errors=%s", request_id, request.url.path, exc.errors()
        )
        body = error_body("validation_error", "Request body did not match expected schema.")
        body["requestId"] = request_id
        body["details"] = jsonable_encoder(exc.errors())
        return JSONResponse(status_code=HTTP_422_UNPROCESSABLE_ENTITY, content=body)

    @app.exception_handler(HandoffError)
    async def _handoff_error_handler(request: Request, exc: HandoffError) -> JSONResponse:
        logger.info("400 %s path=%s err=%s", exc.code, request.url.path, exc)
        return JSONResponse(status_code=HTTP_400_BAD_REQUEST, content=error_body(exc.code, str(exc)))

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = new_request_id("err")
        logger.exception("500 internal_error requestId=%s path=%s", request_id, request.url.path)
        body = error_body("internal_error", "Unhandled server error.")
        body["requestId"] = request_id
        return JSONResponse(status_code=HTTP_500_INTERNAL_SERVER_ERROR, content=body)

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {"ok": True, "service": "option-handoff-service", "ts": int(time.time() * 1000)}

    # v1 endpoints.
    app.include_router(_api_router(), prefix="/v1/api")
    # Legacy (unversioned) endpoints for older widgets.
    app.include_router(_api_router(), prefix="/api", include_in_schema=False)

    install_http_logging(app, settings)
    return app


app = create_app()
