from __future__ import annotations

import time
import uuid
from typing import Any, Dict, List, Optional

from fastapi import Request

from option_handoff.config import HandoffSettings, load_settings


def new_request_id(prefix: str) -> str:
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"


def request_origin(request: Request) -> str:
    """Scheme+host the caller reached us on (no trailing slash)."""
    return f"{request.url.scheme}://{request.url.netloc}"


def settings_for(request: Request) -> HandoffSettings:
    settings = getattr(request.app.state, "settings", None)
    if isinstance(settings, HandoffSettings):
        return settings
    return load_settings()


def error_body(error: str, message: str, *, notices: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    out: Dict[str, Any] = {"ok": False, "error": error, "message": message}
    if notices is not None:
        out["notices"] = notices
    return out
