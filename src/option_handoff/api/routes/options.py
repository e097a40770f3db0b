from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Request

from option_handoff.api.models import ExtractOptionsRequest
from option_handoff.api.utils import settings_for
from option_handoff.options import extract_options

router = APIRouter(prefix="/options", tags=["options"])


@router.post("/extract")
def extract(body: ExtractOptionsRequest, request: Request) -> Dict[str, Any]:
    """
    Numbered options found in an answer, in the order they appear. An answer without
    options is not an error: `options` is just empty.
    """
    settings = settings_for(request)
    options = extract_options(body.scan_text(), settings.directive_marker)
    return {"ok": True, "options": [o.model_dump() for o in options]}
