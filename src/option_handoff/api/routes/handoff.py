from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response
from starlette.status import HTTP_303_SEE_OTHER, HTTP_422_UNPROCESSABLE_ENTITY

from option_handoff.api.models import HandoffRequest
from option_handoff.api.utils import error_body, request_origin, settings_for
from option_handoff.chooser import RecordingNavigator, choose_option
from option_handoff.errors import UnknownOptionError
from option_handoff.notify import MSG_MISSING_CONTEXT, CollectingNotifier
from option_handoff.options import extract_options, find_option

router = APIRouter(tags=["handoff"])


def _chosen_text(body: HandoffRequest, marker: str) -> str:
    if body.option_text is not None:
        return body.option_text
    index = str(body.option_index or "").strip()
    opt = find_option(extract_options(body.scan_text(), marker), index)
    if opt is None:
        raise UnknownOptionError(f"no option {index!r} in the answer")
    return opt.text


@router.post("/handoff")
def handoff(
    body: HandoffRequest,
    request: Request,
    mode: Optional[Literal["redirect", "json"]] = Query(default="redirect"),
) -> Response:
    """
    Send the chosen option to the destination form.

    Default response is a `303` to `{origin}/{workflow path}?autoFillText=...`; `mode=json`
    returns the address instead. Without a conversation context nothing is navigated.
    """
    settings = settings_for(request)
    # No context means no handoff at all, whatever option was asked for.
    chosen = _chosen_text(body, settings.directive_marker) if body.context is not None else ""

    notifier = CollectingNotifier()
    navigator = RecordingNavigator()
    location = choose_option(
        chosen,
        body.context,
        origin=request_origin(request),
        settings=settings,
        navigator=navigator,
        notifier=notifier,
    )
    if location is None:
        return JSONResponse(
            error_body("missing_context", MSG_MISSING_CONTEXT, notices=notifier.notices),
            status_code=HTTP_422_UNPROCESSABLE_ENTITY,
        )

    if mode == "json":
        return JSONResponse({"ok": True, "location": location, "notices": notifier.notices})
    return RedirectResponse(location, status_code=HTTP_303_SEE_OTHER)
