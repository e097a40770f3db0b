from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Request

from option_handoff.api.models import AutofillRequest
from option_handoff.autofill import apply_autofill
from option_handoff.inputs import InputStore
from option_handoff.notify import CollectingNotifier

router = APIRouter(tags=["autofill"])


@router.post("/autofill")
def autofill(body: AutofillRequest, request: Request) -> Dict[str, Any]:
    """
    Arrival side of a handoff: merge `autoFillText` from this request's query string into
    `inputs`. The parameter is read raw so it is percent-decoded exactly once.

    A payload that cannot be decoded leaves `inputs` untouched (`applied: false`) and adds
    an error notice; it is not an HTTP error.
    """
    store = InputStore(body.inputs)
    notifier = CollectingNotifier()
    query = request.scope.get("query_string") or b""
    result = apply_autofill(store, body.fields, query.decode("utf-8", errors="surrogateescape"), notifier)
    return {"ok": True, **result.model_dump(by_alias=True), "notices": notifier.notices}
