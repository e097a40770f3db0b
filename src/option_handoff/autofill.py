from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from option_handoff.errors import PayloadDecodeError
from option_handoff.fields import FieldDescriptor, resolve_target_field
from option_handoff.handoff import HandoffPayload
from option_handoff.inputs import InputStore
from option_handoff.notify import MSG_DECODE_FAILED, LoggingNotifier, Notifier, Severity

logger = logging.getLogger("option_handoff.autofill")


class AutofillResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = None
    target_key: Optional[str] = Field(default=None, alias="targetKey")
    applied: bool = False
    inputs: Dict[str, Any] = Field(default_factory=dict)


def fill_text(store: InputStore, fields: Sequence[FieldDescriptor], text: str) -> AutofillResult:
    """Write already-decoded text into the best field. No field -> nothing changes."""
    target = resolve_target_field(fields)
    if target is None:
        logger.warning("autofill skipped: form has no fields")
        return AutofillResult(text=text, applied=False, inputs=store.get_current())
    inputs = store.apply(target.key, text)
    logger.info("autofill applied key=%s name=%s len=%s", target.key, target.name, len(text))
    return AutofillResult(text=text, target_key=target.key, applied=True, inputs=inputs)


def apply_autofill(
    store: InputStore,
    fields: Sequence[FieldDescriptor],
    query_string: str,
    notifier: Optional[Notifier] = None,
) -> AutofillResult:
    """
    Destination-side handling of an arriving handoff.

    Decodes `autoFillText` from the raw query string and merges it into `store`. A payload
    that cannot be decoded is dropped with an error notice and the inputs stay as they are.
    """
    notifier = notifier or LoggingNotifier()
    try:
        payload = HandoffPayload.from_query(query_string)
    except PayloadDecodeError as e:
        logger.error("autofill decode failed err=%s", e)
        notifier.notify(Severity.ERROR, MSG_DECODE_FAILED)
        return AutofillResult(applied=False, inputs=store.get_current())

    if payload is None or not payload.text:
        # An empty value fills nothing; whatever the user already typed stays.
        logger.info("no autofill text in query")
        return AutofillResult(applied=False, inputs=store.get_current())

    return fill_text(store, fields, payload.text)


__all__ = ["AutofillResult", "apply_autofill", "fill_text"]
