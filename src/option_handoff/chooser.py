from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field

from option_handoff.config import HandoffSettings
from option_handoff.errors import PayloadEncodeError
from option_handoff.handoff import build_handoff_url, destination_url
from option_handoff.notify import (
    MSG_ENCODE_FAILED,
    MSG_MISSING_CONTEXT,
    MSG_NAVIGATING,
    LoggingNotifier,
    Notifier,
    Severity,
)

logger = logging.getLogger("option_handoff.chooser")

PRIOR_TEXT_KEY = "text"


class ConversationContext(BaseModel):
    """
    What the chat side knows about the form inputs of the conversation the answer
    belongs to. A started conversation carries its own inputs; otherwise the inputs
    typed for the not-yet-started conversation apply.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    current_conversation_id: Optional[str] = Field(default=None, alias="currentConversationId")
    current_conversation_inputs: Optional[Dict[str, Any]] = Field(default=None, alias="currentConversationInputs")
    new_conversation_inputs: Dict[str, Any] = Field(default_factory=dict, alias="newConversationInputs")
    inputs_forms: List[Dict[str, Any]] = Field(default_factory=list, alias="inputsForms")

    def current_inputs(self) -> Dict[str, Any]:
        if self.current_conversation_id:
            return dict(self.current_conversation_inputs or {})
        return dict(self.new_conversation_inputs or {})

    def prior_text(self) -> str:
        v = self.current_inputs().get(PRIOR_TEXT_KEY)
        return "" if v is None else str(v)


class Navigator(Protocol):
    def navigate(self, url: str) -> None: ...


class RecordingNavigator:
    """Navigator for server-side use: remembers the address so the caller can redirect to it."""

    def __init__(self) -> None:
        self.location: Optional[str] = None

    def navigate(self, url: str) -> None:
        self.location = url


def choose_option(
    option_text: str,
    context: Optional[ConversationContext],
    *,
    origin: str,
    settings: HandoffSettings,
    navigator: Navigator,
    notifier: Optional[Notifier] = None,
) -> Optional[str]:
    """
    Hand the chosen option over to the destination form.

    The prior text has to be folded in now: the navigation tears down everything that is
    not in the address. Returns the address navigated to, or None when there was no
    context to read from (nothing is navigated then).
    """
    notifier = notifier or LoggingNotifier()
    if context is None:
        logger.error("option handoff aborted: no conversation context")
        notifier.notify(Severity.ERROR, MSG_MISSING_CONTEXT)
        return None

    base = settings.origin or origin
    try:
        url = build_handoff_url(
            origin=base,
            workflow_path=settings.workflow_path,
            prior_text=context.prior_text(),
            chosen_text=option_text,
        )
        notifier.notify(Severity.INFO, MSG_NAVIGATING)
    except PayloadEncodeError as e:
        logger.error("option handoff encode failed err=%s", e)
        notifier.notify(Severity.ERROR, MSG_ENCODE_FAILED)
        # Still go to the form, just without anything to fill.
        url = destination_url(base, settings.workflow_path)

    logger.info("option handoff navigate url_len=%s", len(url))
    navigator.navigate(url)
    return url


__all__ = ["ConversationContext", "Navigator", "RecordingNavigator", "choose_option"]
