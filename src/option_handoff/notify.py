from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Protocol

logger = logging.getLogger("option_handoff.notify")


class Severity(str, Enum):
    INFO = "info"
    ERROR = "error"


# Short user-facing messages.
MSG_NAVIGATING = "Redirecting and auto-filling the form..."
MSG_ENCODE_FAILED = "Failed to set up auto-fill"
MSG_DECODE_FAILED = "Could not read the auto-fill text"
MSG_MISSING_CONTEXT = "Unable to read form data"


class Notifier(Protocol):
    def notify(self, severity: Severity, message: str) -> None: ...


class LoggingNotifier:
    """Default notifier: notices go to the service log."""

    def notify(self, severity: Severity, message: str) -> None:
        if severity == Severity.ERROR:
            logger.error("notice severity=%s message=%s", severity.value, message)
        else:
            logger.info("notice severity=%s message=%s", severity.value, message)


class CollectingNotifier:
    """
    Keeps notices in order so the HTTP layer can hand them back to the client,
    and forwards each one to the log as well.
    """

    def __init__(self) -> None:
        self.notices: List[Dict[str, Any]] = []
        self._log = LoggingNotifier()

    def notify(self, severity: Severity, message: str) -> None:
        self.notices.append({"type": Severity(severity).value, "message": str(message)})
        self._log.notify(Severity(severity), message)

    def has_errors(self) -> bool:
        return any(n.get("type") == Severity.ERROR.value for n in self.notices)
