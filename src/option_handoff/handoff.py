from __future__ import annotations

import re
from typing import Optional
from urllib.parse import quote, unquote, unquote_to_bytes

from pydantic import BaseModel, ConfigDict, Field

from option_handoff.config import AUTOFILL_PARAM
from option_handoff.errors import PayloadDecodeError, PayloadEncodeError

PAYLOAD_VERSION = 1

# Same unreserved set as JavaScript's encodeURIComponent; `quote` already keeps `_.-~`.
_COMPONENT_SAFE = "!*'()"

# A `%` that does not start a two-hex-digit escape.
_BROKEN_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class HandoffPayload(BaseModel):
    """
    The token carried across the navigation.

    v1 travels as a single `autoFillText` query parameter holding the percent-encoded
    text; later versions may add parameters, which v1 receivers ignore.
    """

    model_config = ConfigDict(frozen=True)

    v: int = Field(default=PAYLOAD_VERSION)
    text: str = ""

    def to_query(self) -> str:
        return f"{AUTOFILL_PARAM}={encode_component(self.text)}"

    @classmethod
    def from_query(cls, query_string: str) -> Optional["HandoffPayload"]:
        """
        Read the payload out of a raw (still percent-encoded) query string.

        Returns None when the parameter is absent. Raises PayloadDecodeError when it is
        present but cannot be decoded.
        """
        raw = raw_query_param(query_string, AUTOFILL_PARAM)
        if raw is None:
            return None
        return cls(text=decode_component(raw))


def compose_handoff_text(prior_text: Optional[str], chosen_text: str) -> str:
    # The chosen option always goes on a new line under the existing text.
    return f"{(prior_text or '').strip()}\n{chosen_text}"


def encode_component(value: str) -> str:
    try:
        return quote(value, safe=_COMPONENT_SAFE, encoding="utf-8", errors="strict")
    except UnicodeError as e:
        raise PayloadEncodeError(f"cannot percent-encode handoff text: {e}") from e


def decode_component(value: str) -> str:
    """
    Strict percent-decoding. `+` is read as a space (query-string convention); malformed
    escapes and byte sequences that are not UTF-8 raise PayloadDecodeError.
    """
    if _BROKEN_ESCAPE.search(value):
        raise PayloadDecodeError("malformed percent-escape in handoff text")
    try:
        return unquote_to_bytes(value.replace("+", " ")).decode("utf-8", errors="strict")
    except UnicodeError as e:
        raise PayloadDecodeError(f"handoff text is not valid UTF-8: {e}") from e


def raw_query_param(query_string: str, name: str) -> Optional[str]:
    """First value of `name` in a raw query string, left encoded. Other parameters are ignored."""
    qs = str(query_string or "").lstrip("?")
    if not qs:
        return None
    for part in qs.split("&"):
        if not part:
            continue
        key, sep, value = part.partition("=")
        if unquote(key.replace("+", " ")) == name:
            return value if sep else ""
    return None


def normalize_workflow_path(path: Optional[str]) -> str:
    p = path or ""
    return p[1:] if p.startswith("/") else p


def destination_url(origin: str, workflow_path: Optional[str]) -> str:
    """`origin/path` without any payload; also where a failed encode still navigates to."""
    return f"{str(origin or '').rstrip('/')}/{normalize_workflow_path(workflow_path)}"


def build_handoff_url(
    *,
    origin: str,
    workflow_path: Optional[str],
    prior_text: Optional[str],
    chosen_text: str,
) -> str:
    payload = HandoffPayload(text=compose_handoff_text(prior_text, chosen_text))
    return f"{destination_url(origin, workflow_path)}?{payload.to_query()}"


__all__ = [
    "HandoffPayload",
    "PAYLOAD_VERSION",
    "build_handoff_url",
    "compose_handoff_text",
    "decode_component",
    "destination_url",
    "encode_component",
    "normalize_workflow_path",
    "raw_query_param",
]
