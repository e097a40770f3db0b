from __future__ import annotations

import json
import logging
import time
import uuid
from typing import Any, Dict, Iterable, List, Optional, Tuple

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from option_handoff.config import HandoffSettings

logger = logging.getLogger("option_handoff.http")


_SENSITIVE_KEYS = {
    "authorization",
    "cookie",
    "set-cookie",
    "x-api-key",
    "api_key",
    "access_token",
    "token",
    "secret",
    "password",
    "location",
}

# The handoff text in the query string is user content; keep it out of the log line.
_REDACTED_QUERY_PARAMS = {"autofilltext"}


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: ("***" if str(k).lower() in _SENSITIVE_KEYS else _redact(v)) for k, v in value.items()}
    if isinstance(value, list):
        return [_redact(v) for v in value]
    return value


def _redact_query(query: str) -> str:
    parts: List[str] = []
    for part in query.split("&"):
        key, sep, _ = part.partition("=")
        if sep and key.lower() in _REDACTED_QUERY_PARAMS:
            parts.append(f"{key}=***")
        else:
            parts.append(part)
    return "&".join(parts)


def _decode_headers(headers: Iterable[Tuple[bytes, bytes]]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for k, v in headers:
        ks = k.decode("latin-1").lower()
        out[ks] = "***" if ks in _SENSITIVE_KEYS else v.decode("latin-1")
    return out


def _header(headers: Iterable[Tuple[bytes, bytes]], name: bytes) -> str:
    for k, v in headers:
        if k.lower() == name:
            return v.decode("latin-1")
    return ""


def _parse_body(content_type: str, body: bytes) -> Any:
    ct = (content_type or "").lower()
    if not body:
        return ""
    if "application/json" in ct:
        try:
            return _redact(json.loads(body.decode("utf-8", errors="replace")))
        except ValueError:
            return body.decode("utf-8", errors="replace")
    if ct.startswith("text/"):
        return body.decode("utf-8", errors="replace")
    return "<binary>"


class HttpLoggingMiddleware:
    """One JSON line per HTTP request, with redacted headers, bodies and handoff text."""

    def __init__(self, app: ASGIApp, *, log_headers: bool, max_body_bytes: int) -> None:
        self.app = app
        self.log_headers = log_headers
        self.max_body_bytes = max(0, max_body_bytes)

    def _capture(self, buf: bytearray, chunk: bytes) -> bool:
        """Append what fits; True when something was cut off."""
        if not chunk or self.max_body_bytes <= 0:
            return False
        remaining = self.max_body_bytes - len(buf)
        if remaining > 0:
            buf.extend(chunk[:remaining])
        return len(chunk) > remaining

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        started_at = time.perf_counter()
        req_headers: List[Tuple[bytes, bytes]] = list(scope.get("headers") or [])
        request_id = _header(req_headers, b"x-request-id") or uuid.uuid4().hex[:12]

        req_buf = bytearray()
        res_buf = bytearray()
        truncated = {"request": False, "response": False}
        res_status: Optional[int] = None
        res_headers: List[Tuple[bytes, bytes]] = []

        async def receive_wrapped() -> Message:
            message = await receive()
            if message.get("type") == "http.request":
                if self._capture(req_buf, message.get("body") or b""):
                    truncated["request"] = True
            return message

        async def send_wrapped(message: Message) -> None:
            nonlocal res_status, res_headers
            if message.get("type") == "http.response.start":
                res_status = int(message.get("status") or 0)
                res_headers = list(message.get("headers") or [])
            elif message.get("type") == "http.response.body":
                if self._capture(res_buf, message.get("body") or b""):
                    truncated["response"] = True
            await send(message)

        err: Optional[BaseException] = None
        try:
            await self.app(scope, receive_wrapped, send_wrapped)
        except BaseException as e:  # noqa: BLE001 - log then re-raise
            err = e
            raise
        finally:
            record: Dict[str, Any] = {
                "id": request_id,
                "method": str(scope.get("method") or "").upper(),
                "path": str(scope.get("path") or ""),
                "query": _redact_query((scope.get("query_string") or b"").decode("latin-1")),
                "status": res_status,
                "dur_ms": int((time.perf_counter() - started_at) * 1000),
                "request": {
                    "body": _parse_body(_header(req_headers, b"content-type"), bytes(req_buf)),
                    "body_truncated": truncated["request"],
                },
                "response": {
                    "body": _parse_body(_header(res_headers, b"content-type"), bytes(res_buf)),
                    "body_truncated": truncated["response"],
                },
            }
            if self.log_headers:
                record["request"]["headers"] = _decode_headers(req_headers)
                record["response"]["headers"] = _decode_headers(res_headers)
            if err is not None:
                record["error"] = {"type": type(err).__name__, "message": str(err)}
            logger.info(json.dumps(record, ensure_ascii=False, separators=(",", ":"), default=str))


def install_http_logging(app: Any, settings: HandoffSettings) -> None:
    """
    Enable request/response logging from settings:

    - `OPTION_HANDOFF_HTTP_LOG=1` enables the middleware
    - `OPTION_HANDOFF_HTTP_LOG_HEADERS=1` adds (redacted) headers
    - `OPTION_HANDOFF_HTTP_LOG_BODY_MAX_BYTES=4096` caps captured body bytes
    """
    if not settings.http_log:
        return
    app.add_middleware(
        HttpLoggingMiddleware,
        log_headers=settings.http_log_headers,
        max_body_bytes=settings.http_log_body_max_bytes,
    )
