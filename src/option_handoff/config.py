from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_DIRECTIVE_MARKER = "> 指令："
AUTOFILL_PARAM = "autoFillText"


def _env_bool(name: str, default: bool = False) -> bool:
    v = (os.getenv(name) or "").strip().lower()
    if not v:
        return default
    return v in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_str(name: str, default: str = "") -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip()


@dataclass(frozen=True)
class HandoffSettings:
    """
    Deployment-time settings.

    - `workflow_path`: destination path template (opaque; only a leading `/` is normalized)
    - `origin`: scheme+host override; when unset the caller's origin is used
    - `directive_marker`: line prefix that ends the option-bearing region of an answer
    """

    workflow_path: str = ""
    origin: Optional[str] = None
    directive_marker: str = DEFAULT_DIRECTIVE_MARKER
    http_log: bool = False
    http_log_headers: bool = False
    http_log_body_max_bytes: int = 4096


def load_dotenv_files(root: Optional[Path] = None) -> None:
    """Load `.env` then `.env.local` (local dev convenience). Existing env vars win."""
    from dotenv import load_dotenv

    base = root or Path.cwd()
    load_dotenv(base / ".env", override=False)
    load_dotenv(base / ".env.local", override=False)


def load_settings() -> HandoffSettings:
    origin = _env_str("OPTION_HANDOFF_ORIGIN").rstrip("/") or None
    marker = os.getenv("OPTION_HANDOFF_DIRECTIVE_MARKER")
    return HandoffSettings(
        workflow_path=_env_str("OPTION_HANDOFF_WORKFLOW_PATH"),
        origin=origin,
        directive_marker=marker if marker else DEFAULT_DIRECTIVE_MARKER,
        http_log=_env_bool("OPTION_HANDOFF_HTTP_LOG", default=False),
        http_log_headers=_env_bool("OPTION_HANDOFF_HTTP_LOG_HEADERS", default=False),
        http_log_body_max_bytes=_env_int("OPTION_HANDOFF_HTTP_LOG_BODY_MAX_BYTES", default=4096),
    )
