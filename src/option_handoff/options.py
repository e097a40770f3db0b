from __future__ import annotations

import re
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict

from option_handoff.config import DEFAULT_DIRECTIVE_MARKER

# One numbered line: optional indent, digits, a period, at least one space, then the option text.
# `[0-9]` rather than `\d` so non-ASCII digits never count as option labels.
# `\r` and the Unicode line/paragraph separators end a line too, as they do for the chat client's regex engine.
_BREAKS = "\r" + chr(0x2028) + chr(0x2029)
OPTION_LINE_PATTERN = re.compile(
    rf"(?:^|(?<=[{_BREAKS}]))\s*([0-9]+)\.\s+([^\n{_BREAKS}]+)(?=[\n{_BREAKS}]|\Z)",
    re.MULTILINE,
)


class Option(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: str
    text: str


def message_content(content: Optional[str], agent_thoughts: Optional[Iterable[Any]] = None) -> str:
    """
    Text that gets scanned for options.

    Agent-mode answers carry their text in `agent_thoughts[].thought`; when any are
    present they are concatenated in order and the plain content is ignored.
    """
    thoughts = list(agent_thoughts or [])
    if thoughts:
        parts: List[str] = []
        for t in thoughts:
            if isinstance(t, dict):
                parts.append(str(t.get("thought") or ""))
            else:
                parts.append(str(getattr(t, "thought", "") or ""))
        return "".join(parts)
    return content or ""


def option_region(text: str, marker: str = DEFAULT_DIRECTIVE_MARKER) -> str:
    """Everything before the first line whose stripped text starts with `marker`."""
    lines = text.split("\n")
    for i, line in enumerate(lines):
        if marker and line.strip().startswith(marker):
            return "\n".join(lines[:i])
    return text


def extract_options(text: Optional[str], marker: str = DEFAULT_DIRECTIVE_MARKER) -> List[Option]:
    """
    Pull `N. text` lines out of a generated answer.

    Order is top-to-bottom as written (labels are kept verbatim, duplicates included).
    Lines at or after the directive marker are never considered.
    """
    if not text:
        return []
    region = option_region(text, marker)
    return [
        Option(index=m.group(1), text=m.group(2).strip())
        for m in OPTION_LINE_PATTERN.finditer(region)
    ]


def find_option(options: List[Option], index: str) -> Optional[Option]:
    wanted = str(index or "").strip()
    for opt in options:
        if opt.index == wanted:
            return opt
    return None


__all__ = [
    "OPTION_LINE_PATTERN",
    "Option",
    "extract_options",
    "find_option",
    "message_content",
    "option_region",
]
