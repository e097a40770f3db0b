from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class FieldKind(str, Enum):
    SHORT_TEXT = "short-text"
    LONG_TEXT = "long-text"
    SINGLE_SELECT = "single-select"
    NUMBER = "number"
    FILE = "file"
    FILE_LIST = "file-list"


# Tags used by the app platform's form schema (`prompt_variables[].type`).
_WIRE_KINDS: Dict[str, FieldKind] = {
    "string": FieldKind.SHORT_TEXT,
    "text-input": FieldKind.SHORT_TEXT,
    "paragraph": FieldKind.LONG_TEXT,
    "select": FieldKind.SINGLE_SELECT,
}


def parse_field_kind(raw: Any) -> FieldKind:
    if isinstance(raw, FieldKind):
        return raw
    t = str(raw or "").strip().lower()
    if t in _WIRE_KINDS:
        return _WIRE_KINDS[t]
    return FieldKind(t)


class FieldDescriptor(BaseModel):
    """One input of the destination form, as supplied by its schema. Read-only here."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    key: str
    name: str = ""
    kind: FieldKind = Field(validation_alias=AliasChoices("kind", "type"))
    required: bool = False
    # Kind-specific constraints; carried through untouched.
    max_length: Optional[int] = Field(default=None, validation_alias=AliasChoices("max_length", "maxLength"))
    options: List[str] = Field(default_factory=list)
    upload_config: Dict[str, Any] = Field(
        default_factory=dict, validation_alias=AliasChoices("config", "upload_config")
    )

    @field_validator("kind", mode="before")
    @classmethod
    def _coerce_kind(cls, v: Any) -> FieldKind:
        return parse_field_kind(v)

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, v: Any) -> str:
        return "" if v is None else str(v)


# Lower rank wins.
RANK_LONG_TEXT = 0
RANK_TEXTUAL = 1
RANK_ANY = 2


def field_rank(field: FieldDescriptor) -> int:
    """
    - long-text fields first
    - then short-text fields, or any field whose name mentions "text"
    - then everything else
    """
    if field.kind == FieldKind.LONG_TEXT:
        return RANK_LONG_TEXT
    if field.kind == FieldKind.SHORT_TEXT or "text" in field.name.lower():
        return RANK_TEXTUAL
    return RANK_ANY


def resolve_target_field(fields: Sequence[FieldDescriptor]) -> Optional[FieldDescriptor]:
    """Best field to receive auto-filled text; ties go to the earliest field. None for an empty form."""
    if not fields:
        return None
    # min() keeps the first of equally ranked items.
    return min(fields, key=field_rank)


__all__ = [
    "FieldDescriptor",
    "FieldKind",
    "field_rank",
    "parse_field_kind",
    "resolve_target_field",
]
