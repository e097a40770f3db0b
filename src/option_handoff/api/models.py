from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from option_handoff.chooser import ConversationContext
from option_handoff.fields import FieldDescriptor
from option_handoff.options import message_content


class AgentThought(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    thought: str = ""


class AnswerBody(BaseModel):
    """A generated answer: plain content, or agent thoughts that replace it when present."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    content: Optional[str] = Field(default=None, description="Answer text as rendered in the chat")
    agent_thoughts: List[AgentThought] = Field(
        default_factory=list,
        alias="agentThoughts",
        description="Agent-mode answers; concatenated thoughts are scanned instead of `content`",
    )

    def scan_text(self) -> str:
        return message_content(self.content, self.agent_thoughts)


class ExtractOptionsRequest(AnswerBody):
    pass


class HandoffRequest(AnswerBody):
    """
    Choose an option and get sent to the destination form.

    Either `optionText` (used as-is) or `optionIndex` (looked up in the answer) is required.
    """

    option_index: Optional[str] = Field(default=None, alias="optionIndex")
    option_text: Optional[str] = Field(default=None, alias="optionText")
    context: Optional[ConversationContext] = None

    @model_validator(mode="before")
    @classmethod
    def _coerce_index(cls, data: Any) -> Any:
        # `optionIndex: 2` from JSON clients is the same as "2".
        if isinstance(data, dict):
            for k in ("optionIndex", "option_index"):
                v = data.get(k)
                if isinstance(v, int) and not isinstance(v, bool):
                    data = dict(data)
                    data[k] = str(v)
        return data

    @model_validator(mode="after")
    def _require_choice(self) -> "HandoffRequest":
        if self.option_text is None and not str(self.option_index or "").strip():
            raise ValueError("optionText or optionIndex is required")
        return self


class AutofillRequest(BaseModel):
    """Destination form state: its schema and the inputs entered so far."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    fields: List[FieldDescriptor] = Field(
        default_factory=list,
        description="Ordered form schema (`prompt_variables`)",
    )
    inputs: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _accept_prompt_variables(cls, data: Any) -> Any:
        if isinstance(data, dict) and "fields" not in data:
            pv = data.get("promptVariables") or data.get("prompt_variables")
            if isinstance(pv, list):
                data = dict(data)
                data["fields"] = pv
        return data
