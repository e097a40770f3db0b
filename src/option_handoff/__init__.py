"""
Option handoff: pick a numbered option out of a generated answer and carry it into
another form as an auto-fill value.

- Sender side: `options.extract_options`, `chooser.choose_option`
- Receiver side: `autofill.apply_autofill`
- HTTP surface: `option_handoff.api.main:app`
"""

from __future__ import annotations

from option_handoff.fields import FieldDescriptor, FieldKind, resolve_target_field
from option_handoff.handoff import HandoffPayload, build_handoff_url
from option_handoff.inputs import InputStore, merge_input
from option_handoff.options import Option, extract_options

__all__ = [
    "FieldDescriptor",
    "FieldKind",
    "HandoffPayload",
    "InputStore",
    "Option",
    "build_handoff_url",
    "extract_options",
    "merge_input",
    "resolve_target_field",
]
