from __future__ import annotations


class HandoffError(Exception):
    """Base class for option-handoff failures. None of these are fatal to the host."""

    code = "handoff_error"


class PayloadEncodeError(HandoffError):
    code = "encode_failed"


class PayloadDecodeError(HandoffError):
    code = "decode_failed"


class UnknownOptionError(HandoffError):
    code = "unknown_option"
