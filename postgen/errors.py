# postgen/errors.py
"""
Provider error taxonomy.

Every failure coming out of the Gemini SDK (or out of our own parsing of its
output) is reduced to one of a handful of kinds. Call sites raise
``ProviderError``; routers map the kind to an HTTP status and a message.
"""
from __future__ import annotations

import re
from enum import Enum
from typing import List, Optional, Pattern, Tuple


class ErrorKind(str, Enum):
    AUTH_MISSING = "AuthMissing"
    AUTH_INVALID = "AuthInvalid"
    QUOTA_EXCEEDED = "QuotaExceeded"
    EMPTY_RESPONSE = "EmptyResponse"
    MALFORMED_OUTPUT = "MalformedOutput"
    UNKNOWN = "Unknown"


# Markers we put into our own messages so they classify back to the same kind
API_KEY_MISSING = "API_KEY_MISSING"
API_EMPTY_RESPONSE = "API_EMPTY_RESPONSE"
MALFORMED_OUTPUT = "MALFORMED_OUTPUT"

# Order matters: first match wins
_RULES: List[Tuple[ErrorKind, Pattern[str]]] = [
    (ErrorKind.AUTH_MISSING, re.compile(
        r"api[_ ]key[_ ]missing|missing (?:api )?key|no api[_ ]key|api[_ ]key (?:is )?not set",
        re.IGNORECASE,
    )),
    (ErrorKind.AUTH_INVALID, re.compile(
        r"\b40[13]\b|unauthori[sz]ed|unauthenticated|forbidden|permission[_ ]denied"
        r"|api key not valid|api[_ ]key[_ ]invalid|invalid api[_ ]key"
        r"|requested entity was not found|key[_ ]not[_ ]found",
        re.IGNORECASE,
    )),
    (ErrorKind.QUOTA_EXCEEDED, re.compile(
        r"\b429\b|rate[-_ ]?limit|quota|resource[_ ]exhausted|too many requests",
        re.IGNORECASE,
    )),
    (ErrorKind.EMPTY_RESPONSE, re.compile(
        r"api_empty_response|empty response|response body (?:is )?empty|empty body",
        re.IGNORECASE,
    )),
    (ErrorKind.MALFORMED_OUTPUT, re.compile(r"malformed[_ ]output", re.IGNORECASE)),
]

_ACTIONABLE = {ErrorKind.AUTH_MISSING, ErrorKind.AUTH_INVALID, ErrorKind.QUOTA_EXCEEDED}

RAW_MESSAGE_LIMIT = 200


def classify(message: Optional[str]) -> ErrorKind:
    """Map raw provider error text to an ErrorKind. Never raises."""
    if not message:
        return ErrorKind.UNKNOWN
    if not isinstance(message, str):
        try:
            message = str(message)
        except Exception:
            return ErrorKind.UNKNOWN
    for kind, pattern in _RULES:
        if pattern.search(message):
            return kind
    return ErrorKind.UNKNOWN


def is_actionable(kind: ErrorKind) -> bool:
    return kind in _ACTIONABLE


class ProviderError(Exception):
    """A classified failure of a generation call."""

    def __init__(self, raw_message: str, kind: Optional[ErrorKind] = None):
        super().__init__(raw_message)
        self.raw_message = raw_message
        self.kind = kind if kind is not None else classify(raw_message)

    @property
    def actionable(self) -> bool:
        return is_actionable(self.kind)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ProviderError":
        if isinstance(exc, ProviderError):
            return exc
        raw = str(exc) or exc.__class__.__name__
        return cls(raw)

    def __repr__(self) -> str:
        return f"ProviderError(kind={self.kind.value!r}, raw_message={self.raw_message!r})"


def _truncate(text: str, limit: int = RAW_MESSAGE_LIMIT) -> str:
    text = " ".join(text.split())
    return text if len(text) <= limit else text[: limit - 3] + "..."


def user_message(err: ProviderError) -> str:
    kind = err.kind
    if kind is ErrorKind.AUTH_MISSING:
        return "No API key is configured. Connect a Gemini API key and try again."
    if kind is ErrorKind.AUTH_INVALID:
        return "The API key was rejected or has no access to this model. Reconnect or replace the key."
    if kind is ErrorKind.QUOTA_EXCEEDED:
        return "The model quota or rate limit was reached. Wait a moment before generating again."
    if kind in (ErrorKind.EMPTY_RESPONSE, ErrorKind.MALFORMED_OUTPUT):
        return "The model returned an unusable response. Please try again."
    return f"Generation failed: {_truncate(err.raw_message)}"
