# postgen/lib/json_tools.py
"""
Extraction and repair of JSON emitted by a token-limited model.

The text model is asked for a JSON object, but what comes back may be wrapped
in a markdown fence, surrounded by prose, or cut off mid-token when the model
hits its output limit. ``parse_model_json`` turns any of those into a Python
value or raises ``ProviderError(MalformedOutput)``; it makes at most one
repair pass and never raises anything else.
"""
import json
import re
from typing import Any, List, Optional, Tuple

from postgen.errors import ErrorKind, MALFORMED_OUTPUT, ProviderError
from postgen.logger import get_logger

log = get_logger(__name__)

_FENCE_OPEN_RE = re.compile(r"^```[A-Za-z0-9_+-]*[ \t]*\n?")
_FENCE_CLOSE_RE = re.compile(r"\n?[ \t]*```$")
_CLOSERS = {"{": "}", "[": "]"}
# a key (with or without its colon) or a bare comma left at the end of an object
_DANGLING_KEY_RE = re.compile(r'([{,])\s*"(?:[^"\\]|\\.)*"\s*:?\s*$', re.DOTALL)
_TRAILING_COMMA_RE = re.compile(r",\s*$")
# a \uXXXX escape cut off before its fourth hex digit
_PARTIAL_UNICODE_RE = re.compile(r"(\\+)u[0-9a-fA-F]{0,3}$")


class _ScanResult:
    __slots__ = ("end", "stack", "in_string", "escape")

    def __init__(self, end: Optional[int], stack: List[str], in_string: bool, escape: bool):
        self.end = end              # index of the matching top-level closer, if found
        self.stack = stack          # openers still unclosed at end of text
        self.in_string = in_string
        self.escape = escape


def _malformed(detail: str) -> ProviderError:
    return ProviderError(f"{MALFORMED_OUTPUT}: {detail}", ErrorKind.MALFORMED_OUTPUT)


def strip_code_fence(text: str) -> str:
    s = text.strip()
    if s.startswith("```"):
        s = _FENCE_OPEN_RE.sub("", s, count=1)
    if s.endswith("```"):
        s = _FENCE_CLOSE_RE.sub("", s, count=1)
    return s.strip()


def _scan(s: str, start: int) -> _ScanResult:
    stack: List[str] = []
    in_string = False
    escape = False
    for i in range(start, len(s)):
        ch = s[i]
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _CLOSERS:
            stack.append(ch)
        elif ch in ("}", "]"):
            if not stack or _CLOSERS[stack[-1]] != ch:
                raise _malformed(f"unbalanced {ch!r} at offset {i}")
            stack.pop()
            if not stack:
                return _ScanResult(i, stack, False, False)
    return _ScanResult(None, stack, in_string, escape)


def _drop_trailing_commas(s: str) -> str:
    """Remove commas that directly precede a closer, ignoring string contents."""
    out: List[str] = []
    in_string = False
    escape = False
    for ch in s:
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            out.append(ch)
            continue
        if ch == '"':
            in_string = True
        elif ch in ("}", "]"):
            # walk back over whitespace to a pending comma
            j = len(out) - 1
            while j >= 0 and out[j].isspace():
                j -= 1
            if j >= 0 and out[j] == ",":
                del out[j]
        out.append(ch)
    return "".join(out)


def _close_truncated(fragment: str, scan: _ScanResult) -> str:
    repaired = fragment
    if scan.in_string:
        if scan.escape:
            repaired = repaired[:-1]
        else:
            m = _PARTIAL_UNICODE_RE.search(repaired)
            # odd run of backslashes: the last one starts the cut-off \uXXXX
            if m and len(m.group(1)) % 2 == 1:
                repaired = repaired[:m.start(1) + len(m.group(1)) - 1]
        repaired += '"'
    repaired = repaired.rstrip()
    if scan.stack and scan.stack[-1] == "{":
        repaired = _DANGLING_KEY_RE.sub(r"\1", repaired)
    repaired = _TRAILING_COMMA_RE.sub("", repaired)
    # innermost first
    for opener in reversed(scan.stack):
        repaired += _CLOSERS[opener]
    return repaired


def _locate(s: str) -> Tuple[int, _ScanResult]:
    starts = [i for i in (s.find("{"), s.find("[")) if i != -1]
    if not starts:
        raise _malformed("no JSON object or array in model output")
    start = min(starts)
    return start, _scan(s, start)


def _repair(s: str) -> str:
    start, scan = _locate(s)
    if scan.end is not None:
        return _drop_trailing_commas(s[start:scan.end + 1])
    log.warning("model output looks truncated (open=%s, in_string=%s); closing it", "".join(scan.stack), scan.in_string)
    return _drop_trailing_commas(_close_truncated(s[start:], scan))


def repair_json(text: str) -> str:
    """
    Return a string that is the model's JSON payload, closed up if it was
    truncated. Raises ProviderError(MalformedOutput) if no payload is found.
    """
    if not isinstance(text, str):
        raise _malformed(f"expected text, got {type(text).__name__}")
    return _repair(strip_code_fence(text))


def parse_model_json(text: Any) -> Any:
    """Parse model output into a Python value, repairing it at most once."""
    try:
        if not isinstance(text, str):
            raise _malformed(f"expected text, got {type(text).__name__}")
        s = strip_code_fence(text)
        try:
            return json.loads(s)
        except ValueError:
            pass

        repaired = _repair(s)
        try:
            return json.loads(repaired)
        except ValueError as e:
            raise _malformed(f"repair failed: {e}") from e
    except ProviderError:
        raise
    except Exception as e:
        raise _malformed(f"{e.__class__.__name__}: {e}") from e
