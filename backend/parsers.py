# parsers.py
from __future__ import annotations
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple, Union

LOG = logging.getLogger("decode")

# ----------------------------
# Result types
# ----------------------------
@dataclass(frozen=True)
class Structured:
    value: Any
    strategy: str = field(default="", compare=False)

    ok = True

@dataclass(frozen=True)
class Unrecoverable:
    original_text: str
    reason: str

    ok = False

DecodedResult = Union[Structured, Unrecoverable]

# ----------------------------
# Regexes
# ----------------------------
# A fence marker. A `json` tag is always dropped; any other language tag only
# when it ends its line, so text glued to a closing fence survives.
FENCE_RE = re.compile(r"```(?:json\b|[A-Za-z0-9_+-]+(?=[ \t]*\r?\n))?[ \t]*", re.I)

def strip_fences(text: str) -> str:
    """Remove every markdown code fence marker and trim the rest."""
    return FENCE_RE.sub("", text or "").strip()

def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")

def _loads(candidate: str) -> Tuple[bool, Any]:
    try:
        return True, json.loads(candidate, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return False, None

# ----------------------------
# Strategies
# ----------------------------
# Each strategy takes fence-stripped text plus the (opener, closer) pair and
# returns (parsed, value). They run in order; the first success wins.
Strategy = Callable[[str, str, str], Tuple[bool, Any]]

def _direct(cleaned: str, opener: str, closer: str) -> Tuple[bool, Any]:
    return _loads(cleaned)

def _balanced(cleaned: str, opener: str, closer: str) -> Tuple[bool, Any]:
    """Scan from the first opener until its depth returns to zero.

    Only opener/closer characters are counted. Quoted strings are not tracked,
    so a literal brace inside a string value shifts the depth.
    """
    start = cleaned.find(opener)
    if start == -1:
        return False, None
    depth = 0
    for i in range(start, len(cleaned)):
        ch = cleaned[i]
        if ch == opener:
            depth += 1
        elif ch == closer:
            depth -= 1
            if depth == 0:
                return _loads(cleaned[start:i + 1])
    return False, None

def _greedy(cleaned: str, opener: str, closer: str) -> Tuple[bool, Any]:
    start = cleaned.find(opener)
    end = cleaned.rfind(closer)
    if start == -1 or end <= start:
        return False, None
    return _loads(cleaned[start:end + 1])

STRATEGIES: List[Tuple[str, Strategy]] = [
    ("direct", _direct),
    ("balanced", _balanced),
    ("greedy", _greedy),
]

def _decode(text: Optional[str], opener: str, closer: str) -> DecodedResult:
    original = text or ""
    if not original.strip():
        return Unrecoverable(original, "empty response")

    cleaned = strip_fences(original)
    for name, strategy in STRATEGIES:
        parsed, value = strategy(cleaned, opener, closer)
        if parsed:
            if name != "direct":
                LOG.info("Recovered JSON via %s scan (%d chars)", name, len(original))
            return Structured(value, name)

    LOG.warning("No JSON %s found in response (%d chars)", "array" if opener == "[" else "object", len(original))
    return Unrecoverable(original, f"no parsable JSON value between '{opener}' and '{closer}'")

def decode_object(text: Optional[str]) -> DecodedResult:
    """Recover a JSON object from model text (prose, fences, trailing junk)."""
    return _decode(text, "{", "}")

def decode_array(text: Optional[str]) -> DecodedResult:
    """Same as decode_object, but scanning for `[` ... `]`."""
    return _decode(text, "[", "]")

# ----------------------------
# Shape checks (semantic, run by callers after decoding)
# ----------------------------
def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)

def is_analysis(value: Any) -> bool:
    return isinstance(value, dict) and _is_number(value.get("readinessScore")) and isinstance(value.get("roadmap"), list)

def is_question_list(value: Any) -> bool:
    return isinstance(value, list) and len(value) > 0

def is_feedback(value: Any) -> bool:
    return isinstance(value, dict) and "score" in value
