"""Repair and re-parse of malformed or truncated JSON produced by a model.

Model output is often wrapped in markdown fences, preceded by prose, missing
commas between objects, or cut off mid-object at the provider's token limit.
``repair_and_parse`` applies a fixed set of textual repairs, tries to parse,
and on failure cuts the candidate back to its last closing brace and tries
again, converging on the largest valid prefix.
"""

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from nexus.domain.errors import ExtractionFailure
from nexus.logger import get_logger

logger = get_logger(__name__)

MAX_REPAIR_ATTEMPTS = 50
MIN_CANDIDATE_LENGTH = 10

_FENCE = re.compile(r"```(?:json|JSON)?")
_JSON_START = re.compile(r"[{\[]")

_COMMA_SEAMS = (
    # Objects in an array: } { -> }, {
    (re.compile(r"}\s*{"), "}, {"),
    # Arrays in an array: ] [ -> ], [
    (re.compile(r"]\s*\["), "], ["),
    # String value followed by the next key: "val" "key" -> "val", "key"
    (re.compile(r'"\s+"(?=\w)'), '", "'),
    # Number/bool/null value followed by the next key
    (re.compile(r'(\d+|true|false|null)\s+"(?=\w)'), r'\1, "'),
    # Closed object/array followed by the next key: ] "key" -> ], "key"
    (re.compile(r'([}\]])\s*"(?=\w)'), r'\1, "'),
)

_CLOSERS = {"{": "}", "[": "]"}


class RepairState(Enum):
    """States of the bounded repair loop."""

    REPAIRING = "repairing"
    PARSING = "parsing"
    TRUNCATING = "truncating"
    SUCCESS = "success"
    FAIL = "fail"


@dataclass(frozen=True)
class RepairResult:
    """Parsed value plus how much backtracking it took."""

    value: Any
    attempts: int
    text: str

    @property
    def recovered(self) -> bool:
        """True when the first parse failed and truncation was needed."""
        return self.attempts > 0


def strip_to_json(text: str) -> Optional[str]:
    """Drop markdown fences and any prose before the first brace or bracket.

    Returns:
        The candidate JSON text, or None when there is no brace or bracket
    """
    cleaned = _FENCE.sub("", text).strip()
    match = _JSON_START.search(cleaned)
    if match is None:
        return None
    return cleaned[match.start():].rstrip()


def repair_json(text: str) -> str:
    """Apply one pass of textual repairs to a JSON candidate.

    A candidate that already parses is returned untouched, since the seam
    patterns cannot tell string contents from structure.
    """
    cleaned = strip_to_json(text)
    if cleaned is None:
        return text.strip()
    if _try_parse(cleaned)[0]:
        return cleaned

    for pattern, replacement in _COMMA_SEAMS:
        cleaned = pattern.sub(replacement, cleaned)

    # A string cut off mid-value leaves an odd number of unescaped quotes
    quote_count = cleaned.count('"') - cleaned.count('\\"')
    if quote_count % 2 != 0:
        cleaned += '"'

    cleaned = cleaned.rstrip()
    if cleaned.endswith(","):
        cleaned = cleaned[:-1]

    return cleaned + _closing_suffix(cleaned)


def _closing_suffix(text: str) -> str:
    """Closers for every brace/bracket still open at the end of ``text``."""
    stack: list[str] = []
    in_string = False
    escaped = False
    for char in text:
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char in _CLOSERS:
            stack.append(char)
        elif char in "}]" and stack and _CLOSERS[stack[-1]] == char:
            stack.pop()
    return "".join(_CLOSERS[opener] for opener in reversed(stack))


def _try_parse(text: str) -> tuple[bool, Any]:
    try:
        return True, json.loads(text)
    except ValueError:
        return False, None


def repair_and_parse(
    text: str,
    max_attempts: int = MAX_REPAIR_ATTEMPTS,
    min_length: int = MIN_CANDIDATE_LENGTH,
) -> RepairResult:
    """Repair model output and parse it, backtracking over truncated tails.

    Each attempt repairs the current candidate and parses it. When parsing
    fails the candidate is cut just after its last ``}`` (excluding its
    final character, so it always shrinks) and the loop repeats.

    Args:
        text: Raw model output claimed to contain JSON
        max_attempts: Parse attempts allowed before giving up
        min_length: Candidates shorter than this are not worth parsing

    Returns:
        RepairResult; ``attempts`` is 0 when the first parse succeeded

    Raises:
        ExtractionFailure: If no valid JSON could be recovered
    """
    candidate = strip_to_json(text)
    if candidate is None:
        raise ExtractionFailure("Model output contains no JSON object or array", attempts=0)

    state = RepairState.REPAIRING
    attempt = 0
    repaired = ""
    value: Any = None
    reason = ""

    while True:
        if state is RepairState.REPAIRING:
            repaired = repair_json(candidate)
            state = RepairState.PARSING

        elif state is RepairState.PARSING:
            parsed, value = _try_parse(repaired)
            state = RepairState.SUCCESS if parsed else RepairState.TRUNCATING

        elif state is RepairState.TRUNCATING:
            attempt += 1
            cut = candidate.rfind("}", 0, len(candidate) - 1)
            if attempt >= max_attempts:
                reason = f"gave up after {attempt} attempts"
                state = RepairState.FAIL
            elif cut == -1:
                reason = "no complete object left to fall back to"
                state = RepairState.FAIL
            elif cut + 1 < min_length:
                reason = f"candidate shrank below {min_length} characters"
                state = RepairState.FAIL
            else:
                candidate = candidate[: cut + 1]
                logger.debug("Repair attempt %d: truncated candidate to %d chars", attempt, len(candidate))
                state = RepairState.REPAIRING

        elif state is RepairState.SUCCESS:
            if attempt:
                logger.info("Recovered model JSON after %d repair attempt(s)", attempt)
            return RepairResult(value=value, attempts=attempt, text=repaired)

        else:
            raise ExtractionFailure(f"Could not repair model JSON: {reason}", attempts=attempt)
