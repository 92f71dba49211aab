"""
Response Parser.

Extracts {id, score} records from free-form model output. Handles
markdown fences, output truncated by the max_tokens limit, and
malformed JSON through staged fallbacks.
"""

import json
import logging
import re
from enum import Enum
from typing import Any, Iterable, Optional, Tuple

from nullfake.models.result import ScoreMap
from nullfake.utils.events import EventSink

logger = logging.getLogger(__name__)

_LEADING_FENCE = re.compile(r"^\s*```(?:json)?\s*", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\s*```\s*$")
_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")
_SCORE_RECORD = re.compile(r'\{\s*"id"\s*:\s*"([^"]+)"\s*,\s*"score"\s*:\s*(-?\d+)\s*\}')


class ParseStage(str, Enum):
    """Which extraction stage produced the scores."""
    FULL = "full"
    REPAIRED = "repaired"
    PATTERN = "pattern"
    EMPTY = "empty"


def strip_code_fences(content: str) -> str:
    """Remove leading ```json / ``` and trailing ``` markers."""
    content = _LEADING_FENCE.sub("", content)
    content = _TRAILING_FENCE.sub("", content)
    return content.strip()


def extract_json_array(content: str) -> Optional[str]:
    """
    Locate the candidate JSON array in the content.

    Greedy match from the first '[' to the last ']'. When the output was
    cut off before any ']', everything from the first '[' is returned.
    """
    match = _JSON_ARRAY.search(content)
    if match:
        return match.group(0)

    start = content.find("[")
    if start == -1:
        return None
    return content[start:]


def _coerce_score(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


def _scores_from_records(records: Iterable[Any]) -> ScoreMap:
    scores = {}
    for record in records:
        if not isinstance(record, dict):
            continue
        if record.get("id") is None or record.get("score") is None:
            continue
        score = _coerce_score(record["score"])
        if score is None:
            logger.debug(f"Skipping non-numeric score for {record['id']}: {record['score']!r}")
            continue
        scores[str(record["id"])] = score
    return scores


def _load_array(candidate: str) -> Optional[list]:
    try:
        results = json.loads(candidate)
    except ValueError:
        return None
    return results if isinstance(results, list) else None


def _repair_candidates(candidate: str):
    """Yield progressively more aggressive repairs of a truncated array."""
    repaired = candidate.rstrip().rstrip(",").rstrip()
    if not repaired.endswith("]"):
        repaired = repaired + "]"
    yield repaired

    # Drop the incomplete trailing record and close the array
    last_record_end = candidate.rfind("}")
    if last_record_end != -1:
        yield candidate[:last_record_end + 1] + "]"


def parse_with_stage(content: Optional[str]) -> Tuple[ScoreMap, ParseStage]:
    """
    Parse model output into a score map and report the stage that succeeded.

    Never raises; an empty map means nothing could be recovered.
    """
    if not content:
        return {}, ParseStage.EMPTY

    content = strip_code_fences(content)
    candidate = extract_json_array(content)
    if candidate is None:
        logger.warning("No JSON array found in model response")
        return {}, ParseStage.EMPTY

    # Stage 1: strict parse
    results = _load_array(candidate)
    if results is not None:
        return _scores_from_records(results), ParseStage.FULL

    # Stage 2: repair truncation
    logger.info("Complete JSON parse failed, attempting to repair partial response")
    for repaired in _repair_candidates(candidate):
        results = _load_array(repaired)
        if results is not None:
            return _scores_from_records(results), ParseStage.REPAIRED

    # Stage 3: pattern rescue
    scores = {
        record_id: int(score)
        for record_id, score in _SCORE_RECORD.findall(content)
    }
    if scores:
        return scores, ParseStage.PATTERN

    return {}, ParseStage.EMPTY


def parse_scores(content: Optional[str], events: Optional[EventSink] = None) -> ScoreMap:
    """
    Extract a review id -> score map from raw model output.

    Args:
        content: Message content returned by the model (may be fenced or truncated)
        events: Optional sink receiving a parse_stage event

    Returns:
        Score map; empty when nothing could be parsed
    """
    scores, stage = parse_with_stage(content)

    preview = (content or "")[:200]
    logger.debug(f"Raw model response content: {preview!r}")
    logger.info(f"Parsed {len(scores)} scores from model response (stage={stage.value})")

    if events is not None:
        level = logging.INFO if stage == ParseStage.FULL else logging.WARNING
        events.emit("parse_stage", level=level, stage=stage.value, scores=len(scores))

    return scores
