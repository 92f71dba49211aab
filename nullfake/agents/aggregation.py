"""
Result Aggregation.

Merges the per-chunk score maps into a single map.
"""

import logging
from typing import Iterable, Optional

from nullfake.models.result import ScoreMap
from nullfake.utils.events import EventSink

logger = logging.getLogger(__name__)


def merge_score_maps(
    chunk_maps: Iterable[ScoreMap],
    events: Optional[EventSink] = None
) -> ScoreMap:
    """
    Union of chunk score maps, in the order given.

    Chunks partition the input so ids should not repeat; if one does,
    the later chunk wins and the collision is reported.

    Args:
        chunk_maps: Score maps, one per chunk
        events: Optional sink receiving score_collision events

    Returns:
        Merged score map
    """
    merged: ScoreMap = {}

    for index, chunk_map in enumerate(chunk_maps):
        for review_id, score in chunk_map.items():
            if review_id in merged:
                logger.warning(
                    f"Review {review_id} scored twice (chunk {index + 1}), "
                    f"replacing {merged[review_id]} with {score}"
                )
                if events is not None:
                    events.emit(
                        "score_collision",
                        level=logging.WARNING,
                        review_id=review_id,
                        chunk=index + 1
                    )
            merged[review_id] = score

    return merged
