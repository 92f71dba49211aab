"""
Request and result data models.

ChatRequest is what the dispatcher hands to an API client;
AnalysisResult is what the analyzer hands back to the caller.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from nullfake.models.review import Review

# Review id -> integer score (0-100 nominal)
ScoreMap = Dict[str, int]


@dataclass(frozen=True)
class ChatRequest:
    """
    A single chat completion request, independent of vendor.
    """
    system_prompt: str
    user_prompt: str
    max_tokens: int
    temperature: float = 0.0
    top_p: float = 0.1
    timeout: float = 120  # read timeout, seconds
    connect_timeout: float = 30

    @property
    def messages(self) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": self.user_prompt},
        ]

    def to_payload(self, model: str) -> Dict:
        """Chat completion request body for an OpenAI-compatible endpoint."""
        return {
            "model": model,
            "messages": self.messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "top_p": self.top_p,
        }


@dataclass
class AnalysisResult:
    """
    Scores obtained for a batch of reviews.
    Ids absent from detailed_scores could not be scored.
    """
    detailed_scores: ScoreMap = field(default_factory=dict)

    def missing_ids(self, reviews: Iterable[Review]) -> List[str]:
        """Ids of reviews that received no score."""
        return [r.id for r in reviews if r.id not in self.detailed_scores]

    def to_dict(self) -> Dict:
        return {"detailed_scores": dict(self.detailed_scores)}
