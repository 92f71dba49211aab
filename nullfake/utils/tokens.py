"""
Token budget utility.

Sizes the max_tokens request parameter to the number of reviews in a batch.
"""

from typing import Optional

# Output tokens per {"id":"...","score":N} record
TOKENS_PER_REVIEW = 12
BUFFER_TOKENS_PER_REVIEW = 5
MAX_BUFFER_TOKENS = 1000

# Known completion limits. Models not listed are not capped.
MODEL_TOKEN_LIMITS = {
    "gpt-4": 4096,
    "gpt-4-0613": 4096,
    "gpt-4-32k": 32768,
    "gpt-4-32k-0613": 32768,
    "gpt-4-turbo": 4096,
    "gpt-4-turbo-preview": 4096,
    "gpt-4-1106-preview": 4096,
    "gpt-4-0125-preview": 4096,
    "gpt-4o": 16384,
    "gpt-4o-mini": 16384,
    "gpt-3.5-turbo": 4096,
    "gpt-3.5-turbo-16k": 16384,
    "gpt-3.5-turbo-0613": 4096,
    "gpt-3.5-turbo-16k-0613": 16384,
}


def estimate_max_tokens(review_count: int) -> int:
    """
    Estimate the output token ceiling for a batch of reviews.

    base = count * 12, plus a buffer of count * 5 capped at 1000.
    """
    review_count = max(0, review_count)
    base_tokens = review_count * TOKENS_PER_REVIEW
    buffer = min(MAX_BUFFER_TOKENS, review_count * BUFFER_TOKENS_PER_REVIEW)
    return base_tokens + buffer


def model_token_limit(model: Optional[str]) -> Optional[int]:
    """Completion token limit for a model id, or None when unknown."""
    if not model:
        return None
    return MODEL_TOKEN_LIMITS.get(model)


def max_tokens_for(review_count: int, model: Optional[str] = None) -> int:
    """Estimated budget, capped at the model's completion limit when known."""
    estimate = estimate_max_tokens(review_count)
    limit = model_token_limit(model)
    if limit is not None:
        return min(estimate, limit)
    return estimate
