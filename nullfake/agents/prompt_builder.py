"""
Prompt Builder.

Serializes a batch of reviews into a compact scoring prompt and holds the
system prompts sent with each request.
"""

import logging
from typing import Iterable

from nullfake.models.review import Review
from nullfake.utils.text import truncate_text

logger = logging.getLogger(__name__)

TITLE_LIMIT = 100
BODY_LIMIT = 400

OUTPUT_CONTRACT = (
    'OUTPUT FORMAT: Return ONLY a valid JSON array AND NOTHING ELSE: '
    '[{"id":"review_id","score":numerical_score}]'
)

# Full rubric, used for single-batch requests
SYSTEM_PROMPT = f"""You are an expert Amazon review fraud detection specialist with 10 years of experience analyzing deceptive content patterns. You identify fake reviews through combined linguistic, behavioral, and contextual indicators.

DETECTION METHODOLOGY - Analyze each review using this structured approach:

1. SENTIMENT-RATING ALIGNMENT: Check if emotional tone matches numeric rating (major red flag: 5-star rating with negative sentiment)
2. SPECIFICITY ASSESSMENT: Genuine reviews include specific product details, usage timeframes, and personal context
3. LINGUISTIC PATTERNS: Detect excessive enthusiasm, generic praise, redundant terms, unnatural sentence structures
4. BEHAVIORAL INDICATORS: Consider verification status and reviewer program membership when available
5. AUTHENTICITY MARKERS: Look for natural language flow, specific problem-solution narratives, realistic expectations

SCORING GUIDELINES (0-100 scale):
- 0-20: Clearly authentic (specific details, balanced tone, natural language, verified purchase)
- 21-40: Likely authentic (minor inconsistencies but genuine indicators dominate)
- 41-60: Suspicious (mixed signals, some red flags present)
- 61-80: Likely fake (multiple red flags, generic content, sentiment misalignment)
- 81-100: Obviously fake (extreme language, no specifics, clear manipulation patterns)

RED FLAG INDICATORS:
- Generic superlatives without supporting details ("best ever", "amazing", "perfect")
- Sentiment-rating misalignment (negative text with 5 stars or positive text with 1 star)
- Excessive emotional language without specific experiences
- Lack of product-specific terminology or features
- Unrealistic perfection claims or extreme negativity without context
- Repetitive phrasing or unnatural sentence structures

EXAMPLES FOR CALIBRATION:

Review: "Used this phone case for 3 months during my hiking trips. Dropped my phone twice on rocky terrain - no damage. The grip texture works well with gloves. Only minor issue is it adds slight bulk to wireless charging."
Analysis: Specific timeframe, concrete usage context, detailed experience, balanced feedback. Score: 15

Review: "AMAZING PRODUCT!!! Everyone needs this! Best quality ever seen! 5 stars! Highly recommend to all customers! Perfect in every way!"
Analysis: Excessive enthusiasm, generic superlatives, no specific details, marketing-like language. Score: 85

Process each review independently. Use the full 0-100 range; most products have 15-40% fake reviews. Be appropriately suspicious while avoiding false positives on enthusiastic reviews that include specific details.

{OUTPUT_CONTRACT}"""

# Compact rubric, used for chunk requests
CHUNK_SYSTEM_PROMPT = (
    "You are an expert Amazon review authenticity detector. Be SUSPICIOUS and thorough - "
    "most products have 15-40% fake reviews. Score 0-100 where 0=definitely genuine, "
    "100=definitely fake. Use the full range: 20-40 for suspicious, 50-70 for likely fake, "
    "80+ for obvious fakes. "
    + OUTPUT_CONTRACT
)

PROMPT_HEADER = (
    'Score each review 0-100 (0=genuine, 100=fake). Be thorough and suspicious. '
    'Return JSON: [{"id":"X","score":Y}]\n\n'
    "HIGH FAKE RISK (70-100): Generic praise, no specifics, promotional language, "
    "perfect 5-stars with short text, non-verified purchases, obvious AI writing, "
    "repetitive phrases across reviews\n"
    "MEDIUM FAKE RISK (40-69): Overly positive without balance, lacks personal context, "
    "generic complaints, limited product knowledge\n"
    "LOW FAKE RISK (20-39): Some specifics but feels coached, minor inconsistencies, "
    "unusual language patterns\n"
    "GENUINE (0-19): Specific details, balanced pros/cons, personal context, natural language, "
    "verified purchase, realistic complaints, product knowledge\n\n"
    "Key: V=Verified purchase, U=Unverified, VN=Vine reviewer\n\n"
)


def _flags(review: Review) -> str:
    flags = "V" if review.verified_purchase else "U"
    if review.is_vine_voice:
        flags += " VN"
    return flags


def format_review(review: Review) -> str:
    """Render one review as a compact prompt block."""
    title = truncate_text(review.review_title, TITLE_LIMIT)
    body = truncate_text(review.review_text, BODY_LIMIT)

    return (
        f"ID:{review.id} {review.rating}/5 {_flags(review)}\n"
        f"T: {title}\n"
        f"R: {body}\n\n"
    )


def build_prompt(reviews: Iterable[Review]) -> str:
    """
    Build the user prompt for a batch of reviews.

    Args:
        reviews: Reviews to score

    Returns:
        Rubric header followed by one block per review
    """
    blocks = [format_review(review) for review in reviews]
    prompt = PROMPT_HEADER + "".join(blocks)

    logger.debug(f"Built prompt for {len(blocks)} reviews ({len(prompt)} characters)")
    return prompt
