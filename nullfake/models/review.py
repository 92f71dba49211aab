"""
Review data model.

Represents a product review submitted for authenticity scoring.
"""

from dataclasses import dataclass
from typing import Any, Dict, Union

Text = Union[str, bytes]

_TRUE_STRINGS = ("true", "1", "yes", "y")


def _as_flag(value: Any) -> bool:
    """Read a meta_data flag; JSON strings like "false" are not truthy."""
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


@dataclass(frozen=True)
class Review:
    """
    Product review as received from the caller.
    Text fields are kept raw and may carry malformed encoding.
    """
    id: str  # Unique identifier for the review
    rating: int  # 1-5 star rating
    review_title: Text = ""
    review_text: Text = ""
    verified_purchase: bool = False
    is_vine_voice: bool = False  # Amazon Vine reviewer program

    def __post_init__(self):
        # Validate rating
        if not (1 <= self.rating <= 5):
            raise ValueError(f"Invalid rating: {self.rating}. Must be 1-5")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Review":
        """
        Build a review from the raw dict shape:
        {id, rating, review_title, review_text, meta_data: {verified_purchase, is_vine_voice}}
        """
        meta_data = data.get("meta_data") or {}
        return cls(
            id=str(data["id"]),
            rating=int(data["rating"]),
            review_title=data.get("review_title") or "",
            review_text=data.get("review_text") or "",
            verified_purchase=_as_flag(meta_data.get("verified_purchase", False)),
            is_vine_voice=_as_flag(meta_data.get("is_vine_voice", False))
        )
