"""
Unit tests for the review and result data models.
"""

import pytest

from nullfake.models.result import AnalysisResult, ChatRequest
from nullfake.models.review import Review


def test_review_from_dict():
    review = Review.from_dict({
        "id": 17,
        "rating": "4",
        "review_title": "Nice",
        "review_text": "Does the job",
        "meta_data": {"verified_purchase": True, "is_vine_voice": False},
    })

    assert review.id == "17"
    assert review.rating == 4
    assert review.verified_purchase is True
    assert review.is_vine_voice is False


def test_review_from_dict_defaults():
    review = Review.from_dict({"id": "r1", "rating": 1})

    assert review.review_title == ""
    assert review.review_text == ""
    assert review.verified_purchase is False
    assert review.is_vine_voice is False


@pytest.mark.parametrize("value,expected", [
    (True, True),
    (False, False),
    ("true", True),
    ("True", True),
    ("false", False),
    ("False", False),
    ("1", True),
    ("0", False),
    ("", False),
    (1, True),
    (0, False),
    (None, False),
])
def test_review_from_dict_reads_string_flags(value, expected):
    review = Review.from_dict({
        "id": "r1",
        "rating": 3,
        "meta_data": {"verified_purchase": value, "is_vine_voice": value},
    })

    assert review.verified_purchase is expected
    assert review.is_vine_voice is expected


def test_review_rating_validation():
    with pytest.raises(ValueError):
        Review(id="r1", rating=0)
    with pytest.raises(ValueError):
        Review(id="r1", rating=6)


def test_review_is_immutable():
    review = Review(id="r1", rating=3)

    with pytest.raises(AttributeError):
        review.rating = 5


def test_analysis_result():
    reviews = [Review(id="a", rating=5), Review(id="b", rating=1)]
    result = AnalysisResult(detailed_scores={"a": 80})

    assert result.missing_ids(reviews) == ["b"]
    assert result.to_dict() == {"detailed_scores": {"a": 80}}


def test_chat_request_payload():
    request = ChatRequest(system_prompt="sys", user_prompt="user", max_tokens=100)

    assert request.to_payload("gpt-4o-mini") == {
        "model": "gpt-4o-mini",
        "messages": [
            {"role": "system", "content": "sys"},
            {"role": "user", "content": "user"},
        ],
        "temperature": 0.0,
        "max_tokens": 100,
        "top_p": 0.1,
    }


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
