"""
Unit tests for the token budget estimator.
"""

import pytest

from nullfake.utils.tokens import estimate_max_tokens, max_tokens_for, model_token_limit


@pytest.mark.parametrize("count,expected", [
    (0, 0),
    (1, 17),
    (10, 170),
    (25, 425),
    (50, 850),
    (200, 3400),
    (1000, 13000),
])
def test_estimate_formula(count, expected):
    assert estimate_max_tokens(count) == expected


def test_estimate_is_monotonic():
    estimates = [estimate_max_tokens(n) for n in range(0, 600)]

    assert all(a <= b for a, b in zip(estimates, estimates[1:]))


def test_negative_count_treated_as_zero():
    assert estimate_max_tokens(-5) == 0


def test_known_model_caps_budget():
    assert model_token_limit("gpt-4") == 4096
    assert max_tokens_for(400, "gpt-4") == 4096
    assert max_tokens_for(10, "gpt-4") == 170


def test_unknown_model_is_not_capped():
    assert model_token_limit("some-new-model") is None
    assert model_token_limit(None) is None
    assert max_tokens_for(400, "some-new-model") == estimate_max_tokens(400)


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
