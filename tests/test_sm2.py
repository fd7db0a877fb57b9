# tests/test_sm2.py
from edusagar.sm2 import sm2_update


def test_sm2_first_review_correct():
    """A new card with interval 0 moves to 1 day."""
    result = sm2_update(quality=4, ease_factor=2.5, interval=0, repetitions=0)
    assert result["interval"] == 1
    assert result["repetitions"] == 1
    assert result["ease_factor"] == 2.5


def test_sm2_interval_grows_by_ease_factor():
    result = sm2_update(quality=4, ease_factor=2.5, interval=6, repetitions=2)
    assert result["interval"] == 15  # round(6 * 2.5)
    assert result["repetitions"] == 3


def test_sm2_uses_ease_factor_before_update():
    result = sm2_update(quality=5, ease_factor=2.0, interval=10)
    assert result["interval"] == 20
    assert result["ease_factor"] == 2.1


def test_sm2_incorrect_resets():
    """Quality < 3 resets repetitions and interval."""
    result = sm2_update(quality=1, ease_factor=2.5, interval=30, repetitions=5)
    assert result["repetitions"] == 0
    assert result["interval"] == 1
    assert result["ease_factor"] == 1.96


def test_sm2_ease_factor_minimum():
    """Ease factor never drops below 1.3."""
    result = sm2_update(quality=0, ease_factor=1.3, interval=0)
    assert result["ease_factor"] == 1.3


def test_sm2_easy_increases_ease():
    result = sm2_update(quality=5, ease_factor=2.5, interval=6)
    assert result["ease_factor"] > 2.5


def test_sm2_hard_pass_lowers_ease_but_grows_interval():
    result = sm2_update(quality=3, ease_factor=2.5, interval=4, repetitions=2)
    assert result["ease_factor"] == 2.36
    assert result["interval"] == 10
