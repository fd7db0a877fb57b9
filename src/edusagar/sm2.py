"""SM-2 style interval and ease factor update."""

MIN_EASE_FACTOR = 1.3
PASSING_QUALITY = 3


def sm2_update(
    quality: int,
    ease_factor: float,
    interval: int,
    repetitions: int = 0,
) -> dict:
    """Calculate next review parameters for a flashcard.

    Args:
        quality: Rating 0-5 (0=complete blackout, 5=perfect). 3 and up passes.
        ease_factor: Current ease factor (minimum 1.3)
        interval: Current interval in days
        repetitions: Number of consecutive passing reviews

    Returns:
        Dict with updated interval, repetitions, ease_factor.
    """
    new_ef = ease_factor + (0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02))
    new_ef = max(MIN_EASE_FACTOR, new_ef)

    if quality >= PASSING_QUALITY:
        # Grows from the ease factor the card had before this review
        new_interval = max(1, round(interval * ease_factor))
        new_repetitions = repetitions + 1
    else:
        new_interval = 1
        new_repetitions = 0

    return {
        "interval": new_interval,
        "repetitions": new_repetitions,
        "ease_factor": round(new_ef, 2),
    }
