"""Aggregate per-sentence results into a summary."""

import math

from .models import Result, Summary


def _effective_max(max_attempts_per_item) -> float:
    if isinstance(max_attempts_per_item, bool):
        return math.inf
    if isinstance(max_attempts_per_item, (int, float)) and 0 < max_attempts_per_item < math.inf:
        return max_attempts_per_item
    return math.inf


def compute_summary(results: list[Result], max_attempts_per_item=None) -> Summary:
    """Recompute the summary from the full result list.

    `max_attempts_per_item` is a positive number, or anything else
    (None, 'unlimited') for no limit. Results without a recorded attempt
    count are averaged as one attempt but are not counted as solved within
    the limit.
    """
    limit = _effective_max(max_attempts_per_item)
    solved = [r for r in results if r.ok]

    solved_within_max = sum(
        1 for r in solved if r.attempts is not None and r.attempts <= limit
    )
    first_try = sum(1 for r in solved if r.attempts == 1)
    reveals = sum(1 for r in results if r.revealed)

    if solved:
        total_attempts = sum(r.attempts if r.attempts is not None else 1 for r in solved)
        avg_attempts = round(total_attempts / len(solved), 2)
    else:
        avg_attempts = 0

    return Summary(
        total=len(results),
        solved_within_max=solved_within_max,
        first_try=first_try,
        reveals=reveals,
        avg_attempts=avg_attempts,
    )
