"""Side-by-side comparison of two Codeforces handles."""
from typing import Optional, Sequence

from collect import CodeforcesClient, CodeforcesError, USER_MESSAGE, join_all
from process import solved_problem_ids
from structs import Comparison, HandleStats, Metric, Submission, UserInfo
from utils import get_logger

logger = get_logger(__name__)


class ComparisonError(Exception):
    pass


def acceptance_percent(solved: int, total: int) -> int:
    # rounds half up, 12.5 -> 13
    if total <= 0:
        return 0
    return (200 * solved + total) // (2 * total)


def handle_stats(user: UserInfo, submissions: Sequence[Submission]) -> HandleStats:
    solved = len(solved_problem_ids(submissions))
    return HandleStats(
        user=user,
        solved_count=solved,
        total_submissions=len(submissions),
        acceptance_rate=acceptance_percent(solved, len(submissions)),
    )


def metric(label: str, value1, value2, suffix: str = "") -> Metric:
    if value1 > value2:
        winner = 1
    elif value1 < value2:
        winner = 2
    else:
        winner = None
    return Metric(label=label, value1=value1, value2=value2, winner=winner, suffix=suffix)


def build_comparison(first: HandleStats, second: HandleStats) -> Comparison:
    metrics = [
        metric("Rating", first.user.rating or 0, second.user.rating or 0),
        metric("Max Rating", first.user.maxRating or 0, second.user.maxRating or 0),
        metric("Problems Solved", first.solved_count, second.solved_count),
        metric("Acceptance Rate", first.acceptance_rate, second.acceptance_rate, suffix="%"),
    ]
    return Comparison(first=first, second=second, metrics=metrics)


def fetch_handle_stats(handle: str, client: CodeforcesClient) -> HandleStats:
    user = client.user_info(handle)
    submissions = client.user_status(handle)
    return handle_stats(user, submissions)


def compare_handles(handle1: str, handle2: str, client: Optional[CodeforcesClient] = None) -> Comparison:
    """Fetch both handles concurrently and pair the results.

    Either side failing aborts the comparison; nothing partial is returned.
    """
    handle1, handle2 = handle1.strip(), handle2.strip()
    if not handle1 or not handle2:
        raise ComparisonError("Please enter both handles")
    client = client or CodeforcesClient()

    try:
        first, second = join_all([
            lambda: fetch_handle_stats(handle1, client),
            lambda: fetch_handle_stats(handle2, client),
        ])
    except CodeforcesError as e:
        logger.warning("Comparison %s vs %s failed: %s", handle1, handle2, e)
        raise ComparisonError(USER_MESSAGE) from e

    return build_comparison(first, second)


def format_value(m: Metric, side: int) -> str:
    value = m.value1 if side == 1 else m.value2
    return f"{value}{m.suffix}"
