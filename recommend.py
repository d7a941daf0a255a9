"""Recommend unsolved Codeforces problems in the user's weakest tags."""
import random
import threading
from typing import Iterable, List, Optional, Sequence, Set

from collect import CodeforcesClient, CodeforcesError
from config import settings
from structs import Problem, RatingWindow
from utils import get_logger

logger = get_logger(__name__)

ALL_TAGS = "all"
RATING_WINDOWS = ("easier", "nearby", "harder")


class ProblemCatalog:
    """The global problem list, fetched on first use and kept for the session."""

    def __init__(self, client: Optional[CodeforcesClient] = None):
        self.client = client or CodeforcesClient()
        self._problems: Optional[List[Problem]] = None
        self._lock = threading.Lock()

    def problems(self) -> List[Problem]:
        with self._lock:
            if self._problems is None:
                try:
                    self._problems = self.client.problemset_problems()
                    logger.info("Loaded %d problems into the catalog", len(self._problems))
                except CodeforcesError as e:
                    # not cached, the next call tries again
                    logger.warning("Failed to fetch problems: %s", e)
                    return []
            return self._problems

    def clear(self) -> None:
        with self._lock:
            self._problems = None


def problem_url(problem: Problem) -> str:
    return f"{settings.CF_PROBLEM_URL}/{problem.contestId}/{problem.index}"


def in_rating_window(rating: int, target: int, window: RatingWindow) -> bool:
    if window == "nearby":
        return abs(rating - target) <= 200
    if window == "easier":
        return target - 400 <= rating < target
    if window == "harder":
        return target < rating <= target + 400
    raise ValueError(f"unknown rating window: {window!r}")


def recommend(problems: Iterable[Problem], weak_tags: Sequence[str], solved: Set[str],
              user_rating: Optional[int] = None, tag: str = ALL_TAGS,
              window: RatingWindow = "nearby", limit: Optional[int] = None,
              rng=None) -> List[Problem]:
    """Pick up to `limit` unsolved, rated problems matching the tag and rating window.

    The matches are shuffled on every call, so refreshing gives a new sample.
    Pass a seeded `random.Random` as `rng` for a reproducible order.
    """
    if window not in RATING_WINDOWS:
        raise ValueError(f"unknown rating window: {window!r}")
    limit = settings.RECOMMENDATION_LIMIT if limit is None else limit
    target = user_rating or settings.DEFAULT_TARGET_RATING
    weak = set(weak_tags)

    candidates = []
    for problem in problems:
        if problem.key in solved:
            continue
        if not problem.rating:
            continue
        # no contest means no problemset link
        if problem.contestId is None:
            continue
        if tag == ALL_TAGS:
            if not weak.intersection(problem.tags):
                continue
        elif tag not in problem.tags:
            continue
        if not in_rating_window(problem.rating, target, window):
            continue
        candidates.append(problem)

    (rng or random).shuffle(candidates)
    return candidates[:limit]
