from datetime import datetime, date, timedelta
import random
import pytz
from structs import Submission, Problem, UserInfo, RatingChange, TagStat, ActivityDay, HandleAnalysis
from typing import Dict, Iterable, List, Optional, Sequence, Set

from config import settings
from utils import get_logger

logger = get_logger(__name__)

local_tz = pytz.timezone(settings.TIMEZONE)

def submission_date(submission: Submission, tz=None) -> date:
    return datetime.fromtimestamp(submission.creationTimeSeconds, tz=tz or local_tz).date()

def today(now: Optional[datetime] = None, tz=None) -> date:
    tz = tz or local_tz
    if now is None:
        return datetime.now(tz).date()
    if now.tzinfo is None:
        now = pytz.utc.localize(now)
    return now.astimezone(tz).date()

def tag_statistics(submissions: Iterable[Submission]) -> List[TagStat]:
    counts: Dict[str, List[int]] = dict()
    for submission in submissions:
        for tag in submission.problem.tags:
            if tag not in counts:
                counts[tag] = [0, 0]
            counts[tag][1] += 1
            if submission.accepted:
                counts[tag][0] += 1

    result = []
    for tag, (accepted, total) in counts.items():
        rate = accepted / total if total > 0 else 0.0
        result.append(TagStat(name=tag, accepted=accepted, total=total, acceptance_rate=rate))
    return result

def weak_tags(tag_stats: Sequence[TagStat], count: Optional[int] = None) -> List[str]:
    """Tags with the lowest acceptance rate; ties keep first-seen order."""
    count = settings.WEAK_TAG_COUNT if count is None else count
    ranked = sorted(tag_stats, key=lambda t: t.acceptance_rate)
    return [t.name for t in ranked[:count]]

def solved_problem_ids(submissions: Iterable[Submission]) -> Set[str]:
    return {s.problem.key for s in submissions if s.accepted}

def activity_histogram(submissions: Iterable[Submission], now: Optional[datetime] = None,
                       days: Optional[int] = None, tz=None) -> Dict[date, int]:
    """Count submissions per calendar day over the trailing window ending today."""
    days = settings.ACTIVITY_WINDOW_DAYS if days is None else days
    end = today(now, tz)
    start = end - timedelta(days=days)

    freq_days: Dict[date, int] = dict()
    for submission in submissions:
        day = submission_date(submission, tz)
        if not (start <= day <= end):
            continue
        if day not in freq_days:
            freq_days[day] = 0
        freq_days[day] += 1
    return freq_days

def activity_days(histogram: Dict[date, int], now: Optional[datetime] = None,
                  days: Optional[int] = None, tz=None) -> List[ActivityDay]:
    days = settings.ACTIVITY_WINDOW_DAYS if days is None else days
    end = today(now, tz)
    start = end - timedelta(days=days)
    return [
        ActivityDay(day=start + timedelta(days=i), count=histogram.get(start + timedelta(days=i), 0))
        for i in range(days + 1)
    ]

def max_streak(days: Sequence[ActivityDay]) -> int:
    streak = 0
    best = 0
    for d in sorted(days, key=lambda d: d.day):
        if d.count > 0:
            streak += 1
            best = max(best, streak)
        else:
            streak = 0
    return best

def intensity_level(count: int) -> int:
    # 0 = no activity, 4 = busiest
    if count <= 0:
        return 0
    if count <= 2:
        return 1
    if count <= 5:
        return 2
    if count <= 10:
        return 3
    return 4

def heatmap_weeks(days: Sequence[ActivityDay]) -> List[List[Optional[ActivityDay]]]:
    """Lay days out in week columns, Sunday first, padding the edges with None."""
    weeks = []
    current: List[Optional[ActivityDay]] = []
    for i, d in enumerate(days):
        if i == 0:
            current.extend([None] * ((d.day.weekday() + 1) % 7))
        current.append(d)
        if len(current) == 7:
            weeks.append(current)
            current = []
    if current:
        current.extend([None] * (7 - len(current)))
        weeks.append(current)
    return weeks

def pick_random_problem(submissions: Sequence[Submission], rng=None) -> Optional[Problem]:
    solved = [s for s in submissions if s.accepted]
    if not solved:
        return None
    return (rng or random).choice(solved).problem

def pick_problem_by_rating(submissions: Sequence[Submission], rating: int, rng=None) -> Optional[Problem]:
    solved = [s for s in submissions if s.accepted and s.problem.rating == rating]
    if not solved:
        return None
    return (rng or random).choice(solved).problem

def analyze(user: Optional[UserInfo], submissions: Sequence[Submission],
            ratings: Sequence[RatingChange] = (), now: Optional[datetime] = None,
            warnings: Sequence[str] = ()) -> HandleAnalysis:
    tags = tag_statistics(submissions)
    histogram = activity_histogram(submissions, now)
    days = activity_days(histogram, now)

    analysis = HandleAnalysis(
        user=user,
        submissions=tuple(submissions),
        ratings=tuple(ratings),
        tag_stats=tuple(tags),
        weak_tags=tuple(weak_tags(tags)),
        solved=frozenset(solved_problem_ids(submissions)),
        activity=tuple(days),
        max_streak=max_streak(days),
        window_total=sum(histogram.values()),
        warnings=tuple(warnings),
    )
    logger.debug("Analyzed %s: %d tags, %d solved, streak %d",
                 user.handle if user else "?", len(tags), len(analysis.solved), analysis.max_streak)
    return analysis

def visible_sections(analysis: HandleAnalysis) -> Set[str]:
    """Dashboard sections that have something to show for this snapshot."""
    sections = {"profile", "pickers"}
    if analysis.tag_stats:
        sections.add("tags")
    if analysis.submissions:
        sections.add("heatmap")
    if analysis.weak_tags and analysis.submissions:
        sections.add("recommendations")
    if analysis.ratings:
        sections.add("ratings")
    return sections
