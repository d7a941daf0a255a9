from pydantic import BaseModel, ConfigDict
from typing import List, Optional, Tuple, Literal, Union
from datetime import date

RatingWindow = Literal["nearby", "easier", "harder"]

class Problem(BaseModel):
    contestId: Optional[int] = None
    index: str
    name: str
    rating: Optional[int] = None
    tags: List[str] = []

    @property
    def key(self) -> str:
        return f"{self.contestId}-{self.index}"

class Submission(BaseModel):
    id: Optional[int] = None
    creationTimeSeconds: int
    problem: Problem
    programmingLanguage: Optional[str] = None
    # missing while the submission is still in the judging queue
    verdict: Optional[str] = ""

    @property
    def accepted(self) -> bool:
        return self.verdict == "OK"

class UserInfo(BaseModel):
    handle: str
    rating: Optional[int] = None
    maxRating: Optional[int] = None
    rank: Optional[str] = None
    maxRank: Optional[str] = None
    contribution: Optional[int] = None

class RatingChange(BaseModel):
    contestId: int
    contestName: str
    oldRating: int
    newRating: int
    rank: Optional[int] = None
    ratingUpdateTimeSeconds: Optional[int] = None

    @property
    def delta(self) -> int:
        return self.newRating - self.oldRating

class TagStat(BaseModel):
    name: str
    accepted: int
    total: int
    acceptance_rate: float

class ActivityDay(BaseModel):
    day: date
    count: int

class HandleStats(BaseModel):
    user: UserInfo
    solved_count: int
    total_submissions: int
    acceptance_rate: int

class Metric(BaseModel):
    label: str
    value1: Union[int, float]
    value2: Union[int, float]
    winner: Optional[int] = None
    suffix: str = ""

class Comparison(BaseModel):
    first: HandleStats
    second: HandleStats
    metrics: List[Metric]

class HandleAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    user: Optional[UserInfo]
    submissions: Tuple[Submission, ...] = ()
    ratings: Tuple[RatingChange, ...] = ()
    tag_stats: Tuple[TagStat, ...] = ()
    weak_tags: Tuple[str, ...] = ()
    solved: frozenset = frozenset()
    activity: Tuple[ActivityDay, ...] = ()
    max_streak: int = 0
    window_total: int = 0
    warnings: Tuple[str, ...] = ()
