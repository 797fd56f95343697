"""
Leaderboard data models for the competitive programming leaderboard.

Provides immutable data transfer objects for candidate accounts, per-platform
fetch outcomes and ranked leaderboard results. Nothing here is persisted; every
object lives for a single aggregation pass.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class Candidate:
    """An account eligible for the leaderboard."""
    identity: str
    leetcode_username: Optional[str] = None
    codeforces_handle: Optional[str] = None
    display_name: Optional[str] = None

    @property
    def has_connected_platform(self) -> bool:
        return bool((self.leetcode_username or "").strip()) or bool((self.codeforces_handle or "").strip())


@dataclass(frozen=True)
class LeetCodeStats:
    """Solved counts for a LeetCode user."""
    username: str
    total_solved: int = 0
    easy: int = 0
    medium: int = 0
    hard: int = 0


@dataclass(frozen=True)
class CodeforcesStats:
    """Rating snapshot for a Codeforces user."""
    handle: str
    rank: Optional[str] = None
    rating: Optional[int] = None
    max_rank: Optional[str] = None
    max_rating: Optional[int] = None


PlatformStats = Union[LeetCodeStats, CodeforcesStats]


class FetchStatus(Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"
    DISCONNECTED = "disconnected"


@dataclass(frozen=True)
class FetchOutcome:
    """Tagged result of one platform fetch."""
    status: FetchStatus
    stats: Optional[PlatformStats] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, stats: PlatformStats) -> "FetchOutcome":
        return cls(FetchStatus.OK, stats=stats)

    @classmethod
    def not_found(cls, error: str) -> "FetchOutcome":
        return cls(FetchStatus.NOT_FOUND, error=error)

    @classmethod
    def unavailable(cls, error: str) -> "FetchOutcome":
        return cls(FetchStatus.UNAVAILABLE, error=error)

    @classmethod
    def disconnected(cls) -> "FetchOutcome":
        return cls(FetchStatus.DISCONNECTED)

    @property
    def is_degraded(self) -> bool:
        return self.status in (FetchStatus.NOT_FOUND, FetchStatus.UNAVAILABLE)


@dataclass(frozen=True)
class LeetCodeView:
    """Normalized LeetCode section of a leaderboard entry."""
    connected: bool
    exists: Optional[bool]
    status: FetchStatus
    username: Optional[str] = None
    total_solved: Optional[int] = None
    easy: Optional[int] = None
    medium: Optional[int] = None
    hard: Optional[int] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'connected': self.connected,
            'exists': self.exists,
            'status': self.status.value,
            'username': self.username,
            'totalSolved': self.total_solved,
            'easy': self.easy,
            'medium': self.medium,
            'hard': self.hard,
        }
        if self.error:
            data['error'] = self.error
        return data


@dataclass(frozen=True)
class CodeforcesView:
    """Normalized Codeforces section of a leaderboard entry."""
    connected: bool
    exists: Optional[bool]
    status: FetchStatus
    handle: Optional[str] = None
    rank: Optional[str] = None
    rating: Optional[int] = None
    max_rank: Optional[str] = None
    max_rating: Optional[int] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'connected': self.connected,
            'exists': self.exists,
            'status': self.status.value,
            'handle': self.handle,
            'rank': self.rank,
            'rating': self.rating,
            'maxRank': self.max_rank,
            'maxRating': self.max_rating,
        }
        if self.error:
            data['error'] = self.error
        return data


@dataclass(frozen=True)
class ScoringWeights:
    """Active scoring configuration."""
    lc_weight: float = 1.0
    cf_weight: float = 1.0
    cf_baseline: float = 800

    def to_dict(self) -> Dict[str, Any]:
        return {
            'lcWeight': self.lc_weight,
            'cfWeight': self.cf_weight,
            'cfBaseline': self.cf_baseline,
        }


@dataclass(frozen=True)
class ScoreComponents:
    """Inputs that produced an entry's score."""
    lc_solved: int
    cf_rating: int
    cf_adjusted_rating: float
    lc_weight: float
    cf_weight: float
    cf_baseline: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'lcSolved': self.lc_solved,
            'cfRating': self.cf_rating,
            'cfAdjRating': self.cf_adjusted_rating,
            'lcWeight': self.lc_weight,
            'cfWeight': self.cf_weight,
            'cfBaseline': self.cf_baseline,
        }


@dataclass(frozen=True)
class LeaderboardEntry:
    """Single leaderboard row. rank is None until the entry has been ranked."""
    identity: str
    display_name: Optional[str]
    leetcode_username: Optional[str]
    codeforces_handle: Optional[str]
    leetcode: LeetCodeView
    codeforces: CodeforcesView
    components: ScoreComponents
    score: float
    rank: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'rank': self.rank,
            'score': self.score,
            'identity': self.identity,
            'displayName': self.display_name,
            'leetcodeUsername': self.leetcode_username,
            'codeforcesHandle': self.codeforces_handle,
            'leetcode': self.leetcode.to_dict(),
            'codeforces': self.codeforces.to_dict(),
            'components': self.components.to_dict(),
        }


@dataclass(frozen=True)
class LeaderboardPage:
    """Paginated leaderboard data."""
    entries: List[LeaderboardEntry]
    total_candidates: int
    limit: int
    offset: int
    compute_duration_ms: int
    weights: ScoringWeights
    updated_at: str

    @property
    def returned_count(self) -> int:
        return len(self.entries)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'entries': [entry.to_dict() for entry in self.entries],
            'totalCandidates': self.total_candidates,
            'returnedCount': self.returned_count,
            'limit': self.limit,
            'offset': self.offset,
            'computeDurationMs': self.compute_duration_ms,
            'updatedAt': self.updated_at,
            'weights': self.weights.to_dict(),
        }


@dataclass(frozen=True)
class MyRankResult:
    """Outcome of a single-user rank lookup."""
    found: bool
    index: Optional[int] = None
    total_candidates: Optional[int] = None
    entry: Optional[LeaderboardEntry] = None
    surrounding: List[LeaderboardEntry] = field(default_factory=list)
    window_start: Optional[int] = None
    window_end: Optional[int] = None
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        if not self.found:
            return {'found': False, 'message': self.message}
        return {
            'found': True,
            'index': self.index,
            'totalCandidates': self.total_candidates,
            'entry': self.entry.to_dict(),
            'window': {'start': self.window_start, 'end': self.window_end},
            'surrounding': [entry.to_dict() for entry in self.surrounding],
        }
