"""
Entry Builder Operations

Turns a candidate and its two platform fetch outcomes into an unranked
LeaderboardEntry. Platform failures are represented as data on the entry
(status + error string) and never raised from here.
"""

from typing import Optional

from cpboard.constants import FetchErrorMessages, PlatformConstants
from cpboard.data_models.leaderboard import (
    Candidate, CodeforcesStats, CodeforcesView, FetchOutcome, FetchStatus,
    LeaderboardEntry, LeetCodeStats, LeetCodeView
)
from cpboard.utils.scoring import ScoreCalculator


def _clean(value: Optional[str]) -> Optional[str]:
    """Trim a string field; blank becomes None."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _exists(connected: bool, outcome: FetchOutcome) -> Optional[bool]:
    if not connected:
        return None
    return outcome.status == FetchStatus.OK


class EntryBuilder:
    """Builds normalized leaderboard entries from raw fetch results."""

    def __init__(self, calculator: Optional[ScoreCalculator] = None):
        self.calculator = calculator or ScoreCalculator()

    def build(
        self,
        candidate: Candidate,
        leetcode_outcome: FetchOutcome,
        codeforces_outcome: FetchOutcome
    ) -> LeaderboardEntry:
        """
        Assemble an entry for one candidate.

        Args:
            candidate: Account being scored
            leetcode_outcome: Result of the LeetCode fetch
            codeforces_outcome: Result of the Codeforces fetch

        Returns:
            LeaderboardEntry with rank=None
        """
        leetcode_username = _clean(candidate.leetcode_username)
        codeforces_handle = _clean(candidate.codeforces_handle)

        leetcode = self._leetcode_view(leetcode_username, leetcode_outcome)
        codeforces = self._codeforces_view(codeforces_handle, codeforces_outcome)

        lc_solved = leetcode.total_solved if leetcode.exists else 0
        cf_rating = codeforces.rating if codeforces.exists and codeforces.rating is not None else 0

        return LeaderboardEntry(
            identity=candidate.identity,
            display_name=_clean(candidate.display_name),
            leetcode_username=leetcode_username,
            codeforces_handle=codeforces_handle,
            leetcode=leetcode,
            codeforces=codeforces,
            components=self.calculator.components(lc_solved, cf_rating),
            score=self.calculator.score(lc_solved, cf_rating)
        )

    @staticmethod
    def _leetcode_view(username: Optional[str], outcome: FetchOutcome) -> LeetCodeView:
        connected = bool(username)
        if not connected:
            return LeetCodeView(connected=False, exists=None, status=FetchStatus.DISCONNECTED)

        stats = outcome.stats if outcome.status == FetchStatus.OK else None
        if isinstance(stats, LeetCodeStats):
            return LeetCodeView(
                connected=True,
                exists=True,
                status=FetchStatus.OK,
                username=stats.username or username,
                total_solved=max(0, stats.total_solved),
                easy=max(0, stats.easy),
                medium=max(0, stats.medium),
                hard=max(0, stats.hard)
            )

        return LeetCodeView(
            connected=True,
            exists=False,
            status=outcome.status if outcome.is_degraded else FetchStatus.UNAVAILABLE,
            username=username,
            total_solved=0,
            easy=0,
            medium=0,
            hard=0,
            error=outcome.error or FetchErrorMessages.FETCH_FAILED[PlatformConstants.LEETCODE]
        )

    @staticmethod
    def _codeforces_view(handle: Optional[str], outcome: FetchOutcome) -> CodeforcesView:
        connected = bool(handle)
        if not connected:
            return CodeforcesView(connected=False, exists=None, status=FetchStatus.DISCONNECTED)

        stats = outcome.stats if outcome.status == FetchStatus.OK else None
        if isinstance(stats, CodeforcesStats):
            return CodeforcesView(
                connected=True,
                exists=True,
                status=FetchStatus.OK,
                handle=stats.handle or handle,
                rank=stats.rank,
                rating=stats.rating if stats.rating is not None else 0,
                max_rank=stats.max_rank,
                max_rating=stats.max_rating
            )

        return CodeforcesView(
            connected=True,
            exists=False,
            status=outcome.status if outcome.is_degraded else FetchStatus.UNAVAILABLE,
            handle=handle,
            rating=0,
            error=outcome.error or FetchErrorMessages.FETCH_FAILED[PlatformConstants.CODEFORCES]
        )
