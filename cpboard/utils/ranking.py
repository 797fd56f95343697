"""
Shared ranking utilities for the leaderboard engine.

Provides the single sort order and dense-rank pass used by both the page and
the rank lookup, plus the parameter clamping those operations share.
"""

from dataclasses import replace
from typing import Any, List, Sequence, Tuple

from cpboard.data_models.leaderboard import LeaderboardEntry


class RankingUtility:
    """Shared ranking logic for consistent ordering across operations."""

    @staticmethod
    def sort_key(entry: LeaderboardEntry) -> Tuple[float, int, int, str]:
        """
        Sort key for the leaderboard total order.

        Precedence: score desc, raw Codeforces rating desc, LeetCode solved desc,
        then the first of codeforces handle / leetcode username / identity,
        case-insensitive ascending. The tie-break rating is the raw rating, not
        the baseline-adjusted value used in the score.
        """
        name = entry.codeforces_handle or entry.leetcode_username or entry.identity or ""
        return (
            -entry.score,
            -entry.components.cf_rating,
            -entry.components.lc_solved,
            name.lower(),
        )

    @staticmethod
    def rank_entries(entries: Sequence[LeaderboardEntry]) -> List[LeaderboardEntry]:
        """
        Sort entries and assign dense ranks (1, 1, 2, 3, ...).

        Rank only changes when the score changes; secondary sort fields order
        tied entries but never split their rank.

        Args:
            entries: Unranked entries in any order

        Returns:
            New list of ranked copies in leaderboard order
        """
        ordered = sorted(entries, key=RankingUtility.sort_key)

        ranked = []
        last_score = None
        last_rank = 0
        for entry in ordered:
            if last_score is None or entry.score != last_score:
                last_rank += 1
                last_score = entry.score
            ranked.append(replace(entry, rank=last_rank))
        return ranked

    @staticmethod
    def find_index(entries: Sequence[LeaderboardEntry], identity: str) -> int:
        """Position of the entry matching identity (case-insensitive), or -1."""
        target = (identity or "").strip().lower()
        if not target:
            return -1
        for index, entry in enumerate(entries):
            if entry.identity and entry.identity.lower() == target:
                return index
        return -1

    @staticmethod
    def window_bounds(index: int, window: int, total: int) -> Tuple[int, int]:
        """Half-open [start, end) slice covering index +/- window within [0, total)."""
        start = max(0, index - window)
        end = min(total, index + window + 1)
        return start, end

    @staticmethod
    def clamp_int(value: Any, default: int, minimum: int, maximum: int) -> int:
        """
        Parse an integer parameter and clamp it into [minimum, maximum].

        Accepts ints, floats (truncated) and numeric strings. Missing or
        unparsable values yield the default.
        """
        if value is None or isinstance(value, bool):
            return default
        try:
            number = int(value)
        except (TypeError, ValueError, OverflowError):
            try:
                number = int(float(str(value).strip()))
            except (TypeError, ValueError, OverflowError):
                return default
        return max(minimum, min(maximum, number))
