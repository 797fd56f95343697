import math
from typing import Any, Optional

from cpboard.config import Config
from cpboard.data_models.leaderboard import ScoreComponents, ScoringWeights


def weights_from_config() -> ScoringWeights:
    """Build scoring weights from the process configuration."""
    return ScoringWeights(
        lc_weight=Config.LC_WEIGHT,
        cf_weight=Config.CF_WEIGHT,
        cf_baseline=Config.CF_BASELINE
    )


def _as_int(value: Any) -> int:
    """Coerce a raw stat to an int; non-numeric and non-finite values count as zero."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if not math.isfinite(value):
        return 0
    return int(value)


def _non_negative_int(value: Any) -> int:
    return max(0, _as_int(value))


class ScoreCalculator:
    """Combines LeetCode solved count and Codeforces rating into one score"""

    def __init__(self, weights: Optional[ScoringWeights] = None):
        self.weights = weights or weights_from_config()

    def adjusted_rating(self, cf_rating: Any) -> float:
        """
        Codeforces rating above the baseline.

        Args:
            cf_rating: Raw Codeforces rating

        Returns:
            max(rating - baseline, 0)
        """
        return max(_non_negative_int(cf_rating) - self.weights.cf_baseline, 0)

    def score(self, lc_solved: Any, cf_rating: Any) -> float:
        """
        Calculate the combined leaderboard score

        Args:
            lc_solved: LeetCode total solved count
            cf_rating: Codeforces rating (not baseline adjusted)

        Returns:
            LC_WEIGHT * max(lc_solved, 0) + CF_WEIGHT * max(cf_rating - CF_BASELINE, 0)
        """
        return (
            self.weights.lc_weight * _non_negative_int(lc_solved)
            + self.weights.cf_weight * self.adjusted_rating(cf_rating)
        )

    def components(self, lc_solved: Any, cf_rating: Any) -> ScoreComponents:
        """
        Score inputs together with the weights applied to them.

        lc_solved is floored at zero; cf_rating is the raw rating used by the
        ranking tie-break.
        """
        return ScoreComponents(
            lc_solved=_non_negative_int(lc_solved),
            cf_rating=_as_int(cf_rating),
            cf_adjusted_rating=self.adjusted_rating(cf_rating),
            lc_weight=self.weights.lc_weight,
            cf_weight=self.weights.cf_weight,
            cf_baseline=self.weights.cf_baseline
        )
