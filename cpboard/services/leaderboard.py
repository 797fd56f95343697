"""
Leaderboard service for the competitive programming leaderboard.

Orchestrates one aggregation pass (candidates -> bounded stat fetch -> entry
build -> rank) and exposes it as a paginated page or a windowed rank lookup.
Scores are computed fresh for every request and never stored.
"""

import asyncio
import time
from datetime import datetime, timezone
from typing import Any, List, Optional, Tuple
import logging

from cpboard.config import Config
from cpboard.constants import FetchErrorMessages, LeaderboardConstants, PlatformConstants
from cpboard.data_models.leaderboard import (
    Candidate, FetchOutcome, LeaderboardEntry, LeaderboardPage, MyRankResult, ScoringWeights
)
from cpboard.operations.entry_builder import EntryBuilder
from cpboard.utils.concurrency import bounded_map, cancel_all
from cpboard.utils.leaderboard_exceptions import (
    CandidateSourceError, InvalidInputError, LeaderboardException, StatFetchError
)
from cpboard.utils.ranking import RankingUtility
from cpboard.utils.scoring import ScoreCalculator, weights_from_config

logger = logging.getLogger(__name__)


class LeaderboardService:
    """Service for leaderboard aggregation, ranking and pagination."""

    def __init__(
        self,
        candidate_source,
        leetcode_fetcher,
        codeforces_fetcher,
        weights: Optional[ScoringWeights] = None,
        concurrency: Optional[int] = None,
        request_timeout: Optional[float] = None
    ):
        """
        Initialize leaderboard service.

        Args:
            candidate_source: Object with async list_connected_candidates()
            leetcode_fetcher: Object with async fetch_stats(username)
            codeforces_fetcher: Object with async fetch_stats(handle)
            weights: Scoring weights (defaults to Config)
            concurrency: Maximum candidates fetched at once (defaults to Config)
            request_timeout: Per-call timeout in seconds (defaults to Config)
        """
        self.candidate_source = candidate_source
        self.leetcode_fetcher = leetcode_fetcher
        self.codeforces_fetcher = codeforces_fetcher
        self.weights = weights or weights_from_config()
        self.concurrency = concurrency or Config.LEADERBOARD_CONCURRENCY
        self.request_timeout = request_timeout or Config.STAT_REQUEST_TIMEOUT
        self.entry_builder = EntryBuilder(ScoreCalculator(self.weights))

    async def get_page(self, limit: Any = None, offset: Any = None) -> LeaderboardPage:
        """
        Get one page of the full ranked leaderboard.

        Args:
            limit: Page size, clamped to [1, 500] (default 100)
            offset: Start position after sorting, clamped to [0, 5000] (default 0)

        Returns:
            LeaderboardPage; an offset past the end yields an empty page
        """
        limit = RankingUtility.clamp_int(
            limit, LeaderboardConstants.DEFAULT_LIMIT,
            LeaderboardConstants.MIN_LIMIT, LeaderboardConstants.MAX_LIMIT
        )
        offset = RankingUtility.clamp_int(
            offset, LeaderboardConstants.DEFAULT_OFFSET, 0, LeaderboardConstants.MAX_OFFSET
        )

        entries, duration_ms, total_candidates = await self.compute_rankings()

        return LeaderboardPage(
            entries=entries[offset:offset + limit],
            total_candidates=total_candidates,
            limit=limit,
            offset=offset,
            compute_duration_ms=duration_ms,
            weights=self.weights,
            updated_at=datetime.now(timezone.utc).isoformat()
        )

    async def get_my_rank(self, identity: Optional[str], window: Any = None) -> MyRankResult:
        """
        Locate one user in the full ranking along with neighbouring entries.

        Args:
            identity: User email, matched case-insensitively
            window: Entries shown on each side, clamped to [0, 10] (default 3)

        Returns:
            MyRankResult with found=False when the user is not a candidate

        Raises:
            InvalidInputError: If identity is missing (checked before any fetch)
        """
        normalized = str(identity or "").strip().lower()
        if not normalized:
            raise InvalidInputError("identity", "Email not available in profile")

        window = RankingUtility.clamp_int(
            window, LeaderboardConstants.DEFAULT_WINDOW, 0, LeaderboardConstants.MAX_WINDOW
        )

        entries, _, total_candidates = await self.compute_rankings()

        index = RankingUtility.find_index(entries, normalized)
        if index < 0:
            logger.debug(f"{normalized} not found in leaderboard of {len(entries)} entries")
            return MyRankResult(found=False, message=LeaderboardConstants.NOT_IN_LEADERBOARD_MESSAGE)

        start, end = RankingUtility.window_bounds(index, window, len(entries))
        return MyRankResult(
            found=True,
            index=index,
            total_candidates=total_candidates,
            entry=entries[index],
            surrounding=entries[start:end],
            window_start=start,
            window_end=end
        )

    async def compute_rankings(self) -> Tuple[List[LeaderboardEntry], int, int]:
        """
        Run a full aggregation pass.

        Returns:
            (ranked entries, duration in ms, candidate count)

        Raises:
            CandidateSourceError: If candidates cannot be listed
        """
        started = time.perf_counter()

        candidates = await self._load_candidates()
        entries = await bounded_map(candidates, self._build_entry, self.concurrency)
        ranked = RankingUtility.rank_entries(entries)

        duration_ms = int((time.perf_counter() - started) * 1000)
        degraded = sum(
            1 for entry in entries
            for view in (entry.leetcode, entry.codeforces)
            if view.connected and not view.exists
        )
        logger.info(
            f"Ranked {len(ranked)} candidates in {duration_ms}ms "
            f"({degraded} degraded platform fetches, concurrency={self.concurrency})"
        )
        return ranked, duration_ms, len(candidates)

    async def _load_candidates(self) -> List[Candidate]:
        try:
            candidates = await self.candidate_source.list_connected_candidates()
        except LeaderboardException:
            raise
        except Exception as e:
            logger.error(f"Candidate source failed: {e}")
            raise CandidateSourceError(str(e)) from e
        return [candidate for candidate in candidates if candidate.has_connected_platform]

    async def _build_entry(self, candidate: Candidate, index: int) -> LeaderboardEntry:
        """
        Fetch both platforms concurrently and build the candidate's entry.

        If either fetch raises, the other one is cancelled before the error
        propagates.
        """
        fetches = [
            asyncio.create_task(self._fetch_platform(
                PlatformConstants.LEETCODE, self.leetcode_fetcher, candidate.leetcode_username
            )),
            asyncio.create_task(self._fetch_platform(
                PlatformConstants.CODEFORCES, self.codeforces_fetcher, candidate.codeforces_handle
            )),
        ]
        try:
            leetcode_outcome, codeforces_outcome = await asyncio.gather(*fetches)
        except BaseException:
            await cancel_all(fetches)
            raise
        return self.entry_builder.build(candidate, leetcode_outcome, codeforces_outcome)

    async def _fetch_platform(self, platform: str, fetcher, handle: Optional[str]) -> FetchOutcome:
        """
        Fetch one platform's stats as a tagged outcome.

        Not-found, timeouts and StatFetchErrors are absorbed; anything else
        propagates and aborts the pass.
        """
        handle = (handle or "").strip()
        if not handle:
            return FetchOutcome.disconnected()

        try:
            stats = await asyncio.wait_for(fetcher.fetch_stats(handle), timeout=self.request_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"{platform} fetch for {handle} timed out after {self.request_timeout}s")
            return FetchOutcome.unavailable(FetchErrorMessages.FETCH_FAILED[platform])
        except StatFetchError as e:
            logger.warning(f"{platform} fetch for {handle} failed: {e}")
            return FetchOutcome.unavailable(FetchErrorMessages.FETCH_FAILED[platform])

        if stats is None:
            return FetchOutcome.not_found(FetchErrorMessages.NOT_FOUND[platform])
        return FetchOutcome.ok(stats)
