"""
Stat fetchers for LeetCode and Codeforces.

Each fetcher validates the handle before any request, returns normalized stats,
returns None when the platform reports that the user does not exist, and
raises PlatformUnavailableError for network errors, timeouts and malformed
responses.
"""

import asyncio
import logging
import math
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import aiohttp

from cpboard.config import Config
from cpboard.constants import PlatformConstants
from cpboard.data_models.leaderboard import CodeforcesStats, LeetCodeStats, PlatformStats
from cpboard.utils.leaderboard_exceptions import InvalidHandleError, PlatformUnavailableError

logger = logging.getLogger(__name__)

LEETCODE_STATS_QUERY = """
query userStats($username: String!) {
  matchedUser(username: $username) {
    username
    submitStats: submitStats {
      acSubmissionNum {
        difficulty
        count
      }
    }
  }
}
"""

LEETCODE_EXISTS_QUERY = """
query checkUser($username: String!) {
  matchedUser(username: $username) { username }
}
"""

_LEETCODE_USERNAME_RE = re.compile(PlatformConstants.LEETCODE_USERNAME_PATTERN)
_CODEFORCES_HANDLE_RE = re.compile(PlatformConstants.CODEFORCES_HANDLE_PATTERN)


def normalize_leetcode_username(username: Any) -> str:
    """Trim and validate a LeetCode username (letters, digits, '_' and '-')."""
    value = str(username or "").strip()
    if not value:
        raise InvalidHandleError(PlatformConstants.LEETCODE, username, "Username is required")
    if not _LEETCODE_USERNAME_RE.match(value):
        raise InvalidHandleError(PlatformConstants.LEETCODE, username, "Invalid LeetCode username format")
    return value


def normalize_codeforces_handle(handle: Any) -> str:
    """Trim and validate a Codeforces handle (3-24 letters, digits or '_')."""
    value = str(handle or "").strip()
    if not value:
        raise InvalidHandleError(PlatformConstants.CODEFORCES, handle, "Handle is required")
    if not (PlatformConstants.CODEFORCES_HANDLE_MIN_LENGTH <= len(value) <= PlatformConstants.CODEFORCES_HANDLE_MAX_LENGTH):
        raise InvalidHandleError(PlatformConstants.CODEFORCES, handle, "Invalid Codeforces handle length")
    if not _CODEFORCES_HANDLE_RE.match(value):
        raise InvalidHandleError(PlatformConstants.CODEFORCES, handle, "Invalid Codeforces handle format")
    return value


def _count(value: Any) -> int:
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError, OverflowError):
        return 0


def _optional_int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return int(value)


def _malformed(platform: str, what: str) -> PlatformUnavailableError:
    return PlatformUnavailableError(platform, f"unexpected response shape: {what}")


def parse_leetcode_stats(data: Optional[Dict[str, Any]], username: str) -> Optional[LeetCodeStats]:
    """
    Normalize the `data` object of a LeetCode userStats response.

    Returns None when matchedUser is empty (user not found). The total falls
    back to the sum of difficulties when the "All" bucket is missing.
    """
    if data is not None and not isinstance(data, dict):
        raise _malformed(PlatformConstants.LEETCODE, "data")

    matched = (data or {}).get('matchedUser')
    if not matched:
        return None
    if not isinstance(matched, dict):
        raise _malformed(PlatformConstants.LEETCODE, "matchedUser")

    submit_stats = matched.get('submitStats') or {}
    if not isinstance(submit_stats, dict):
        raise _malformed(PlatformConstants.LEETCODE, "submitStats")
    rows = submit_stats.get('acSubmissionNum') or []
    if not isinstance(rows, list):
        raise _malformed(PlatformConstants.LEETCODE, "acSubmissionNum")
    by_difficulty = {}
    for row in rows:
        if isinstance(row, dict):
            by_difficulty[str(row.get('difficulty') or '').lower()] = _count(row.get('count'))

    easy = by_difficulty.get('easy', 0)
    medium = by_difficulty.get('medium', 0)
    hard = by_difficulty.get('hard', 0)
    total = by_difficulty['all'] if 'all' in by_difficulty else easy + medium + hard

    return LeetCodeStats(
        username=str(matched.get('username') or username),
        total_solved=total,
        easy=easy,
        medium=medium,
        hard=hard
    )


def parse_codeforces_user(payload: Optional[Dict[str, Any]], handle: str) -> Optional[CodeforcesStats]:
    """
    Normalize a Codeforces user.info payload.

    Returns None for an empty result list or a FAILED status whose comment
    says the handle was not found.
    """
    if not isinstance(payload, dict):
        raise _malformed(PlatformConstants.CODEFORCES, "payload")

    status = payload.get('status')
    if status and status != 'OK':
        comment = str(payload.get('comment') or 'Unknown error')
        if 'not found' in comment.lower():
            return None
        raise PlatformUnavailableError(PlatformConstants.CODEFORCES, f"Codeforces API error: {comment}")

    results = payload.get('result')
    if not isinstance(results, list) or not results:
        return None

    user = results[0]
    if not isinstance(user, dict):
        raise _malformed(PlatformConstants.CODEFORCES, "result")
    return CodeforcesStats(
        handle=str(user.get('handle') or handle),
        rank=user.get('rank'),
        rating=_optional_int(user.get('rating')),
        max_rank=user.get('maxRank'),
        max_rating=_optional_int(user.get('maxRating'))
    )


class StatFetcher(ABC):
    """
    Abstract base class for platform stat fetchers.

    Owns one lazily created aiohttp session; call close() when done.
    """

    platform: str = ""

    def __init__(self, session: Optional[aiohttp.ClientSession] = None, timeout: Optional[float] = None):
        self._session = session
        self._owns_session = session is None
        self.timeout = aiohttp.ClientTimeout(total=timeout or Config.STAT_REQUEST_TIMEOUT)

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def close(self):
        """Close the HTTP session if this fetcher created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    @abstractmethod
    async def fetch_stats(self, handle: str) -> Optional[PlatformStats]:
        """
        Fetch normalized stats for a handle.

        Returns:
            Stats, or None if the user does not exist

        Raises:
            InvalidHandleError: Handle is malformed (no request made)
            PlatformUnavailableError: Network, timeout or parse failure
        """
        pass

    async def verify(self, handle: str) -> bool:
        """True if the handle exists on the platform."""
        return await self.fetch_stats(handle) is not None


class LeetCodeStatFetcher(StatFetcher):
    """Solved counts from the LeetCode GraphQL endpoint."""

    platform = PlatformConstants.LEETCODE

    async def _graphql(self, query: str, variables: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        session = await self._get_session()
        headers = {
            'Accept': 'application/json',
            'Content-Type': 'application/json',
            'Origin': 'https://leetcode.com',
            'Referer': 'https://leetcode.com',
        }
        try:
            async with session.post(
                PlatformConstants.LEETCODE_GRAPHQL_URL,
                json={'query': query, 'variables': variables},
                headers=headers,
                timeout=self.timeout
            ) as response:
                if response.status >= 400:
                    text = await response.text()
                    raise PlatformUnavailableError(self.platform, f"LeetCode GraphQL {response.status}: {text[:200]}")
                body = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            await asyncio.sleep(PlatformConstants.LEETCODE_ERROR_BACKOFF)
            raise PlatformUnavailableError(self.platform, repr(e)) from e
        except PlatformUnavailableError:
            await asyncio.sleep(PlatformConstants.LEETCODE_ERROR_BACKOFF)
            raise

        if not isinstance(body, dict):
            raise PlatformUnavailableError(self.platform, "unexpected response shape")
        errors = body.get('errors') or []
        if errors:
            message = "; ".join(str(error.get('message')) for error in errors if isinstance(error, dict))
            raise PlatformUnavailableError(self.platform, f"LeetCode GraphQL error: {message}")
        return body.get('data')

    async def fetch_stats(self, handle: str) -> Optional[LeetCodeStats]:
        username = normalize_leetcode_username(handle)
        data = await self._graphql(LEETCODE_STATS_QUERY, {'username': username})
        stats = parse_leetcode_stats(data, username)
        if stats is None:
            logger.debug(f"LeetCode user {username} not found")
        return stats

    async def verify(self, handle: str) -> bool:
        username = normalize_leetcode_username(handle)
        data = await self._graphql(LEETCODE_EXISTS_QUERY, {'username': username})
        matched = data.get('matchedUser') if isinstance(data, dict) else None
        return isinstance(matched, dict) and bool(matched.get('username'))


class CodeforcesStatFetcher(StatFetcher):
    """Rating snapshot from the Codeforces user.info API."""

    platform = PlatformConstants.CODEFORCES

    async def fetch_stats(self, handle: str) -> Optional[CodeforcesStats]:
        cf_handle = normalize_codeforces_handle(handle)
        session = await self._get_session()
        url = f"{PlatformConstants.CODEFORCES_API_BASE}/user.info"
        try:
            async with session.get(url, params={'handles': cf_handle}, timeout=self.timeout) as response:
                # Codeforces answers unknown handles with HTTP 400 and a FAILED body
                body = await response.json(content_type=None)
                if response.status >= 400 and not (isinstance(body, dict) and body.get('status') == 'FAILED'):
                    raise PlatformUnavailableError(self.platform, f"Codeforces API {response.status}")
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise PlatformUnavailableError(self.platform, repr(e)) from e

        stats = parse_codeforces_user(body, cf_handle)
        if stats is None:
            logger.debug(f"Codeforces handle {cf_handle} not found")
        return stats
