"""
Project-wide constants for the competitive programming leaderboard.

This module contains the magic numbers, endpoints and messages used throughout
the codebase to improve maintainability and clarity.
"""

class LeaderboardConstants:
    """Constants for leaderboard pagination and rank lookups."""

    # Page size bounds for get_page
    DEFAULT_LIMIT = 100
    MIN_LIMIT = 1
    MAX_LIMIT = 500

    # Offset bounds, applied after sorting
    DEFAULT_OFFSET = 0
    MAX_OFFSET = 5000

    # Neighbours shown around a user's own entry
    DEFAULT_WINDOW = 3
    MAX_WINDOW = 10

    NOT_IN_LEADERBOARD_MESSAGE = (
        "You are not part of the leaderboard yet. "
        "Link your LeetCode/Codeforces account to join."
    )

class PlatformConstants:
    """Constants for the external stat platforms."""

    LEETCODE = "leetcode"
    CODEFORCES = "codeforces"

    LEETCODE_GRAPHQL_URL = "https://leetcode.com/graphql"
    CODEFORCES_API_BASE = "https://codeforces.com/api"

    # Handle formats accepted before any request is made
    LEETCODE_USERNAME_PATTERN = r"^[A-Za-z0-9_-]+$"
    CODEFORCES_HANDLE_PATTERN = r"^[A-Za-z0-9_]+$"
    CODEFORCES_HANDLE_MIN_LENGTH = 3
    CODEFORCES_HANDLE_MAX_LENGTH = 24

    # Pause after a failed LeetCode call (upstream throttling)
    LEETCODE_ERROR_BACKOFF = 0.05

class FetchErrorMessages:
    """Per-entry error strings, keyed by platform."""

    NOT_FOUND = {
        PlatformConstants.LEETCODE: "LeetCode user not found",
        PlatformConstants.CODEFORCES: "Codeforces user not found",
    }

    FETCH_FAILED = {
        PlatformConstants.LEETCODE: "Failed to fetch LeetCode stats",
        PlatformConstants.CODEFORCES: "Failed to fetch Codeforces stats",
    }
