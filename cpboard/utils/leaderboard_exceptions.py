"""
Custom exceptions for the leaderboard engine with user-friendly error messages.
"""

from typing import Optional


class LeaderboardException(Exception):
    """Base exception for leaderboard-related errors."""
    def __init__(self, message: str, user_message: Optional[str] = None):
        super().__init__(message)
        self.user_message = user_message or message

class InvalidInputError(LeaderboardException):
    """Raised when caller input is rejected before any fetch is attempted."""
    def __init__(self, field: str, reason: str):
        super().__init__(
            f"Invalid {field}: {reason}",
            f"❌ {reason}"
        )
        self.field = field

class CandidateSourceError(LeaderboardException):
    """Raised when the candidate account store cannot be read."""
    def __init__(self, details: Optional[str] = None):
        super().__init__(
            f"Candidate source unavailable: {details}",
            "❌ Leaderboard is temporarily unavailable. Please try again later."
        )

class StatFetchError(LeaderboardException):
    """Base exception for platform-level stat fetch failures."""
    def __init__(self, platform: str, message: str, user_message: Optional[str] = None):
        super().__init__(message, user_message)
        self.platform = platform

class InvalidHandleError(StatFetchError):
    """Raised when a platform handle is malformed; no request is made."""
    def __init__(self, platform: str, handle: Optional[str], reason: str):
        super().__init__(
            platform,
            f"Invalid {platform} handle {handle!r}: {reason}",
            f"❌ {reason}"
        )
        self.handle = handle

class PlatformUnavailableError(StatFetchError):
    """Raised on network errors, timeouts or malformed upstream responses."""
    def __init__(self, platform: str, details: Optional[str] = None):
        super().__init__(
            platform,
            f"{platform} unavailable: {details}",
            f"❌ Could not reach {platform}. Please try again later."
        )
