from sqlalchemy import Column, Integer, String, DateTime, Boolean
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func
from typing import Optional

Base = declarative_base()


def _clean_handle(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class ExternalAccount(Base):
    """Maps a user's email to their external platform handles."""
    __tablename__ = 'external_accounts'

    id = Column(Integer, primary_key=True)
    email = Column(String(320), nullable=False, unique=True, index=True)

    # External platform identifiers (nullable)
    leetcode_username = Column(String(100), nullable=True)
    codeforces_handle = Column(String(100), nullable=True)

    # Cached display name for leaderboard rendering
    display_name = Column(String(200), nullable=True)

    # Convenience flags kept in sync with the handle columns
    leetcode_connected = Column(Boolean, default=False, nullable=False, index=True)
    codeforces_connected = Column(Boolean, default=False, nullable=False, index=True)

    # Metadata
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    @staticmethod
    def normalize_email(email: Optional[str]) -> str:
        """Lower-case and trim an email address"""
        return str(email or "").strip().lower()

    def refresh_connected_flags(self):
        """Normalize handles and recompute connected flags"""
        self.leetcode_username = _clean_handle(self.leetcode_username)
        self.codeforces_handle = _clean_handle(self.codeforces_handle)
        self.display_name = _clean_handle(self.display_name)
        self.leetcode_connected = bool(self.leetcode_username)
        self.codeforces_connected = bool(self.codeforces_handle)

    def __repr__(self):
        return (
            f"<ExternalAccount(email='{self.email}', leetcode='{self.leetcode_username}', "
            f"codeforces='{self.codeforces_handle}')>"
        )
