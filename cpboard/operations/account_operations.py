"""
Account Operations Module

Business logic for the external account mapping store: linking LeetCode and
Codeforces handles to a user's email and listing the candidates that feed the
leaderboard.

Key functionality:
- upsert_by_email(): create or update a mapping, keeping connected flags in sync
- list_connected_candidates(): ordered candidate list for one aggregation pass
"""

from contextlib import asynccontextmanager
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cpboard.data_models.leaderboard import Candidate
from cpboard.database.models import ExternalAccount
from cpboard.utils.leaderboard_exceptions import CandidateSourceError, InvalidInputError
from cpboard.utils.logger import setup_logger

logger = setup_logger(__name__)

# Marks an argument that was not supplied, as distinct from an explicit None
UNSET = object()


class AccountOperations:
    """
    Business logic operations for external account mappings.

    Also serves as the candidate source for LeaderboardService.
    """

    def __init__(self, database):
        """Initialize with database instance"""
        self.db = database
        self.logger = logger

    @asynccontextmanager
    async def _get_session_context(self, session: Optional[AsyncSession] = None):
        """
        Provides a session context. Uses the provided session if available,
        otherwise creates and manages a new transaction.
        """
        if session:
            yield session
        else:
            async with self.db.transaction() as new_session:
                yield new_session

    async def get_by_email(self, email: str, session: Optional[AsyncSession] = None) -> Optional[ExternalAccount]:
        """Look up a mapping by (normalized) email"""
        normalized = ExternalAccount.normalize_email(email)
        if not normalized:
            return None
        async with self._get_session_context(session) as s:
            result = await s.execute(
                select(ExternalAccount).where(ExternalAccount.email == normalized)
            )
            return result.scalar_one_or_none()

    async def upsert_by_email(
        self,
        email: str,
        leetcode_username=UNSET,
        codeforces_handle=UNSET,
        display_name=UNSET,
        session: Optional[AsyncSession] = None
    ) -> ExternalAccount:
        """
        Create the mapping for email if missing, then apply supplied fields.

        Fields left as UNSET keep their stored value; pass None (or a blank
        string) to disconnect a platform.

        Args:
            email: User email (normalized to lower case)
            leetcode_username: New LeetCode username, None to disconnect
            codeforces_handle: New Codeforces handle, None to disconnect
            display_name: Cached display name
            session: Optional existing session (caller manages commit)

        Returns:
            The created or updated ExternalAccount

        Raises:
            InvalidInputError: If email is blank
        """
        normalized = ExternalAccount.normalize_email(email)
        if not normalized:
            raise InvalidInputError("email", "Email is required")

        async with self._get_session_context(session) as s:
            result = await s.execute(
                select(ExternalAccount).where(ExternalAccount.email == normalized)
            )
            account = result.scalar_one_or_none()
            created = account is None
            if created:
                account = ExternalAccount(email=normalized)
                s.add(account)

            if leetcode_username is not UNSET:
                account.leetcode_username = leetcode_username
            if codeforces_handle is not UNSET:
                account.codeforces_handle = codeforces_handle
            if display_name is not UNSET:
                account.display_name = display_name

            account.refresh_connected_flags()
            await s.flush()

            self.logger.info(
                f"{'Created' if created else 'Updated'} account mapping for {normalized}: "
                f"leetcode={account.leetcode_username}, codeforces={account.codeforces_handle}"
            )
            return account

    async def list_connected_candidates(self) -> List[Candidate]:
        """
        All accounts with at least one connected platform, in insertion order.

        Raises:
            CandidateSourceError: If the store cannot be queried
        """
        try:
            async with self.db.get_session() as session:
                result = await session.execute(
                    select(ExternalAccount)
                    .where(or_(
                        ExternalAccount.leetcode_connected == True,
                        ExternalAccount.codeforces_connected == True
                    ))
                    .order_by(ExternalAccount.id)
                )
                accounts = result.scalars().all()
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to list leaderboard candidates: {e}")
            raise CandidateSourceError(str(e)) from e

        return [
            Candidate(
                identity=account.email,
                leetcode_username=account.leetcode_username,
                codeforces_handle=account.codeforces_handle,
                display_name=account.display_name
            )
            for account in accounts
        ]
