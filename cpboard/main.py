"""
Command-line entry point for the competitive programming leaderboard.

Usage:
    python -m cpboard link user@example.com --leetcode alice --codeforces tourist
    python -m cpboard page --limit 20 --offset 0
    python -m cpboard me user@example.com --window 3
"""

import argparse
import asyncio
import json
import sys
import traceback
from typing import List, Optional

from cpboard.config import Config
from cpboard.database.database import Database
from cpboard.operations.account_operations import AccountOperations, UNSET
from cpboard.services.leaderboard import LeaderboardService
from cpboard.services.stat_fetchers import CodeforcesStatFetcher, LeetCodeStatFetcher
from cpboard.utils.leaderboard_exceptions import InvalidInputError, LeaderboardException
from cpboard.utils.logger import setup_logger

logger = setup_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="LeetCode + Codeforces leaderboard")
    subparsers = parser.add_subparsers(dest="command", required=True)

    link = subparsers.add_parser("link", help="Link platform handles to an email")
    link.add_argument("email")
    link.add_argument("--leetcode", default=UNSET, help="LeetCode username (empty string to unlink)")
    link.add_argument("--codeforces", default=UNSET, help="Codeforces handle (empty string to unlink)")
    link.add_argument("--display-name", default=UNSET)

    page = subparsers.add_parser("page", help="Print a leaderboard page as JSON")
    page.add_argument("--limit", default=None)
    page.add_argument("--offset", default=None)

    me = subparsers.add_parser("me", help="Print a user's rank and neighbours as JSON")
    me.add_argument("email")
    me.add_argument("--window", default=None)

    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    Config.validate()

    db = Database()
    await db.initialize()
    accounts = AccountOperations(db)

    try:
        if args.command == "link":
            account = await accounts.upsert_by_email(
                args.email,
                leetcode_username=args.leetcode,
                codeforces_handle=args.codeforces,
                display_name=args.display_name
            )
            print(json.dumps({
                'email': account.email,
                'leetcodeUsername': account.leetcode_username,
                'codeforcesHandle': account.codeforces_handle,
                'displayName': account.display_name,
            }, indent=2))
            return 0

        async with LeetCodeStatFetcher() as leetcode, CodeforcesStatFetcher() as codeforces:
            service = LeaderboardService(accounts, leetcode, codeforces)
            if args.command == "page":
                result = await service.get_page(limit=args.limit, offset=args.offset)
            else:
                result = await service.get_my_rank(args.email, window=args.window)
            print(json.dumps(result.to_dict(), indent=2))
        return 0
    finally:
        await db.close()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = parse_args(argv)
    try:
        return asyncio.run(run(args))
    except InvalidInputError as e:
        print(e.user_message, file=sys.stderr)
        return 2
    except LeaderboardException as e:
        logger.error(f"Leaderboard request failed: {e}")
        print(e.user_message, file=sys.stderr)
        return 1
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        logger.error(traceback.format_exc())
        return 1

if __name__ == "__main__":
    sys.exit(main())
