"""
Services package for the leaderboard engine.
"""

from .leaderboard import LeaderboardService
from .stat_fetchers import CodeforcesStatFetcher, LeetCodeStatFetcher, StatFetcher

__all__ = ['LeaderboardService', 'StatFetcher', 'LeetCodeStatFetcher', 'CodeforcesStatFetcher']
