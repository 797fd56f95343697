"""
cpboard: competitive programming leaderboard engine.

Aggregates LeetCode and Codeforces stats for linked accounts and ranks them
on a combined score.
"""

__version__ = "1.0.0"
