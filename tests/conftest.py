"""
Shared fixtures for the leaderboard test suite.
"""

import os
import tempfile

# Keep file logs out of the working tree; read by Config at import time
os.environ.setdefault('LOG_DIR', os.path.join(tempfile.gettempdir(), 'cpboard-test-logs'))

import pytest

from cpboard.data_models.leaderboard import Candidate
from fakes import FakeCandidateSource, FakeFetcher, codeforces, leetcode


@pytest.fixture
def alice_and_bob():
    """Alice on LeetCode only, Bob on Codeforces only."""
    candidates = [
        Candidate(identity="alice@example.com", leetcode_username="alice", display_name="Alice"),
        Candidate(identity="bob@example.com", codeforces_handle="bob"),
    ]
    lc = FakeFetcher({"alice": leetcode("alice", 50, easy=30, medium=15, hard=5)})
    cf = FakeFetcher({"bob": codeforces("bob", 1600, rank="expert")})
    return FakeCandidateSource(candidates), lc, cf
