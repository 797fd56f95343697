"""
Tests for handle validation, platform response parsing and the HTTP fetchers.

HTTP behaviour is checked against a local aiohttp server serving canned
responses; no request leaves the machine.
"""

import asyncio

import aiohttp
import pytest
from aiohttp import test_utils, web

from cpboard.constants import PlatformConstants
from cpboard.services.stat_fetchers import (
    CodeforcesStatFetcher, LeetCodeStatFetcher, normalize_codeforces_handle,
    normalize_leetcode_username, parse_codeforces_user, parse_leetcode_stats
)
from cpboard.utils.leaderboard_exceptions import InvalidHandleError, PlatformUnavailableError


class TestHandleValidation:
    """Handle formats accepted by each platform."""

    def test_leetcode_username_trimmed(self):
        assert normalize_leetcode_username("  lee-code_1 ") == "lee-code_1"

    @pytest.mark.parametrize("username", ["", "   ", None, "bad name", "emoji🙂", "a.b"])
    def test_leetcode_username_rejected(self, username):
        with pytest.raises(InvalidHandleError):
            normalize_leetcode_username(username)

    def test_codeforces_handle_trimmed(self):
        assert normalize_codeforces_handle(" tourist ") == "tourist"

    @pytest.mark.parametrize("handle", ["", "ab", "x" * 25, "has-dash", "sp ace"])
    def test_codeforces_handle_rejected(self, handle):
        with pytest.raises(InvalidHandleError):
            normalize_codeforces_handle(handle)

    def test_invalid_handle_rejected_before_request(self):
        async def scenario():
            async with LeetCodeStatFetcher() as lc, CodeforcesStatFetcher() as cf:
                with pytest.raises(InvalidHandleError):
                    await lc.fetch_stats("not valid")
                with pytest.raises(InvalidHandleError):
                    await cf.fetch_stats("no")
                # No session is opened for rejected handles
                assert lc._session is None and cf._session is None

        asyncio.run(scenario())


class TestParseLeetCode:
    """Tests for the LeetCode GraphQL payload parser."""

    def test_counts_by_difficulty(self):
        data = {
            "matchedUser": {
                "username": "Alice",
                "submitStats": {"acSubmissionNum": [
                    {"difficulty": "All", "count": 60},
                    {"difficulty": "Easy", "count": 30},
                    {"difficulty": "Medium", "count": 25},
                    {"difficulty": "Hard", "count": 5},
                ]},
            }
        }
        stats = parse_leetcode_stats(data, "alice")
        assert stats.username == "Alice"
        assert (stats.total_solved, stats.easy, stats.medium, stats.hard) == (60, 30, 25, 5)

    def test_total_falls_back_to_sum(self):
        data = {"matchedUser": {"submitStats": {"acSubmissionNum": [
            {"difficulty": "Easy", "count": 2},
            {"difficulty": "Hard", "count": "3"},
        ]}}}
        stats = parse_leetcode_stats(data, "bob")
        assert stats.username == "bob"
        assert stats.total_solved == 5
        assert stats.medium == 0

    def test_missing_user_is_not_found(self):
        assert parse_leetcode_stats({"matchedUser": None}, "ghost") is None
        assert parse_leetcode_stats(None, "ghost") is None

    def test_malformed_payload_is_unavailable(self):
        with pytest.raises(PlatformUnavailableError):
            parse_leetcode_stats(["not", "a", "dict"], "x")


class TestParseCodeforces:
    """Tests for the Codeforces user.info payload parser."""

    def test_rated_user(self):
        payload = {"status": "OK", "result": [{
            "handle": "Tourist", "rank": "legendary grandmaster", "rating": 3800,
            "maxRank": "legendary grandmaster", "maxRating": 4000,
        }]}
        stats = parse_codeforces_user(payload, "tourist")
        assert stats.handle == "Tourist"
        assert stats.rating == 3800
        assert stats.max_rating == 4000

    def test_unrated_user_has_null_rating(self):
        stats = parse_codeforces_user({"status": "OK", "result": [{"handle": "newbie1"}]}, "newbie1")
        assert stats.rating is None
        assert stats.rank is None

    def test_not_found_comment(self):
        payload = {"status": "FAILED", "comment": "handles: User with handle nobody_x not found"}
        assert parse_codeforces_user(payload, "nobody_x") is None

    def test_empty_result_is_not_found(self):
        assert parse_codeforces_user({"status": "OK", "result": []}, "x_y_z") is None

    def test_other_failure_is_unavailable(self):
        with pytest.raises(PlatformUnavailableError):
            parse_codeforces_user({"status": "FAILED", "comment": "Call limit exceeded"}, "abc")

    def test_non_dict_payload_is_unavailable(self):
        with pytest.raises(PlatformUnavailableError):
            parse_codeforces_user(None, "abc")

    def test_non_dict_user_is_unavailable(self):
        with pytest.raises(PlatformUnavailableError):
            parse_codeforces_user({"status": "OK", "result": ["oops"]}, "xyz")

    def test_non_finite_rating_is_unrated(self):
        payload = {"status": "OK", "result": [{"handle": "xyz", "rating": float("nan"), "maxRating": float("inf")}]}
        stats = parse_codeforces_user(payload, "xyz")
        assert stats.rating is None
        assert stats.max_rating is None


class TestParseLeetCodeShapes:
    """Malformed LeetCode payloads are reported as unavailable."""

    @pytest.mark.parametrize("data", [
        {"matchedUser": ["oops"]},
        {"matchedUser": {"submitStats": ["oops"]}},
        {"matchedUser": {"submitStats": {"acSubmissionNum": {"difficulty": "All"}}}},
    ])
    def test_wrong_nested_types(self, data):
        with pytest.raises(PlatformUnavailableError):
            parse_leetcode_stats(data, "x")

    def test_non_finite_count_is_zero(self):
        data = {"matchedUser": {"submitStats": {"acSubmissionNum": [
            {"difficulty": "Easy", "count": float("inf")},
            {"difficulty": "Hard", "count": float("nan")},
        ]}}}
        stats = parse_leetcode_stats(data, "x")
        assert (stats.easy, stats.hard, stats.total_solved) == (0, 0, 0)


async def run_with_server(handler, path, method, scenario):
    """Serve handler at path on a local server and run scenario(base_url)."""
    app = web.Application()
    app.router.add_route(method, path, handler)
    server = test_utils.TestServer(app)
    await server.start_server()
    try:
        return await scenario(str(server.make_url("/")).rstrip("/"))
    finally:
        await server.close()


def json_handler(body, status=200):
    async def handler(request):
        return web.json_response(body, status=status)
    return handler


def text_handler(text, status):
    async def handler(request):
        return web.Response(text=text, status=status)
    return handler


class TestCodeforcesFetcher:
    """CodeforcesStatFetcher against canned HTTP responses."""

    def fetch(self, monkeypatch, handler, handle="tourist"):
        async def scenario(base_url):
            monkeypatch.setattr(PlatformConstants, "CODEFORCES_API_BASE", base_url + "/api")
            async with CodeforcesStatFetcher(timeout=5) as fetcher:
                return await fetcher.fetch_stats(handle)

        return asyncio.run(run_with_server(handler, "/api/user.info", "GET", scenario))

    def test_rated_user(self, monkeypatch):
        seen = []

        async def handler(request):
            seen.append(request.query.get("handles"))
            return web.json_response({"status": "OK", "result": [{"handle": "tourist", "rating": 3800}]})

        stats = self.fetch(monkeypatch, handler, handle=" tourist ")
        assert stats.rating == 3800
        assert seen == ["tourist"]

    def test_http_400_not_found_body_is_not_found(self, monkeypatch):
        body = {"status": "FAILED", "comment": "handles: User with handle nobody_x not found"}
        assert self.fetch(monkeypatch, json_handler(body, status=400), handle="nobody_x") is None

    def test_http_5xx_with_html_body_is_unavailable(self, monkeypatch):
        with pytest.raises(PlatformUnavailableError):
            self.fetch(monkeypatch, text_handler("<html>Bad gateway</html>", 502))

    def test_http_5xx_with_json_body_is_unavailable(self, monkeypatch):
        with pytest.raises(PlatformUnavailableError):
            self.fetch(monkeypatch, json_handler({"status": "OK", "result": []}, status=503))

    def test_malformed_result_is_unavailable(self, monkeypatch):
        with pytest.raises(PlatformUnavailableError):
            self.fetch(monkeypatch, json_handler({"status": "OK", "result": ["oops"]}))


class TestLeetCodeFetcher:
    """LeetCodeStatFetcher against canned GraphQL responses."""

    def fetch(self, monkeypatch, handler, username="alice", verify=False):
        async def scenario(base_url):
            monkeypatch.setattr(PlatformConstants, "LEETCODE_GRAPHQL_URL", base_url + "/graphql")
            async with LeetCodeStatFetcher(timeout=5) as fetcher:
                if verify:
                    return await fetcher.verify(username)
                return await fetcher.fetch_stats(username)

        return asyncio.run(run_with_server(handler, "/graphql", "POST", scenario))

    def test_solved_counts(self, monkeypatch):
        seen = []

        async def handler(request):
            seen.append((await request.json())["variables"])
            return web.json_response({"data": {"matchedUser": {
                "username": "alice",
                "submitStats": {"acSubmissionNum": [
                    {"difficulty": "All", "count": 12},
                    {"difficulty": "Easy", "count": 12},
                ]},
            }}})

        stats = self.fetch(monkeypatch, handler)
        assert stats.total_solved == 12 and stats.easy == 12
        assert seen == [{"username": "alice"}]

    def test_missing_user_is_not_found(self, monkeypatch):
        assert self.fetch(monkeypatch, json_handler({"data": {"matchedUser": None}})) is None

    def test_http_4xx_is_unavailable(self, monkeypatch):
        with pytest.raises(PlatformUnavailableError):
            self.fetch(monkeypatch, text_handler("slow down", 429))

    def test_graphql_errors_are_unavailable(self, monkeypatch):
        body = {"errors": [{"message": "rate limited"}], "data": None}
        with pytest.raises(PlatformUnavailableError) as info:
            self.fetch(monkeypatch, json_handler(body))
        assert "rate limited" in str(info.value)

    def test_malformed_matched_user_is_unavailable(self, monkeypatch):
        with pytest.raises(PlatformUnavailableError):
            self.fetch(monkeypatch, json_handler({"data": {"matchedUser": ["oops"]}}))

    def test_verify(self, monkeypatch):
        assert self.fetch(monkeypatch, json_handler({"data": {"matchedUser": {"username": "alice"}}}), verify=True)
        assert not self.fetch(monkeypatch, json_handler({"data": {"matchedUser": None}}), verify=True)
        assert not self.fetch(monkeypatch, json_handler({"data": ["oops"]}), verify=True)

    def test_connection_error_is_wrapped(self, monkeypatch):
        url = f"http://127.0.0.1:{test_utils.unused_port()}/graphql"
        monkeypatch.setattr(PlatformConstants, "LEETCODE_GRAPHQL_URL", url)

        async def scenario():
            async with LeetCodeStatFetcher(timeout=5) as fetcher:
                await fetcher.fetch_stats("alice")

        with pytest.raises(PlatformUnavailableError) as info:
            asyncio.run(scenario())
        assert isinstance(info.value.__cause__, aiohttp.ClientError)


class TestSessionOwnership:
    """close() only closes sessions the fetcher created."""

    def test_injected_session_left_open(self):
        async def scenario():
            session = aiohttp.ClientSession()
            try:
                fetcher = CodeforcesStatFetcher(session=session)
                await fetcher.close()
                return session.closed
            finally:
                await session.close()

        assert asyncio.run(scenario()) is False

    def test_own_session_closed(self):
        async def scenario():
            fetcher = LeetCodeStatFetcher()
            session = await fetcher._get_session()
            await fetcher.close()
            return session.closed, fetcher._session

        assert asyncio.run(scenario()) == (True, None)
