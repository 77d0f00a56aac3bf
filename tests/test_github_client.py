import asyncio
import json
import unittest
from unittest.mock import AsyncMock, MagicMock

import aiohttp

from github_cache.domain.results import HttpError, Ok, TransportFailure
from github_cache.infrastructure.github_client import GitHubRestClient


RAW_USER = {
    "id": 1,
    "login": "octocat",
    "name": "The Octocat",
    "avatar_url": "https://avatars.githubusercontent.com/u/1",
    "followers": 10,
    "following": 2,
    "created_at": "2011-01-25T18:44:36Z",
    "public_repos": 8,
    "bio": "hello",
}

RAW_REPO = {
    "id": 7,
    "name": "Hello-World",
    "full_name": "octocat/Hello-World",
    "description": None,
    "html_url": "https://github.com/octocat/Hello-World",
    "language": "C",
    "stargazers_count": 3,
    "fork": False,
}


def _response(status: int, body=None, reason: str = "OK", json_error: Exception = None):
    response = AsyncMock()
    response.status = status
    response.reason = reason
    if json_error is not None:
        response.json = AsyncMock(side_effect=json_error)
    else:
        response.json = AsyncMock(return_value=body)
    response.__aenter__ = AsyncMock(return_value=response)
    response.__aexit__ = AsyncMock(return_value=False)
    return response


def _session(*responses):
    session = MagicMock()
    session.get = MagicMock(side_effect=list(responses))
    return session


class TestGitHubRestClientHeaders(unittest.TestCase):
    def test_headers_include_user_agent_and_accept(self) -> None:
        client = GitHubRestClient()

        self.assertIn("User-Agent", client.headers)
        self.assertEqual(client.headers["Accept"], "application/vnd.github+json")
        self.assertNotIn("Authorization", client.headers)

    def test_trailing_slash_is_stripped_from_base_url(self) -> None:
        client = GitHubRestClient(base_url="http://localhost:8080/")

        self.assertEqual(client.api_url, "http://localhost:8080")

    def test_zero_timeout_disables_request_timeout(self) -> None:
        self.assertIsNone(GitHubRestClient(timeout_seconds=None).timeout)
        self.assertEqual(GitHubRestClient(timeout_seconds=5).timeout.total, 5)


class TestGitHubRestClientFetch(unittest.IsolatedAsyncioTestCase):
    async def test_fetch_user_success(self) -> None:
        session = _session(_response(200, RAW_USER))
        client = GitHubRestClient(session=session)

        result = await client.fetch_user("octocat")

        self.assertIsInstance(result, Ok)
        self.assertEqual(result.value.login, "octocat")
        self.assertEqual(result.value.followers_count, 10)
        url = session.get.call_args.args[0]
        self.assertEqual(url, "https://api.github.com/users/octocat")

    async def test_fetch_repositories_success(self) -> None:
        session = _session(_response(200, [RAW_REPO, dict(RAW_REPO, id=8, name="Spoon-Knife")]))
        client = GitHubRestClient(base_url="http://example.test", session=session)

        result = await client.fetch_repositories("octocat")

        self.assertIsInstance(result, Ok)
        self.assertEqual([repo.name for repo in result.value], ["Hello-World", "Spoon-Knife"])
        self.assertEqual(session.get.call_args.args[0], "http://example.test/users/octocat/repos")

    async def test_username_is_quoted_into_one_path_segment(self) -> None:
        session = _session(_response(404, {"error": "Not Found"}), _response(404, {"error": "Not Found"}))
        client = GitHubRestClient(base_url="http://example.test", session=session)

        await client.fetch_user("octocat/repos")
        await client.fetch_repositories("a?b")

        urls = [call.args[0] for call in session.get.call_args_list]
        self.assertEqual(urls, [
            "http://example.test/users/octocat%2Frepos",
            "http://example.test/users/a%3Fb/repos",
        ])

    async def test_non_200_uses_error_field(self) -> None:
        session = _session(_response(404, {"error": "User not found"}, reason="Not Found"))
        client = GitHubRestClient(session=session)

        result = await client.fetch_user("ghost")

        self.assertEqual(result, HttpError(status_code=404, message="User not found", subject="user"))
        self.assertEqual(result.describe(), "Failed to fetch user: 404 - User not found")

    async def test_non_200_falls_back_to_github_message_field(self) -> None:
        session = _session(_response(403, {"message": "API rate limit exceeded"}, reason="Forbidden"))
        client = GitHubRestClient(session=session)

        result = await client.fetch_repositories("octocat")

        self.assertIsInstance(result, HttpError)
        self.assertEqual(result.message, "API rate limit exceeded")
        self.assertEqual(result.subject, "repositories")

    async def test_non_200_without_body_uses_reason(self) -> None:
        session = _session(_response(502, json_error=json.JSONDecodeError("x", "", 0), reason="Bad Gateway"))
        client = GitHubRestClient(session=session)

        result = await client.fetch_user("octocat")

        self.assertEqual(result.status_code, 502)
        self.assertEqual(result.message, "Bad Gateway")

    async def test_empty_body_is_ok_none(self) -> None:
        session = _session(_response(200, None))
        client = GitHubRestClient(session=session)

        result = await client.fetch_user("octocat")

        self.assertEqual(result, Ok(None))

    async def test_undecodable_body_is_ok_none(self) -> None:
        session = _session(_response(200, json_error=json.JSONDecodeError("bad", "{", 0)))
        client = GitHubRestClient(session=session)

        result = await client.fetch_user("octocat")

        self.assertEqual(result, Ok(None))

    async def test_wrong_shape_is_ok_none(self) -> None:
        session = _session(_response(200, {"not": "a list"}))
        client = GitHubRestClient(session=session)

        result = await client.fetch_repositories("octocat")

        self.assertEqual(result, Ok(None))

    async def test_invalid_entity_is_ok_none(self) -> None:
        session = _session(_response(200, dict(RAW_USER, followers="many")))
        client = GitHubRestClient(session=session)

        result = await client.fetch_user("octocat")

        self.assertEqual(result, Ok(None))

    async def test_client_error_is_transport_failure(self) -> None:
        session = MagicMock()
        session.get = MagicMock(side_effect=aiohttp.ClientConnectionError("connection reset"))
        client = GitHubRestClient(session=session)

        result = await client.fetch_user("octocat")

        self.assertEqual(result, TransportFailure(message="connection reset"))
        self.assertEqual(result.describe(), "Network error: connection reset")

    async def test_timeout_is_transport_failure(self) -> None:
        response = _response(200, RAW_USER)
        response.__aenter__ = AsyncMock(side_effect=asyncio.TimeoutError())
        client = GitHubRestClient(session=_session(response))

        result = await client.fetch_user("octocat")

        self.assertEqual(result, TransportFailure(message="TimeoutError"))

    async def test_close_leaves_injected_session_open(self) -> None:
        session = MagicMock()
        session.close = AsyncMock()
        client = GitHubRestClient(session=session)

        await client.close()

        session.close.assert_not_awaited()
