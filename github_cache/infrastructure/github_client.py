import aiohttp
import asyncio
import logging
from urllib.parse import quote
from typing import Any, Callable, List, Optional

from pydantic import ValidationError

from github_cache.domain.interfaces import RemoteSource
from github_cache.domain.models import GitHubUser, RepositoryRecord
from github_cache.domain.results import HttpError, Ok, RemoteResult, TransportFailure
from github_cache.infrastructure.acl import GitHubTranslator

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT_SECONDS = 30.0


class GitHubRestClient(RemoteSource):
    """
    Client for the GitHub REST API user endpoints.
    Maps every response onto a RemoteResult; no exception escapes a fetch.
    """

    def __init__(
            self,
            base_url: str = DEFAULT_API_URL,
            timeout_seconds: Optional[float] = DEFAULT_TIMEOUT_SECONDS,
            session: Optional[aiohttp.ClientSession] = None,
    ):
        self.headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "github-cache",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        self.api_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds) if timeout_seconds else None
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "GitHubRestClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        await self.close()
        return False

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    async def fetch_user(self, username: str) -> RemoteResult[GitHubUser]:
        return await self._fetch(
            f"users/{quote(username, safe='')}", "user", dict, GitHubTranslator.user_to_domain,
        )

    async def fetch_repositories(self, username: str) -> RemoteResult[List[RepositoryRecord]]:
        def translate(raw_repos: List[Any]) -> List[RepositoryRecord]:
            return [GitHubTranslator.repository_to_domain(raw_repo) for raw_repo in raw_repos]

        return await self._fetch(
            f"users/{quote(username, safe='')}/repos", "repositories", list, translate,
        )

    async def _fetch(
        self, path: str, subject: str, expected_type: type, translate: Callable[[Any], Any],
    ) -> RemoteResult:
        """GET one endpoint and translate its JSON body into domain objects."""
        url = f"{self.api_url}/{path}"
        session = self._get_session()

        try:
            async with session.get(url, headers=self.headers, timeout=self.timeout) as response:
                if response.status != 200:
                    message = await self._error_message(response)
                    logger.warning(f"GET {url} failed with status {response.status}: {message}")
                    return HttpError(status_code=response.status, message=message, subject=subject)

                try:
                    data = await response.json(content_type=None)
                except ValueError as e:
                    logger.warning(f"GET {url} returned an undecodable body: {e}")
                    return Ok(None)

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            message = str(e) or type(e).__name__
            logger.warning(f"GET {url} failed: {message}")
            return TransportFailure(message=message)

        if data is None:
            logger.warning(f"GET {url} returned an empty body.")
            return Ok(None)

        if not isinstance(data, expected_type):
            logger.warning(f"GET {url} returned {type(data).__name__}, expected {expected_type.__name__}.")
            return Ok(None)

        try:
            payload = translate(data)
        except (ValidationError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"GET {url} returned a {subject} payload that failed validation: {e}")
            return Ok(None)

        logger.info(f"Fetched {subject} from {url}.")
        return Ok(payload)

    @staticmethod
    async def _error_message(response: aiohttp.ClientResponse) -> str:
        """Prefer the server's ``error`` (or GitHub's ``message``) field over the status line."""
        try:
            body = await response.json(content_type=None)
        except (ValueError, aiohttp.ClientError):
            body = None

        if isinstance(body, dict):
            message = body.get("error") or body.get("message")
            if message:
                return str(message)

        return response.reason or f"HTTP {response.status}"
