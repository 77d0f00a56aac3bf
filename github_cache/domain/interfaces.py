"""Remote Source interface (port) for fetching GitHub user data.

The application layer depends on this contract, not on the aiohttp client,
so tests can swap in a fake source.
"""
from abc import ABC, abstractmethod
from typing import List

from github_cache.domain.models import GitHubUser, RepositoryRecord
from github_cache.domain.results import RemoteResult


class RemoteSource(ABC):
    """Stateless capability that fetches a single user or a user's repositories."""

    @abstractmethod
    async def fetch_user(self, username: str) -> RemoteResult[GitHubUser]:
        """Fetch one user profile.

        Returns:
            Ok(user), Ok(None) for an empty body, HttpError or TransportFailure.
        """
        ...

    @abstractmethod
    async def fetch_repositories(self, username: str) -> RemoteResult[List[RepositoryRecord]]:
        """Fetch the repository list of one user.

        Returns:
            Ok(repositories), Ok(None) for an empty body, HttpError or TransportFailure.
        """
        ...

    async def close(self) -> None:
        """Release any open connections."""
        return None
