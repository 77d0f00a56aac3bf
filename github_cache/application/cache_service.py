import logging
from typing import Awaitable, Callable, List, Optional, Tuple

from github_cache.application import search
from github_cache.domain.interfaces import RemoteSource
from github_cache.domain.models import GitHubUser, RepositoryRecord
from github_cache.domain.results import EmptyPayload, FetchResult, Ok, RemoteResult, TransportFailure
from github_cache.infrastructure.cache_store import CacheKind, CacheStore

logger = logging.getLogger(__name__)


class GitHubCacheService:
    """
    Service responsible for cache-first retrieval of GitHub users and their
    repositories.

    A lookup is served from the cache store when possible; otherwise the
    remote source is called and a successful result is written through to the
    store (and its snapshot files, when persistent). Failures are returned as
    typed results and are never cached. Entries are never refreshed.
    """

    def __init__(
            self,
            remote_source: RemoteSource,
            cache_store: Optional[CacheStore] = None,
            use_persistent_storage: bool = False,
    ):
        self.remote_source = remote_source
        self.cache_store = cache_store if cache_store is not None else CacheStore(persistent=use_persistent_storage)

    async def get_user_info(self, username: str) -> FetchResult[GitHubUser]:
        return await self._read_through(
            CacheKind.USERS, username, self.remote_source.fetch_user, "User data is null",
        )

    async def get_user_repositories(self, username: str) -> FetchResult[List[RepositoryRecord]]:
        return await self._read_through(
            CacheKind.REPOSITORIES, username, self.remote_source.fetch_repositories, "Repository data is null",
        )

    def all_users(self) -> List[GitHubUser]:
        return self.cache_store.all_users()

    def search_users_by_name(self, query: str) -> List[GitHubUser]:
        return search.search_users_by_name(self.cache_store, query)

    def search_repositories(self, query: str) -> Tuple[List[GitHubUser], List[RepositoryRecord]]:
        return search.search_repositories(self.cache_store, query)

    async def _read_through(
        self,
        kind: CacheKind,
        username: str,
        fetch: Callable[[str], Awaitable[RemoteResult]],
        empty_message: str,
    ) -> FetchResult:
        cached = self.cache_store.get(kind, username)
        if cached is not None:
            logger.debug(f"Cache hit for {kind.value} '{username}'.")
            return Ok(cached)

        logger.debug(f"Cache miss for {kind.value} '{username}'. Fetching from remote source.")
        try:
            result = await fetch(username)
        except Exception as e:
            # A raising source is reported as a transport failure.
            logger.exception(f"Remote source raised while fetching {kind.value} '{username}': {e}")
            return TransportFailure(message=str(e) or type(e).__name__)

        if not isinstance(result, Ok):
            logger.info(f"Fetching {kind.value} '{username}' failed: {result.describe()}")
            return result

        if result.value is None:
            logger.info(f"Fetching {kind.value} '{username}' returned no data.")
            return EmptyPayload(message=empty_message)

        self.cache_store.put(kind, username, result.value)
        logger.info(f"Cached {kind.value} '{username}'.")
        # Hand back what the store now holds so later hits return the same value.
        return Ok(self.cache_store.get(kind, username))
