"""Read-only queries over cached users and repositories. Never touches the network."""
from typing import List, Tuple

from github_cache.domain.models import GitHubUser, RepositoryRecord
from github_cache.infrastructure.cache_store import CacheKind, CacheStore


def _contains(text: str, query: str) -> bool:
    return query.casefold() in text.casefold()


def search_users_by_name(store: CacheStore, query: str) -> List[GitHubUser]:
    """Cached users whose login or display name contains ``query``, ignoring case."""
    return [
        user for user in store.all_users()
        if _contains(user.login, query) or (user.name is not None and _contains(user.name, query))
    ]


def search_repositories(store: CacheStore, query: str) -> Tuple[List[GitHubUser], List[RepositoryRecord]]:
    """
    Cached repositories whose name contains ``query``, ignoring case, together
    with the cached owners of those repositories.

    Each owner appears once however many of its repositories match; an owner
    whose profile was never fetched contributes repositories only.
    """
    users: List[GitHubUser] = []
    repositories: List[RepositoryRecord] = []

    for username, repos in store.repository_entries():
        matching = [repo for repo in repos if _contains(repo.name, query)]
        if not matching:
            continue

        repositories.extend(matching)
        user = store.get(CacheKind.USERS, username)
        if user is not None:
            users.append(user)

    return users, repositories
