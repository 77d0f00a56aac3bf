import json
import logging
import os
import tempfile
import threading
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError

from github_cache.domain.exceptions import PersistenceError
from github_cache.domain.models import GitHubUser, RepositoryRecord
from github_cache.infrastructure.acl import GitHubTranslator

logger = logging.getLogger(__name__)

DEFAULT_USERS_FILENAME = "github_users.json"
DEFAULT_REPOS_FILENAME = "github_repos.json"

CachedValue = Union[GitHubUser, List[RepositoryRecord]]


class CacheKind(str, Enum):
    USERS = "users"
    REPOSITORIES = "repositories"


def _decode_users(raw_users: Dict[str, Any]) -> Dict[str, GitHubUser]:
    return {
        username: GitHubTranslator.user_to_domain(raw_user)
        for username, raw_user in raw_users.items()
    }


def _decode_repositories(raw_repos: Dict[str, Any]) -> Dict[str, List[RepositoryRecord]]:
    decoded = {}
    for username, repos in raw_repos.items():
        if not isinstance(repos, list):
            raise ValueError(f"repositories for '{username}' must be an array")
        decoded[username] = [GitHubTranslator.repository_to_domain(repo) for repo in repos]
    return decoded


class CacheStore:
    """
    In-memory cache of GitHub users and repository lists, keyed by exact username.

    When persistent, each map is mirrored to its own JSON snapshot file: loaded
    once at construction and rewritten in full after every put. Snapshot
    failures are logged and absorbed; the in-memory maps stay authoritative.
    """

    def __init__(
            self,
            persistent: bool = False,
            directory: Union[str, Path] = ".",
            users_filename: str = DEFAULT_USERS_FILENAME,
            repos_filename: str = DEFAULT_REPOS_FILENAME,
    ):
        self.persistent = persistent
        self.directory = Path(directory)
        self.paths = {
            CacheKind.USERS: self.directory / users_filename,
            CacheKind.REPOSITORIES: self.directory / repos_filename,
        }
        self._maps: Dict[CacheKind, Dict[str, Any]] = {
            CacheKind.USERS: {},
            CacheKind.REPOSITORIES: {},
        }
        # Serialises mutation together with the snapshot write that follows it.
        self._lock = threading.Lock()

        if self.persistent:
            self.load()

    def get(self, kind: CacheKind, username: str) -> Optional[CachedValue]:
        value = self._maps[kind].get(username)
        # Callers get their own list; the stored one is never handed out.
        if kind is CacheKind.REPOSITORIES and value is not None:
            return list(value)
        return value

    def put(self, kind: CacheKind, username: str, value: CachedValue) -> None:
        with self._lock:
            if kind is CacheKind.REPOSITORIES:
                value = list(value)
            self._maps[kind][username] = value
            if self.persistent:
                self._save_locked(kind)

    def all_users(self) -> List[GitHubUser]:
        with self._lock:
            return list(self._maps[CacheKind.USERS].values())

    def repository_entries(self) -> List[Tuple[str, List[RepositoryRecord]]]:
        """(username, repositories) pairs in insertion order."""
        with self._lock:
            return [(username, list(repos)) for username, repos in self._maps[CacheKind.REPOSITORIES].items()]

    @property
    def user_count(self) -> int:
        return len(self._maps[CacheKind.USERS])

    @property
    def repository_owner_count(self) -> int:
        return len(self._maps[CacheKind.REPOSITORIES])

    def load(self) -> None:
        """Bulk-load both snapshot files. A map whose file is missing or broken starts empty."""
        with self._lock:
            self._maps[CacheKind.USERS] = self._load_map(CacheKind.USERS, _decode_users)
            self._maps[CacheKind.REPOSITORIES] = self._load_map(CacheKind.REPOSITORIES, _decode_repositories)

    def save(self, kind: Optional[CacheKind] = None) -> None:
        """Rewrite the snapshot of one map, or of both when no kind is given."""
        with self._lock:
            kinds = [kind] if kind is not None else list(CacheKind)
            for each in kinds:
                self._save_locked(each)

    def _load_map(self, kind: CacheKind, decode: Callable[[Dict[str, Any]], Dict[str, Any]]) -> Dict[str, Any]:
        path = self.paths[kind]
        if not path.exists():
            logger.info(f"No {kind.value} snapshot at {path}; starting empty.")
            return {}

        try:
            loaded = self._read_snapshot(path, decode)
        except PersistenceError as e:
            logger.error(f"Error loading cached {kind.value}: {e}")
            return {}

        logger.info(f"Loaded {len(loaded)} cached {kind.value} entries from {path}.")
        return loaded

    @staticmethod
    def _read_snapshot(path: Path, decode: Callable[[Dict[str, Any]], Dict[str, Any]]) -> Dict[str, Any]:
        try:
            with open(path, encoding="utf-8") as handle:
                document = json.load(handle)
        except OSError as e:
            raise PersistenceError(str(path), f"Could not read snapshot: {e}") from e
        except ValueError as e:
            raise PersistenceError(str(path), f"Malformed JSON: {e}") from e

        if not isinstance(document, dict):
            raise PersistenceError(str(path), "Snapshot must be a JSON object")

        try:
            return decode(document)
        except (ValidationError, ValueError, TypeError, AttributeError) as e:
            raise PersistenceError(str(path), f"Invalid snapshot entry: {e}") from e

    def _save_locked(self, kind: CacheKind) -> None:
        path = self.paths[kind]
        try:
            self._write_snapshot(path, self._encode(kind))
        except PersistenceError as e:
            logger.error(f"Error saving cached {kind.value}: {e}")
            return
        logger.debug(f"Saved {len(self._maps[kind])} cached {kind.value} entries to {path}.")

    def _encode(self, kind: CacheKind) -> Dict[str, Any]:
        if kind is CacheKind.USERS:
            return {
                username: GitHubTranslator.user_to_wire(user)
                for username, user in self._maps[kind].items()
            }
        return {
            username: [GitHubTranslator.repository_to_wire(repo) for repo in repos]
            for username, repos in self._maps[kind].items()
        }

    @staticmethod
    def _write_snapshot(path: Path, document: Dict[str, Any]) -> None:
        """Write to a temporary file beside the target, then atomically rename over it."""
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, indent=2)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(str(path), f"Could not write snapshot: {e}") from e
