from datetime import datetime
from typing import Any, Dict
from github_cache.domain.models import GitHubUser, RepositoryRecord

# Wire field name -> domain attribute name. The snapshot files use the wire names too.
USER_FIELDS: Dict[str, str] = {
    'id': 'id',
    'login': 'login',
    'name': 'name',
    'avatar_url': 'avatar_url',
    'followers': 'followers_count',
    'following': 'following_count',
    'created_at': 'created_at',
    'public_repos': 'public_repos',
    'bio': 'bio',
}

REPOSITORY_FIELDS: Dict[str, str] = {
    'id': 'id',
    'name': 'name',
    'full_name': 'full_name',
    'description': 'description',
    'html_url': 'html_url',
    'language': 'language',
    'stargazers_count': 'stars',
    'fork': 'fork',
}


def _parse_timestamp(raw_date: Any) -> datetime:
    if not raw_date:
        raise ValueError("created_at is required to build GitHubUser.")
    if isinstance(raw_date, datetime):
        return raw_date
    return datetime.fromisoformat(str(raw_date).replace("Z", "+00:00"))


def _format_timestamp(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


class GitHubTranslator:
    """
    Anti-corruption layer that translates GitHub REST JSON objects into domain models and back.
    """

    @staticmethod
    def user_to_domain(raw_user: Dict[str, Any]) -> GitHubUser:
        """
        Transforms a raw ``/users/{username}`` object into a GitHubUser.

        Args:
            raw_user (Dict[str, Any]): The JSON object from the REST response or a snapshot file.

        Returns:
            GitHubUser: The domain model instance representing the user.

        Raises:
            ValueError: If created_at is missing or any field fails validation.
        """
        values = {attr: raw_user.get(wire) for wire, attr in USER_FIELDS.items()}
        values['created_at'] = _parse_timestamp(values['created_at'])
        return GitHubUser(**values)

    @staticmethod
    def user_to_wire(user: GitHubUser) -> Dict[str, Any]:
        raw_user = {wire: getattr(user, attr) for wire, attr in USER_FIELDS.items()}
        raw_user['created_at'] = _format_timestamp(user.created_at)
        return raw_user

    @staticmethod
    def repository_to_domain(raw_repo: Dict[str, Any]) -> RepositoryRecord:
        """Transforms one element of a ``/users/{username}/repos`` array into a RepositoryRecord."""
        values = {attr: raw_repo.get(wire) for wire, attr in REPOSITORY_FIELDS.items()}
        return RepositoryRecord(**values)

    @staticmethod
    def repository_to_wire(repository: RepositoryRecord) -> Dict[str, Any]:
        return {wire: getattr(repository, attr) for wire, attr in REPOSITORY_FIELDS.items()}
