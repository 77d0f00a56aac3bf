import unittest
from datetime import datetime, timezone

from pydantic import ValidationError

from github_cache.infrastructure.acl import GitHubTranslator


RAW_USER = {
    "id": 583231,
    "login": "octocat",
    "name": "The Octocat",
    "avatar_url": "https://avatars.githubusercontent.com/u/583231?v=4",
    "followers": 9000,
    "following": 9,
    "created_at": "2011-01-25T18:44:36Z",
    "public_repos": 8,
    "bio": None,
    "site_admin": False,
}

RAW_REPO = {
    "id": 1296269,
    "name": "Hello-World",
    "full_name": "octocat/Hello-World",
    "description": "My first repository on GitHub!",
    "html_url": "https://github.com/octocat/Hello-World",
    "language": None,
    "stargazers_count": 2500,
    "fork": False,
    "watchers_count": 2500,
}


class TestGitHubTranslator(unittest.TestCase):
    def test_user_to_domain_renames_wire_fields(self) -> None:
        user = GitHubTranslator.user_to_domain(RAW_USER)

        self.assertEqual(user.login, "octocat")
        self.assertEqual(user.followers_count, 9000)
        self.assertEqual(user.following_count, 9)
        self.assertIsNone(user.bio)
        self.assertEqual(
            user.created_at,
            datetime(2011, 1, 25, 18, 44, 36, tzinfo=timezone.utc),
        )

    def test_user_missing_created_at_raises(self) -> None:
        raw_user = dict(RAW_USER)
        del raw_user["created_at"]

        with self.assertRaises(ValueError):
            GitHubTranslator.user_to_domain(raw_user)

    def test_user_missing_login_raises_validation_error(self) -> None:
        raw_user = dict(RAW_USER)
        del raw_user["login"]

        with self.assertRaises(ValidationError):
            GitHubTranslator.user_to_domain(raw_user)

    def test_user_to_wire_uses_wire_names_and_z_suffix(self) -> None:
        user = GitHubTranslator.user_to_domain(RAW_USER)

        raw_user = GitHubTranslator.user_to_wire(user)

        self.assertEqual(raw_user["followers"], 9000)
        self.assertEqual(raw_user["created_at"], "2011-01-25T18:44:36Z")
        self.assertNotIn("followers_count", raw_user)
        self.assertNotIn("site_admin", raw_user)
        self.assertEqual(GitHubTranslator.user_to_domain(raw_user), user)

    def test_repository_to_domain_maps_stargazers_count(self) -> None:
        repo = GitHubTranslator.repository_to_domain(RAW_REPO)

        self.assertEqual(repo.stars, 2500)
        self.assertEqual(repo.full_name, "octocat/Hello-World")
        self.assertIsNone(repo.language)
        self.assertFalse(repo.fork)

    def test_repository_to_wire_restores_stargazers_count(self) -> None:
        repo = GitHubTranslator.repository_to_domain(RAW_REPO)

        raw_repo = GitHubTranslator.repository_to_wire(repo)

        self.assertEqual(raw_repo["stargazers_count"], 2500)
        self.assertNotIn("stars", raw_repo)

    def test_domain_models_are_frozen(self) -> None:
        repo = GitHubTranslator.repository_to_domain(RAW_REPO)

        with self.assertRaises(ValidationError):
            repo.name = "renamed"
