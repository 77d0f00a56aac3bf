import logging
from typing import Callable, List, Optional

from github_cache.application.cache_service import GitHubCacheService
from github_cache.domain.models import GitHubUser
from github_cache.domain.results import Ok

logger = logging.getLogger(__name__)

MENU = """
===== GitHub User Information Retrieval System =====
1. Retrieve user information by username
2. Display the list of users in memory
3. Search by username among users in memory
4. Search by repository name among data in memory
5. Exit the program"""

EXIT_CHOICE = 5


class TerminalUI:
    """
    Interactive text menu over GitHubCacheService. Only the service's public
    entry points are used; all output goes through ``output_fn``.
    """

    def __init__(
            self,
            service_factory: Callable[[bool], GitHubCacheService],
            persistent_storage: Optional[bool] = None,
            input_fn: Callable[[str], str] = input,
            output_fn: Callable[[str], None] = print,
    ):
        self.service_factory = service_factory
        self.persistent_storage = persistent_storage
        self._input = input_fn
        self._print = output_fn
        self.service: Optional[GitHubCacheService] = None

    def _ask(self, prompt: str) -> Optional[str]:
        try:
            return self._input(prompt).strip()
        except EOFError:
            return None

    async def run(self) -> None:
        use_persistent_storage = self.persistent_storage
        if use_persistent_storage is None:
            answer = self._ask("Do you want to use persistent storage for GitHub data? (y/n): ")
            use_persistent_storage = (answer or "").lower() == "y"

        self.service = self.service_factory(use_persistent_storage)
        if use_persistent_storage:
            self._print("Using persistent file storage for GitHub data.")
        else:
            self._print("Using in-memory storage only.")

        while True:
            self._print(MENU)
            raw_choice = self._ask(f"Enter your choice (1-{EXIT_CHOICE}): ")
            if raw_choice is None:
                self._print("Exiting program...")
                return

            choice = self._parse_choice(raw_choice)
            if choice == 1:
                await self.retrieve_user_info()
            elif choice == 2:
                self.display_cached_users()
            elif choice == 3:
                self.search_by_username()
            elif choice == 4:
                self.search_by_repository_name()
            elif choice == EXIT_CHOICE:
                self._print("Exiting program...")
                return
            else:
                self._print("Invalid choice. Please try again.")

            if self._ask("\nPress Enter to continue...") is None:
                return

    @staticmethod
    def _parse_choice(raw_choice: str) -> int:
        try:
            return int(raw_choice)
        except ValueError:
            return -1

    async def retrieve_user_info(self) -> None:
        username = self._ask("Enter GitHub username: ")
        if not username:
            self._print("Username cannot be empty")
            return

        user_result = await self.service.get_user_info(username)
        if not isinstance(user_result, Ok):
            self._print(f"Error: {user_result.describe()}")
            return

        self._print_user_info(user_result.value)

        repos_result = await self.service.get_user_repositories(username)
        if not isinstance(repos_result, Ok):
            self._print(f"Failed to fetch repositories: {repos_result.describe()}")
            return

        repos = repos_result.value
        self._print(f"\nRepositories ({len(repos)}):")
        for repo in repos:
            self._print(f"  - {repo.name}: {repo.description or 'No description'}")

    def display_cached_users(self) -> None:
        users = self.service.all_users()
        if not users:
            self._print("No users in memory. Retrieve some users first.")
            return

        self._print(f"\n=== Users in Memory ({len(users)}) ===")
        for user in users:
            self._print(f"{user.login} ({user.name or 'No name'}) - {user.public_repos} repositories")

    def search_by_username(self) -> None:
        query = self._ask("Enter search query: ")
        if not query:
            self._print("Search query cannot be empty")
            return

        found_users = self.service.search_users_by_name(query)
        if not found_users:
            self._print(f"No users found matching '{query}'")
            return

        self._print(f"\n=== Found Users ({len(found_users)}) ===")
        self._print_user_lines(found_users)

    def search_by_repository_name(self) -> None:
        query = self._ask("Enter repository name to search: ")
        if not query:
            self._print("Search query cannot be empty")
            return

        owners, repos = self.service.search_repositories(query)
        if not repos:
            self._print(f"No repositories found matching '{query}'")
            return

        self._print(f"\n=== Found Repositories ({len(repos)}) ===")
        for repo in repos:
            self._print(f"{repo.full_name}: {repo.description or 'No description'}")

        if owners:
            self._print(f"\n=== Owners in Memory ({len(owners)}) ===")
            self._print_user_lines(owners)

    def _print_user_lines(self, users: List[GitHubUser]) -> None:
        for user in users:
            self._print(f"{user.login} ({user.name or 'No name'})")

    def _print_user_info(self, user: GitHubUser) -> None:
        self._print("\n=== User Information ===")
        self._print(f"Username: {user.login}")
        self._print(f"Name: {user.name or 'Not provided'}")
        self._print(f"Bio: {user.bio or 'Not provided'}")
        self._print(f"Followers: {user.followers_count}")
        self._print(f"Following: {user.following_count}")
        self._print(f"Public Repositories: {user.public_repos}")
        self._print(f"Account Created: {user.created_at.strftime('%Y-%m-%d')}")
