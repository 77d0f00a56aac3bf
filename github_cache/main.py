import asyncio
import sys
import logging

from github_cache.application.cache_service import GitHubCacheService
from github_cache.config import load_config
from github_cache.domain.exceptions import ConfigurationError
from github_cache.infrastructure.cache_store import CacheStore
from github_cache.infrastructure.github_client import GitHubRestClient
from github_cache.interface.terminal_ui import TerminalUI

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)

async def main():
    # Load configuration from the environment and an optional .env file
    try:
        config = load_config()
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    logging.getLogger().setLevel(config.log_level)

    github_client = GitHubRestClient(
        base_url=config.api_url,
        timeout_seconds=config.request_timeout,
    )

    def build_service(use_persistent_storage: bool) -> GitHubCacheService:
        cache_store = CacheStore(persistent=use_persistent_storage, directory=config.cache_dir)
        return GitHubCacheService(remote_source=github_client, cache_store=cache_store)

    terminal_ui = TerminalUI(
        service_factory=build_service,
        persistent_storage=config.persistent_storage,
    )

    try:
        await terminal_ui.run()
    except KeyboardInterrupt:
        logger.info("Interrupted by user. Exiting gracefully.")
    except Exception as e:
        logger.exception(f"An unexpected error occurred: {e}")
        sys.exit(1)
    finally:
        await github_client.close()

def run() -> None:
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass

if __name__ == "__main__":
    run()
