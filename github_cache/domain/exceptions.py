class GitHubCacheException(Exception):
    """Base exception for all github-cache errors."""
    pass

class PersistenceError(GitHubCacheException):
    """Raised when a cache snapshot file cannot be read, decoded or written."""
    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{message} ({path})")

class ConfigurationError(GitHubCacheException):
    """Raised when the environment configuration is invalid."""
    pass
