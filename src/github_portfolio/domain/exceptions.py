from typing import Optional


class PortfolioException(Exception):
    """Base exception for all portfolio-related errors."""
    pass

class GitHubApiException(PortfolioException):
    """Raised when the GitHub REST API answers with an error that is not retried."""
    def __init__(self, status: int, url: str, message: str = "GitHub API request failed."):
        self.status = status
        self.url = url
        super().__init__(f"{message} Status: {status} URL: {url}")

class RateLimitExceededException(PortfolioException):
    """Raised when the GitHub REST rate limit is exhausted."""
    def __init__(self, reset_at: Optional[str], message: str = "GitHub API rate limit exceeded."):
        self.reset_at = reset_at
        super().__init__(f"{message} Resets at: {reset_at}")

class AggregationException(PortfolioException):
    """Raised when a listing or search call fails and no result set can be built."""
    def __init__(self, context: str, message: str = "Failed to aggregate repositories."):
        self.context = context
        super().__init__(f"{message} ({context})")

class ConfigurationException(PortfolioException):
    """Raised when a required setting is missing or invalid."""
    pass
