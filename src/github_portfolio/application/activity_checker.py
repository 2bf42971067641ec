import logging
from datetime import datetime, timezone

from github_portfolio.domain.interfaces import IGitHubClient

logger = logging.getLogger(__name__)


def _as_utc(moment: datetime) -> datetime:
    return moment.replace(tzinfo=timezone.utc) if moment.tzinfo is None else moment


class ActivityChecker:
    """Tells whether the configured user did anything on GitHub after a given moment."""

    def __init__(self, github_client: IGitHubClient, username: str):
        self.github_client = github_client
        self.username = username

    async def has_activity_since(self, timestamp: datetime) -> bool:
        """
        True iff any event of the user was created strictly after `timestamp`.
        Naive timestamps are taken as UTC. Any failure is logged and reported as no activity.
        """
        timestamp = _as_utc(timestamp)

        try:
            events = await self.github_client.get_user_events(self.username)
            return any(_as_utc(event.created_at) > timestamp for event in events)
        except Exception as e:
            logger.error(f"Error checking user activity for {self.username}: {e}")
            return False
