"""Data models for OAuth access tokens."""

from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, Field

# Early-expiry buffer: 10% of the token lifetime, capped at 5 minutes
MAX_EXPIRY_BUFFER = timedelta(minutes=5)


def expiry_buffer(expires_in: int | float) -> timedelta:
    """Compute how long before the real expiry a token is treated as expired.

    Args:
        expires_in: Token lifetime in seconds, as returned by the token endpoint.

    Returns:
        ``min(5 minutes, expires_in * 100 ms)``.
    """
    return min(MAX_EXPIRY_BUFFER, timedelta(milliseconds=expires_in * 100))


class AccessToken(BaseModel):
    """Client-credentials access token held in memory.

    Attributes:
        value: Bearer token string.
        expires_at: UTC instant after which the token must not be used.
    """

    value: str = Field(..., description="Bearer token")
    expires_at: datetime = Field(..., description="Buffered expiry time (UTC)")

    @classmethod
    def issued(cls, value: str, expires_in: int | float, now: datetime) -> "AccessToken":
        """Create a token issued at ``now`` with the early-expiry buffer applied."""
        expires_at = now + timedelta(seconds=expires_in) - expiry_buffer(expires_in)
        return cls(value=value, expires_at=expires_at)

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the token can no longer be used.

        Args:
            now: Current time. Defaults to ``datetime.now(timezone.utc)``.

        Returns:
            True if ``now >= expires_at``.
        """
        if now is None:
            now = datetime.now(timezone.utc)
        return now >= self.expires_at
