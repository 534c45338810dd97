"""Fake visitor resolver for testing."""

from typing import Optional

from formgate.domains.access.protocols import VisitorResolverProtocol


class FakeVisitorResolver(VisitorResolverProtocol):
    """Returns a fixed current user id (None for anonymous)."""

    def __init__(self, user_id: Optional[int] = None) -> None:
        """Initialize with the user id to report."""
        self.user_id = user_id
        self._error: Optional[Exception] = None

    def fail_with(self, error: Exception) -> None:
        """Make every subsequent lookup raise ``error``."""
        self._error = error

    async def current_user(self) -> Optional[int]:
        """Return the configured user id."""
        if self._error is not None:
            raise self._error
        return self.user_id
