from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from floralgallery.domain import SessionContext


@runtime_checkable
class SessionGuardPort(Protocol):
    """
    Owner of the signing identity and the active network.

    Workflows only read from the guard. ``require_network`` must ask the
    live provider every time it is called.
    """

    async def current_identity(self) -> Optional[str]:
        """Connected account, or None."""

    async def current_network(self) -> Optional[int]:
        """Active chain id, or None when unknown."""

    async def require_network(self, expected: int) -> bool:
        """True when the active network is ``expected``."""

    async def snapshot(self) -> SessionContext:
        """Build a context for the current account and network."""

    def is_current(self, session: SessionContext) -> bool:
        """False once the account or network changed after ``session`` was built."""
