"""
Connected-session context.

A ``SessionContext`` is built once per connected session by the session
guard and passed explicitly into every workflow call. The guard bumps its
generation whenever the account or network changes, which makes every
context handed out before the change stale.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class SessionContext:
    identity: str
    network_id: int
    generation: int = 0
    # local signing account (eth_account.LocalAccount); None means the provider signs
    signer: Optional[Any] = field(default=None, repr=False, compare=False)

    @property
    def short_identity(self) -> str:
        if len(self.identity) <= 10:
            return self.identity
        return f"{self.identity[:6]}...{self.identity[-4:]}"
