"""ClusterGateway protocol.

The gateway is the only component that talks to a hub's control plane.
Any object with ``login()``, ``use_context()``, ``query()`` and
``release()`` methods satisfies the protocol; no inheritance required.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from hubboard.models import Session


@runtime_checkable
class ClusterGateway(Protocol):
    """Protocol for read-only hub access.

    All calls except ``login`` are read-only. ``query`` never raises for
    remote failures: it returns an empty string instead of partial output.
    """

    def login(
        self,
        api: str,
        username: str,
        password: str,
        timeout: float,
    ) -> Session | None:
        """Log in with credentials. Returns ``None`` if the login fails."""
        ...

    def use_context(self, kubeconfig: str) -> Session:
        """Adopt an existing kubeconfig without any network call."""
        ...

    def query(self, session: Session, args: list[str], timeout: float) -> str:
        """Run a read-only query and return its raw text output ("" on failure)."""
        ...

    def release(self, session: Session) -> None:
        """Drop anything the gateway created for *session*."""
        ...
