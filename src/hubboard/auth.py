"""Auth selection for a hub.

A hub entry either points at an existing kubeconfig (adopted as-is, no
network call) or carries an API URL with username and password, in which
case the gateway performs a login with TLS verification disabled.  Lab hubs
commonly run with self-signed certificates, so that relaxation is deliberate.
"""

from __future__ import annotations

from hubboard.gateway.gateway import ClusterGateway
from hubboard.models import AuthMode, HubConfig, Session


class HubError(Exception):
    """Raised when a single hub cannot be processed. Never fatal to a run."""


class InvalidHubConfigError(HubError):
    """Raised for a hub entry with neither ``kubeconfig`` nor ``api``."""


class LoginError(HubError):
    """Raised when a credential login is rejected or times out."""


def select_session(
    hub: HubConfig,
    gateway: ClusterGateway,
    timeout: float,
    index: int = 0,
) -> Session:
    """Resolve *hub* to exactly one authenticated session.

    Raises:
        InvalidHubConfigError: If the entry has no usable auth fields.
        LoginError: If the credential login fails.
    """
    mode = hub.auth_mode
    if mode is AuthMode.KUBECONFIG:
        assert hub.kubeconfig is not None
        return gateway.use_context(hub.kubeconfig)

    if mode is AuthMode.CREDENTIALS:
        assert hub.api is not None
        session = gateway.login(
            hub.api,
            hub.username or "",
            hub.password or "",
            timeout,
        )
        if session is None:
            raise LoginError(f"Failed to login to {hub.api}")
        return session

    raise InvalidHubConfigError(f"Invalid hub configuration at index {index}")
