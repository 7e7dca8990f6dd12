"""Connectivity probe.

One cheap ``/version`` request decides whether a hub is worth any further
work.  It runs with a shorter timeout than regular calls so that a dead hub
costs as little as possible.
"""

from __future__ import annotations

import logging

from hubboard.gateway.gateway import ClusterGateway
from hubboard.models import Session

logger = logging.getLogger(__name__)

PROBE_TIMEOUT = 2.0
PROBE_ARGS = ["get", "--raw", "/version"]


def probe_timeout(call_timeout: float) -> float:
    """Probe timeout: 2s, or two thirds of a per-call timeout of 3s or less."""
    return min(PROBE_TIMEOUT, call_timeout * 2 / 3)


def probe(gateway: ClusterGateway, session: Session, timeout: float) -> bool:
    """Return whether the hub behind *session* answers within *timeout*.

    Timeouts, DNS, TLS and auth failures all look the same: unreachable.
    """
    reachable = bool(gateway.query(session, list(PROBE_ARGS), timeout))
    logger.debug(
        "Probe of %s: %s",
        session.server or session.kubeconfig,
        "reachable" if reachable else "unreachable",
    )
    return reachable
