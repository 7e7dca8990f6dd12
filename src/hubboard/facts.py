"""Hub-level facts: name, version, node health and URLs.

Every fact is best-effort.  A fact is looked up through an ordered list of
strategies; the first one returning a value wins and the last resort is a
sentinel (``Unknown`` / ``N/A``).  Nothing in here raises for a remote
failure.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable

from hubboard.gateway.gateway import ClusterGateway
from hubboard.models import NOT_AVAILABLE, UNKNOWN, HubFacts, NodeSummary, Session

Lookup = Callable[[], str | None]

# Installer-generated infrastructure names end in "-" + 5 random chars.
_RANDOM_SUFFIX = re.compile(r"-[a-z0-9]{5}$")
READY_CONDITION = "Ready"
SERVER_VERSION_LABEL = "Server Version:"


def sanitize_cluster_name(name: str) -> str:
    """Strip the random installer suffix: ``acm1-d7bnf`` -> ``acm1``."""
    return _RANDOM_SUFFIX.sub("", name)


def first_of(lookups: Iterable[Lookup], default: str) -> str:
    """Try *lookups* in order; return the first truthy result or *default*."""
    for lookup in lookups:
        value = lookup()
        if value:
            return value
    return default


def parse_node_summary(output: str) -> NodeSummary:
    """Count nodes in ``get nodes --no-headers`` output.

    A node is ready when its STATUS column lists the ``Ready`` condition
    (``Ready,SchedulingDisabled`` counts, ``NotReady`` does not).
    """
    total = ready = 0
    for line in output.splitlines():
        fields = line.split()
        if not fields:
            continue
        total += 1
        status = fields[1] if len(fields) > 1 else ""
        if READY_CONDITION in status.split(","):
            ready += 1
    return NodeSummary(total=total, ready=ready)


def parse_server_version(output: str) -> str | None:
    """Extract the server version from ``oc version`` text output."""
    for line in output.splitlines():
        line = line.strip()
        if line.startswith(SERVER_VERSION_LABEL):
            return line[len(SERVER_VERSION_LABEL):].strip() or None
    return None


class FactCollector:
    """Gathers :class:`HubFacts` for one reachable hub."""

    def __init__(self, gateway: ClusterGateway, session: Session, timeout: float) -> None:
        self._gateway = gateway
        self._session = session
        self._timeout = timeout

    def collect(self) -> HubFacts:
        return HubFacts(
            name=self.hub_name(),
            version=self.version(),
            nodes=self.nodes(),
            api_url=self.api_url(),
            console_url=self.console_url(),
            gitops_url=self.gitops_url(),
        )

    def hub_name(self) -> str:
        name = self._query(
            "get", "infrastructure", "cluster",
            "-o", "jsonpath={.status.infrastructureName}",
        )
        return sanitize_cluster_name(name) if name else UNKNOWN

    def version(self) -> str:
        """Platform version: ClusterVersion, then ``oc version``, then ``Unknown``."""
        return first_of(
            [self._desired_cluster_version, self._version_command],
            default=UNKNOWN,
        )

    def nodes(self) -> NodeSummary:
        return parse_node_summary(self._query("get", "nodes", "--no-headers"))

    def api_url(self) -> str:
        server = self._query("whoami", "--show-server")
        return server.removeprefix("https://") if server else NOT_AVAILABLE

    def console_url(self) -> str:
        return self._route_url("console", "openshift-console")

    def gitops_url(self) -> str:
        return self._route_url("openshift-gitops-server", "openshift-gitops")

    # --- version strategies ---

    def _desired_cluster_version(self) -> str | None:
        return self._query(
            "get", "clusterversion", "version",
            "-o", "jsonpath={.status.desired.version}",
        ) or None

    def _version_command(self) -> str | None:
        return parse_server_version(self._query("version"))

    # --- helpers ---

    def _route_url(self, route: str, namespace: str) -> str:
        host = self._query(
            "get", "route", route, "-n", namespace,
            "-o", "jsonpath={.spec.host}",
        )
        return f"https://{host}" if host else NOT_AVAILABLE

    def _query(self, *args: str) -> str:
        return self._gateway.query(self._session, list(args), self._timeout)
