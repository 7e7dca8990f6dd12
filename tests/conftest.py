"""Shared fixtures: a scripted, call-recording gateway and sample hub data.

No test talks to a real cluster; every query is answered from a table keyed
by the exact argument list.
"""

from __future__ import annotations

import json

import pytest

from hubboard.compliance.decoder import policy_query_args
from hubboard.models import AuthMode, Session
from hubboard.probe import PROBE_ARGS

# ---------------------------------------------------------------------------
# Query keys (exact argument lists issued by the code under test)
# ---------------------------------------------------------------------------

PROBE = tuple(PROBE_ARGS)
INFRA_NAME = ("get", "infrastructure", "cluster", "-o", "jsonpath={.status.infrastructureName}")
CLUSTER_VERSION = ("get", "clusterversion", "version", "-o", "jsonpath={.status.desired.version}")
VERSION_COMMAND = ("version",)
NODES = ("get", "nodes", "--no-headers")
WHOAMI = ("whoami", "--show-server")
CONSOLE_ROUTE = (
    "get", "route", "console", "-n", "openshift-console", "-o", "jsonpath={.spec.host}",
)
GITOPS_ROUTE = (
    "get", "route", "openshift-gitops-server", "-n", "openshift-gitops",
    "-o", "jsonpath={.spec.host}",
)
MANAGED_CLUSTERS = ("get", "managedclusters", "-o", "json")
POLICIES = tuple(policy_query_args())

NODES_OUTPUT = (
    "master-0   Ready      control-plane,master   12d   v1.27.6+f67aeb3\n"
    "master-1   Ready      control-plane,master   12d   v1.27.6+f67aeb3\n"
    "worker-0   NotReady   worker                 12d   v1.27.6+f67aeb3"
)

POLICY_WIRE = (
    "policyA|spoke1:Compliant,spoke2:NonCompliant,@"
    "policyB|spoke1:Compliant,@"
)


def managed_cluster(
    name: str,
    available: str | None = "True",
    labels: dict[str, str] | None = None,
    url: str | None = None,
) -> dict:
    item: dict = {
        "metadata": {"name": name, "labels": labels or {}},
        "spec": {},
        "status": {"conditions": []},
    }
    if available is not None:
        item["status"]["conditions"].append(
            {"type": "ManagedClusterConditionAvailable", "status": available},
        )
    if url:
        item["spec"]["managedClusterClientConfigs"] = [{"url": url}]
    return item


MANAGED_CLUSTERS_OUTPUT = json.dumps({
    "items": [
        managed_cluster("local-cluster"),
        managed_cluster(
            "spoke1",
            labels={"openshiftVersion": "4.14.8", "configuration-version": "v1.2"},
            url="https://api.spoke1.lab:6443",
        ),
        managed_cluster("spoke2", available="False", labels={"openshiftVersion": "4.13.2"}),
        managed_cluster("spoke3", available=None),
    ],
})


def healthy_responses() -> dict[tuple[str, ...], str]:
    return {
        PROBE: '{"major": "1", "minor": "27", "gitVersion": "v1.27.6+f67aeb3"}',
        INFRA_NAME: "acm1-d7bnf",
        CLUSTER_VERSION: "4.14.8",
        NODES: NODES_OUTPUT,
        WHOAMI: "https://api.acm1.lab:6443",
        CONSOLE_ROUTE: "console-openshift-console.apps.acm1.lab",
        GITOPS_ROUTE: "openshift-gitops-server-openshift-gitops.apps.acm1.lab",
        MANAGED_CLUSTERS: MANAGED_CLUSTERS_OUTPUT,
        POLICIES: POLICY_WIRE,
    }


class FakeGateway:
    """Scripted ClusterGateway that records every call.

    ``responses`` answers any session; ``by_kubeconfig`` overrides it per
    session kubeconfig (login sessions use ``login:<api>``).
    """

    def __init__(
        self,
        responses: dict[tuple[str, ...], str] | None = None,
        by_kubeconfig: dict[str, dict[tuple[str, ...], str]] | None = None,
        login_ok: bool = True,
    ) -> None:
        self.responses = dict(responses or {})
        self.by_kubeconfig = dict(by_kubeconfig or {})
        self.login_ok = login_ok
        self.calls: list[tuple[str, ...]] = []
        self.timeouts: list[float] = []
        self.logins: list[tuple[str, str, str, float]] = []
        self.contexts: list[str] = []
        self.released: list[Session] = []

    def login(self, api: str, username: str, password: str, timeout: float) -> Session | None:
        self.logins.append((api, username, password, timeout))
        if not self.login_ok:
            return None
        return Session(
            kubeconfig=f"login:{api}",
            auth_mode=AuthMode.CREDENTIALS,
            server=api,
            temporary=True,
        )

    def use_context(self, kubeconfig: str) -> Session:
        self.contexts.append(kubeconfig)
        return Session(kubeconfig=kubeconfig, auth_mode=AuthMode.KUBECONFIG)

    def query(self, session: Session, args: list[str], timeout: float) -> str:
        key = tuple(args)
        self.calls.append(key)
        self.timeouts.append(timeout)
        table = self.by_kubeconfig.get(session.kubeconfig, self.responses)
        return table.get(key, "")

    def release(self, session: Session) -> None:
        self.released.append(session)

    def count(self, key: tuple[str, ...]) -> int:
        return self.calls.count(key)


@pytest.fixture()
def gateway() -> FakeGateway:
    return FakeGateway(healthy_responses())


@pytest.fixture()
def session() -> Session:
    return Session(kubeconfig="/tmp/kubeconfig-acm1", auth_mode=AuthMode.KUBECONFIG)
