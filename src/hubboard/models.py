"""Core data models for hubboard.

Defines the schemas for:
- Hub configuration entries (how to reach a hub)
- Sessions (an authenticated connection to one hub)
- Hub facts (name, version, nodes, URLs)
- Spoke clusters and their availability
- Policy compliance (decoded statuses and per-cluster summaries)
- Hub and spoke reports (renderer input)
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field, computed_field

UNKNOWN = "Unknown"
NOT_AVAILABLE = "N/A"
LOCAL_CLUSTER = "local-cluster"

# --- Enums ---


class AuthMode(enum.StrEnum):
    KUBECONFIG = "kubeconfig"
    CREDENTIALS = "credentials"


class DisplayMode(enum.StrEnum):
    SHORT = "short"
    FULL = "full"


class Availability(enum.StrEnum):
    AVAILABLE = "Available"
    NOT_AVAILABLE = "NotAvailable"
    UNKNOWN = "Unknown"

    @classmethod
    def from_condition(cls, status: str | None) -> Availability:
        """Map a ManagedClusterConditionAvailable status to an availability."""
        if status == "True":
            return cls.AVAILABLE
        if status == "False":
            return cls.NOT_AVAILABLE
        return cls.UNKNOWN


class ComplianceState(enum.StrEnum):
    COMPLIANT = "Compliant"
    NON_COMPLIANT = "NonCompliant"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, raw: str) -> ComplianceState:
        """Empty and unrecognised state strings decode to UNKNOWN."""
        try:
            return cls(raw.strip())
        except ValueError:
            return cls.UNKNOWN


class HubStatus(enum.StrEnum):
    OK = "ok"
    UNREACHABLE = "unreachable"
    INVALID_CONFIG = "invalid_config"
    LOGIN_FAILED = "login_failed"
    ERROR = "error"


# --- Configuration ---


class HubConfig(BaseModel):
    """One configured hub.

    Loaded from the ``clusters`` list of the config file. Exactly one auth
    mode is expected; an entry without either is kept so that it can be
    reported, rather than rejected at load time.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    name: str | None = None
    kubeconfig: str | None = None
    api: str | None = None
    username: str | None = None
    password: str | None = None

    @property
    def auth_mode(self) -> AuthMode | None:
        if self.kubeconfig:
            return AuthMode.KUBECONFIG
        if self.api:
            return AuthMode.CREDENTIALS
        return None


class Session(BaseModel):
    """An authenticated connection to a single hub.

    Every gateway call takes the session explicitly. ``temporary`` marks a
    kubeconfig file created by the gateway itself (after a login) that must
    be removed when the hub's processing ends.
    """

    model_config = ConfigDict(frozen=True)

    kubeconfig: str
    auth_mode: AuthMode
    server: str | None = None
    temporary: bool = False


# --- Hub facts ---


class NodeSummary(BaseModel):
    total: int = Field(0, ge=0)
    ready: int = Field(0, ge=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def not_ready(self) -> int:
        return self.total - self.ready

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_alert(self) -> bool:
        return self.not_ready > 0


class HubFacts(BaseModel):
    """Facts gathered from a reachable hub. Lookups never abort the hub."""

    name: str = UNKNOWN
    version: str = UNKNOWN
    nodes: NodeSummary = Field(default_factory=NodeSummary)
    api_url: str = NOT_AVAILABLE
    console_url: str = NOT_AVAILABLE
    gitops_url: str = NOT_AVAILABLE


# --- Spoke clusters ---


class SpokeCluster(BaseModel):
    """A cluster managed by a hub (never the hub's own ``local-cluster``)."""

    name: str
    availability: Availability = Availability.UNKNOWN
    openshift_version: str = UNKNOWN
    configuration_version: str = NOT_AVAILABLE
    api_url: str = NOT_AVAILABLE


# --- Policy compliance ---


class PolicyStatus(BaseModel):
    """Compliance state of one policy on one cluster."""

    model_config = ConfigDict(frozen=True)

    policy: str
    state: ComplianceState


class ComplianceSummary(BaseModel):
    """Aggregate compliance for one spoke cluster.

    Only built for clusters with at least one policy; "not applicable" is
    expressed as the absence of a summary.
    """

    compliant: int = Field(ge=0)
    non_compliant: int = Field(0, ge=0)
    total: int = Field(ge=1)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_alert(self) -> bool:
        return self.non_compliant >= 1


# --- Reports (renderer input) ---


class SpokeReport(BaseModel):
    """A spoke cluster plus the compliance data surfaced for it.

    ``policies`` is ``None`` in compact mode and a (possibly empty) sorted
    list in detailed mode.
    """

    cluster: SpokeCluster
    compliance: ComplianceSummary | None = None
    policies: list[PolicyStatus] | None = None


class HubReport(BaseModel):
    """Outcome of processing one configured hub."""

    index: int
    display_name: str
    status: HubStatus
    message: str = ""
    facts: HubFacts | None = None
    spokes: list[SpokeReport] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def reachable(self) -> bool:
        return self.status == HubStatus.OK
