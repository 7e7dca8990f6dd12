"""hubboard: status board for fleets of hub clusters."""

__version__ = "0.3.0"

from hubboard.auth import HubError, InvalidHubConfigError, LoginError, select_session
from hubboard.compliance import ComplianceCache, decode_policy_statuses, load_policy_statuses
from hubboard.config import ConfigError, find_config, load_hubs, resolve_timeout
from hubboard.gateway import ClusterGateway, OcGateway
from hubboard.models import (
    Availability,
    ComplianceState,
    ComplianceSummary,
    DisplayMode,
    HubConfig,
    HubFacts,
    HubReport,
    HubStatus,
    NodeSummary,
    PolicyStatus,
    Session,
    SpokeCluster,
    SpokeReport,
)
from hubboard.probe import probe
from hubboard.processor import HubProcessor, HubState, poll_hubs

__all__ = [
    "Availability",
    "ClusterGateway",
    "ComplianceCache",
    "ComplianceState",
    "ComplianceSummary",
    "ConfigError",
    "decode_policy_statuses",
    "DisplayMode",
    "find_config",
    "HubConfig",
    "HubError",
    "HubFacts",
    "HubProcessor",
    "HubReport",
    "HubState",
    "HubStatus",
    "InvalidHubConfigError",
    "load_hubs",
    "load_policy_statuses",
    "LoginError",
    "NodeSummary",
    "OcGateway",
    "poll_hubs",
    "PolicyStatus",
    "probe",
    "resolve_timeout",
    "select_session",
    "Session",
    "SpokeCluster",
    "SpokeReport",
    "__version__",
]
