"""Spoke cluster enumeration.

All managed clusters are fetched with one ``get managedclusters -o json``
call and reduced to :class:`SpokeCluster` records.  The hub's own
registration (``local-cluster``) is always skipped.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from hubboard.gateway.gateway import ClusterGateway
from hubboard.models import (
    LOCAL_CLUSTER,
    NOT_AVAILABLE,
    UNKNOWN,
    Availability,
    Session,
    SpokeCluster,
)

logger = logging.getLogger(__name__)

AVAILABLE_CONDITION = "ManagedClusterConditionAvailable"
OPENSHIFT_VERSION_LABEL = "openshiftVersion"
CONFIGURATION_VERSION_LABEL = "configuration-version"


def parse_managed_clusters(raw: str) -> list[SpokeCluster]:
    """Turn a ``managedclusters`` JSON list into spoke clusters.

    Undecodable output yields an empty list; items without a name are
    ignored.
    """
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.debug("managedclusters output is not valid JSON")
        return []
    if not isinstance(data, dict):
        return []

    spokes: list[SpokeCluster] = []
    for item in data.get("items") or []:
        spoke = _parse_item(item)
        if spoke is not None:
            spokes.append(spoke)
    return spokes


def _parse_item(item: Any) -> SpokeCluster | None:
    if not isinstance(item, dict):
        return None
    metadata = item.get("metadata") or {}
    name = metadata.get("name")
    if not name or name == LOCAL_CLUSTER:
        return None

    labels = metadata.get("labels") or {}
    client_configs = (item.get("spec") or {}).get("managedClusterClientConfigs") or []
    first_config = client_configs[0] if client_configs else None
    api_url = first_config.get("url") if isinstance(first_config, dict) else None

    return SpokeCluster(
        name=name,
        availability=Availability.from_condition(_available_status(item)),
        openshift_version=labels.get(OPENSHIFT_VERSION_LABEL) or UNKNOWN,
        configuration_version=labels.get(CONFIGURATION_VERSION_LABEL) or NOT_AVAILABLE,
        api_url=api_url or NOT_AVAILABLE,
    )


def _available_status(item: dict[str, Any]) -> str | None:
    for condition in (item.get("status") or {}).get("conditions") or []:
        if isinstance(condition, dict) and condition.get("type") == AVAILABLE_CONDITION:
            return condition.get("status")
    return None


def list_spoke_clusters(
    gateway: ClusterGateway,
    session: Session,
    timeout: float,
) -> list[SpokeCluster]:
    """Fetch every spoke cluster of the hub in a single call."""
    raw = gateway.query(session, ["get", "managedclusters", "-o", "json"], timeout)
    return parse_managed_clusters(raw)
