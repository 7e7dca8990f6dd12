"""Cluster API gateways.

Gateways: OcGateway (the ``oc`` CLI via subprocess).
"""

from hubboard.gateway.gateway import ClusterGateway
from hubboard.gateway.oc_gateway import OcGateway

__all__ = [
    "ClusterGateway",
    "OcGateway",
]
