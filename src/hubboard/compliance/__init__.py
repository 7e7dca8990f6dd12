"""Policy compliance: wire-format decoder and per-hub cache."""

from hubboard.compliance.cache import ComplianceCache
from hubboard.compliance.decoder import (
    PolicyRecord,
    PolicyStatusDecoder,
    decode_policy_statuses,
    load_policy_statuses,
    policy_query_args,
)

__all__ = [
    "ComplianceCache",
    "PolicyRecord",
    "PolicyStatusDecoder",
    "decode_policy_statuses",
    "load_policy_statuses",
    "policy_query_args",
]
