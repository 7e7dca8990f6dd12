"""Decoder for the compact policy-status wire format.

A single bulk query asks the hub for every policy in every namespace and has
the API server flatten the result with a jsonpath template into one string::

    policyA|spoke1:Compliant,spoke2:NonCompliant,@policyB|spoke1:Compliant,@

Records are separated by ``@``; a record is the policy name, ``|``, then a
comma-separated list of ``cluster:state`` pairs.  The decoder is a
character-level state machine (NAME -> CLUSTER -> STATE) so that every
malformed input has a defined outcome:

- empty input or an empty record (e.g. after a trailing ``@``) is skipped
- a record with no pairs still yields its policy name
- a pair without ``:`` or with an empty cluster name is dropped
- an empty or unrecognised state becomes ``Unknown``
- pairs under an empty policy name are dropped
"""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from hubboard.models import ComplianceState

if TYPE_CHECKING:
    from hubboard.compliance.cache import ComplianceCache

RECORD_SEPARATOR = "@"
NAME_SEPARATOR = "|"
PAIR_SEPARATOR = ","
STATE_SEPARATOR = ":"

POLICY_RESOURCE = "policies.policy.open-cluster-management.io"
POLICY_JSONPATH = (
    "{range .items[*]}{.metadata.name}{\"|\"}"
    "{range .status.status[*]}{.clustername}{\":\"}{.compliant}{\",\"}{end}"
    "{\"@\"}{end}"
)


def policy_query_args() -> list[str]:
    """Arguments of the bulk policy query that produces the wire format."""
    return ["get", POLICY_RESOURCE, "-A", "-o", f"jsonpath={POLICY_JSONPATH}"]


@dataclass(frozen=True)
class PolicyRecord:
    """One decoded record: a policy and its per-cluster states."""

    policy: str
    statuses: tuple[tuple[str, ComplianceState], ...] = ()


class _Token(enum.Enum):
    NAME = enum.auto()
    CLUSTER = enum.auto()
    STATE = enum.auto()


class PolicyStatusDecoder:
    """Tokenizing state machine for the policy-status wire format.

    Not thread-safe; create one per decode or reuse sequentially.
    """

    def __init__(self) -> None:
        self._reset()

    def decode(self, text: str) -> Iterator[PolicyRecord]:
        """Yield every well-formed record of *text* in input order."""
        self._reset()
        for ch in text:
            if ch == RECORD_SEPARATOR:
                record = self._end_record()
                if record is not None:
                    yield record
            else:
                self._feed(ch)
        # The last record may lack its trailing separator.
        record = self._end_record()
        if record is not None:
            yield record

    def _reset(self) -> None:
        self._token = _Token.NAME
        self._name: list[str] = []
        self._cluster: list[str] = []
        self._state: list[str] = []
        self._pairs: list[tuple[str, ComplianceState]] = []

    def _feed(self, ch: str) -> None:
        if self._token is _Token.NAME:
            if ch == NAME_SEPARATOR:
                self._token = _Token.CLUSTER
            else:
                self._name.append(ch)
        elif self._token is _Token.CLUSTER:
            if ch == STATE_SEPARATOR:
                self._token = _Token.STATE
            elif ch == PAIR_SEPARATOR:
                self._end_pair()
            else:
                self._cluster.append(ch)
        elif ch == PAIR_SEPARATOR:
            self._end_pair()
        else:
            # Everything after the first ':' belongs to the state.
            self._state.append(ch)

    def _end_pair(self) -> None:
        cluster = "".join(self._cluster).strip()
        if self._token is _Token.STATE and cluster:
            self._pairs.append((cluster, ComplianceState.parse("".join(self._state))))
        self._cluster.clear()
        self._state.clear()
        self._token = _Token.CLUSTER

    def _end_record(self) -> PolicyRecord | None:
        if self._token is not _Token.NAME:
            self._end_pair()
        name = "".join(self._name).strip()
        pairs = tuple(self._pairs)
        self._reset()
        if not name:
            return None
        return PolicyRecord(policy=name, statuses=pairs)


def decode_policy_statuses(text: str) -> list[PolicyRecord]:
    """Decode a whole bulk policy response."""
    return list(PolicyStatusDecoder().decode(text))


def load_policy_statuses(cache: ComplianceCache, text: str) -> int:
    """Decode *text* into *cache*. Returns the number of entries written.

    This is the only code path that writes to a :class:`ComplianceCache`.
    Duplicate ``(cluster, policy)`` pairs overwrite each other.
    """
    written = 0
    for record in PolicyStatusDecoder().decode(text):
        cache.add_policy(record.policy)
        for cluster, state in record.statuses:
            cache.put(cluster, record.policy, state)
            written += 1
    return written
