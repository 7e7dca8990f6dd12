"""Per-hub compliance cache.

Holds ``(cluster, policy) -> state`` for exactly one hub.  The hub processor
opens it as a context manager, fills it once from the bulk policy query and
queries it per spoke; leaving the ``with`` block empties it, whatever the
outcome, so that no policy data can leak into the next hub.

Usage::

    with ComplianceCache() as cache:
        load_policy_statuses(cache, raw)
        summary = cache.summarize("spoke1")
"""

from __future__ import annotations

from types import TracebackType

from hubboard.models import ComplianceState, ComplianceSummary, PolicyStatus


class ComplianceCache:
    """In-memory compliance table for one hub's processing scope."""

    def __init__(self) -> None:
        self._by_cluster: dict[str, dict[str, ComplianceState]] = {}
        self._policies: set[str] = set()

    def __enter__(self) -> ComplianceCache:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.clear()

    def __len__(self) -> int:
        return sum(len(policies) for policies in self._by_cluster.values())

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        cluster, policy = key
        return policy in self._by_cluster.get(cluster, {})

    @property
    def policies(self) -> list[str]:
        """Names of all decoded policies, including ones with no cluster status."""
        return sorted(self._policies)

    @property
    def clusters(self) -> list[str]:
        return sorted(self._by_cluster)

    def add_policy(self, policy: str) -> None:
        self._policies.add(policy)

    def put(self, cluster: str, policy: str, state: ComplianceState) -> None:
        """Insert or overwrite one entry. Called by the decoder only."""
        self._policies.add(policy)
        self._by_cluster.setdefault(cluster, {})[policy] = state

    def get(self, cluster: str, policy: str) -> ComplianceState | None:
        return self._by_cluster.get(cluster, {}).get(policy)

    def summarize(self, cluster: str) -> ComplianceSummary | None:
        """Count compliant and non-compliant policies for *cluster*.

        Returns ``None`` ("not applicable") when the cluster has no policies,
        so callers never confuse it with zero compliant out of zero.
        """
        states = list(self._by_cluster.get(cluster, {}).values())
        if not states:
            return None
        return ComplianceSummary(
            compliant=states.count(ComplianceState.COMPLIANT),
            non_compliant=states.count(ComplianceState.NON_COMPLIANT),
            total=len(states),
        )

    def list_detailed(self, cluster: str) -> list[PolicyStatus]:
        """All policies of *cluster* sorted by policy name; ``[]`` if none."""
        policies = self._by_cluster.get(cluster, {})
        return [
            PolicyStatus(policy=name, state=policies[name])
            for name in sorted(policies)
        ]

    def clear(self) -> None:
        self._by_cluster.clear()
        self._policies.clear()
