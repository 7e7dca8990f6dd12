"""Hub processor: turns one configured hub into a :class:`HubReport`.

The processor selects a session, probes the hub, gathers hub facts, lists
spoke clusters, decodes the bulk policy query into a compliance cache and
summarises it per spoke.  It is the only owner of the session and the cache
for the hub being processed, and drops both before returning.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable, Iterator

from hubboard.auth import HubError, InvalidHubConfigError, LoginError, select_session
from hubboard.compliance.cache import ComplianceCache
from hubboard.compliance.decoder import load_policy_statuses, policy_query_args
from hubboard.config import DEFAULT_TIMEOUT
from hubboard.facts import FactCollector
from hubboard.gateway.gateway import ClusterGateway
from hubboard.models import (
    UNKNOWN,
    DisplayMode,
    HubConfig,
    HubFacts,
    HubReport,
    HubStatus,
    Session,
    SpokeCluster,
    SpokeReport,
)
from hubboard.probe import probe, probe_timeout
from hubboard.spokes import list_spoke_clusters

logger = logging.getLogger(__name__)

UNREACHABLE_MESSAGE = "UNREACHABLE - Skipping"


class HubState(enum.StrEnum):
    CONFIG_VALID = "config_valid"
    AUTH_SELECTED = "auth_selected"
    CONNECTIVITY_CHECKED = "connectivity_checked"
    FACTS_GATHERED = "facts_gathered"
    SPOKES_ENUMERATED = "spokes_enumerated"
    COMPLIANCE_COMPUTED = "compliance_computed"
    DONE = "done"


_ERROR_STATUS: dict[type[HubError], HubStatus] = {
    InvalidHubConfigError: HubStatus.INVALID_CONFIG,
    LoginError: HubStatus.LOGIN_FAILED,
}


class HubProcessor:
    """Processes hubs one at a time.

    Lifecycle per hub:
      1. Select a session (kubeconfig or login)
      2. Probe connectivity (unreachable -> done)
      3. Gather hub facts
      4. Enumerate spoke clusters
      5. Decode the bulk policy query into a fresh cache
      6. Summarise compliance per spoke (plus listing in full mode)
      7. Clear the cache and release the session

    Expected failures (invalid config, failed login, unreachable hub) are
    returned as reports; they never raise.
    """

    def __init__(
        self,
        gateway: ClusterGateway,
        timeout: float = DEFAULT_TIMEOUT,
        mode: DisplayMode = DisplayMode.SHORT,
    ) -> None:
        self._gateway = gateway
        self._timeout = timeout
        self._mode = mode
        self.state = HubState.DONE

    def process(self, hub: HubConfig, index: int = 0) -> HubReport:
        self._enter(HubState.CONFIG_VALID, index)
        try:
            session = select_session(hub, self._gateway, self._timeout, index=index)
        except HubError as e:
            self._enter(HubState.DONE, index)
            logger.warning("Skipping hub at index %d: %s", index, e)
            return HubReport(
                index=index,
                display_name=hub.name or UNKNOWN,
                status=_ERROR_STATUS.get(type(e), HubStatus.ERROR),
                message=str(e),
            )

        self._enter(HubState.AUTH_SELECTED, index)
        try:
            return self._process_session(hub, index, session)
        finally:
            self._gateway.release(session)
            self._enter(HubState.DONE, index)

    def _process_session(self, hub: HubConfig, index: int, session: Session) -> HubReport:
        reachable = probe(self._gateway, session, probe_timeout(self._timeout))
        self._enter(HubState.CONNECTIVITY_CHECKED, index)
        if not reachable:
            logger.info("Hub at index %d is unreachable, skipping", index)
            return HubReport(
                index=index,
                display_name=hub.name or UNKNOWN,
                status=HubStatus.UNREACHABLE,
                message=UNREACHABLE_MESSAGE,
            )

        facts = FactCollector(self._gateway, session, self._timeout).collect()
        self._enter(HubState.FACTS_GATHERED, index)

        spokes = list_spoke_clusters(self._gateway, session, self._timeout)
        self._enter(HubState.SPOKES_ENUMERATED, index)

        with ComplianceCache() as cache:
            raw = self._gateway.query(session, policy_query_args(), self._timeout)
            written = load_policy_statuses(cache, raw)
            logger.debug(
                "Hub at index %d: %d policies, %d compliance entries",
                index, len(cache.policies), written,
            )
            spoke_reports = [self._spoke_report(cache, spoke) for spoke in spokes]
        self._enter(HubState.COMPLIANCE_COMPUTED, index)

        return self._hub_report(hub, index, facts, spoke_reports)

    def _spoke_report(self, cache: ComplianceCache, spoke: SpokeCluster) -> SpokeReport:
        policies = None
        if self._mode is DisplayMode.FULL:
            policies = cache.list_detailed(spoke.name)
        return SpokeReport(
            cluster=spoke,
            compliance=cache.summarize(spoke.name),
            policies=policies,
        )

    def _hub_report(
        self,
        hub: HubConfig,
        index: int,
        facts: HubFacts,
        spokes: list[SpokeReport],
    ) -> HubReport:
        return HubReport(
            index=index,
            display_name=hub.name or facts.name,
            status=HubStatus.OK,
            facts=facts,
            spokes=spokes,
        )

    def _enter(self, state: HubState, index: int) -> None:
        self.state = state
        logger.debug("Hub at index %d -> %s", index, state)


def poll_hubs(
    hubs: Iterable[HubConfig],
    processor: HubProcessor,
    names: Iterable[str] = (),
) -> Iterator[HubReport]:
    """Process *hubs* sequentially, in order, yielding one report per hub.

    When *names* is given only hubs whose configured ``name`` is listed are
    processed.  No failure of one hub stops the others.
    """
    wanted = set(names)
    for index, hub in enumerate(hubs):
        if wanted and hub.name not in wanted:
            continue
        try:
            report = processor.process(hub, index)
        except Exception:
            logger.exception("Failed to process hub at index %d", index)
            report = HubReport(
                index=index,
                display_name=hub.name or UNKNOWN,
                status=HubStatus.ERROR,
                message=f"Failed to process hub at index {index}",
            )
        yield report
