"""Text rendering of hub reports.

Each hub becomes a short block: a header with version, node health and API
URL, a line with the console and GitOps URLs, and one line per spoke
cluster.  Spokes carry a compliance summary in compact mode, or a sorted
policy listing in detailed mode.  Colours come from ``click.style`` and are
dropped automatically when output is not a terminal.
"""

from __future__ import annotations

import json
from collections.abc import Iterable

import click

from hubboard.models import (
    NOT_AVAILABLE,
    Availability,
    ComplianceState,
    ComplianceSummary,
    HubReport,
    HubStatus,
    NodeSummary,
    SpokeReport,
)

BULLET = "●"
SQUARE = "▪"
# "Hub: " + name(19) + " (v" + version(10) + ")  " lines up the second row.
HEADER_INDENT = 40

_AVAILABILITY_COLORS = {
    Availability.AVAILABLE: "green",
    Availability.NOT_AVAILABLE: "red",
    Availability.UNKNOWN: "yellow",
}

_STATE_COLORS = {
    ComplianceState.COMPLIANT: "green",
    ComplianceState.NON_COMPLIANT: "red",
    ComplianceState.UNKNOWN: "yellow",
}


def format_nodes(nodes: NodeSummary) -> str:
    if nodes.has_alert:
        return (
            click.style(BULLET, fg="red")
            + f" Nodes: {nodes.ready} Ready, "
            + click.style(f"{nodes.not_ready} Not Ready", fg="red")
            + f" (Total: {nodes.total})"
        )
    color = "green" if nodes.total else "yellow"
    return click.style(BULLET, fg=color) + f" Nodes: {nodes.ready} Ready (Total: {nodes.total})"


def format_compliance(summary: ComplianceSummary | None) -> str:
    """``c/t`` in red when anything is non-compliant, ``N/A`` without policies."""
    if summary is None:
        return NOT_AVAILABLE
    color = "red" if summary.has_alert else "green"
    return click.style(f"{summary.compliant}/{summary.total}", fg=color)


def format_spoke(report: SpokeReport) -> list[str]:
    spoke = report.cluster
    color = _AVAILABILITY_COLORS[spoke.availability]
    line = (
        "  " + click.style(BULLET, fg=color)
        + " " + click.style(f"{spoke.name:<14}", fg="blue")
        + " | Status: " + click.style(f"{spoke.availability.value:<12}", fg=color)
        + f" | Ver: {spoke.openshift_version:<13}"
        + f" | Cfg: {spoke.configuration_version:<15}"
        + f" | API: {spoke.api_url}"
    )
    if report.policies is None:
        return [line + " | Policies: " + format_compliance(report.compliance)]

    if not report.policies:
        return [line, "    " + click.style("Policies:", fg="blue") + " None"]

    lines = [line, "    " + click.style("Policies:", fg="blue")]
    for status in report.policies:
        lines.append(
            "      " + click.style(SQUARE, fg=_STATE_COLORS[status.state])
            + f" {status.policy:<40} {status.state.value}"
        )
    return lines


def format_hub(report: HubReport) -> list[str]:
    """Render one hub report as display lines (without trailing newlines)."""
    if report.status is HubStatus.UNREACHABLE:
        return [
            "",
            click.style(f"Hub: {report.display_name:<19} [{report.message}]", fg="red"),
        ]
    if report.status is not HubStatus.OK or report.facts is None:
        return [click.style(f"Error: {report.message}", fg="red")]

    facts = report.facts
    lines = [
        "",
        click.style(f"Hub: {report.display_name:<19} (v{facts.version:<10})", fg="blue")
        + f"  |  {format_nodes(facts.nodes)}  | API: {facts.api_url}",
        f"{'':>{HEADER_INDENT}}|  Console: {facts.console_url}  | GitOps: {facts.gitops_url}",
        click.style("Spoke Clusters", fg="blue"),
    ]
    if not report.spokes:
        lines.append("  No spoke clusters found")
    for spoke in report.spokes:
        lines.extend(format_spoke(spoke))
    return lines


def render_json(reports: Iterable[HubReport]) -> str:
    return json.dumps([r.model_dump(mode="json") for r in reports], indent=2)
