from __future__ import annotations

import json
from typing import Any, Iterable

from ..config.model import EnforcementStrategy
from ..contracts.validate import validate_self
from ..core.logging import LogSink
from .model import CheckStatus, ContractCheckResult, EventKind, ReportEvent, ServiceCheckReport

CHECK_RUN = "svcregctl.check-run.v1"
BORDER = "─" * 45


def build_events(
    result: ContractCheckResult,
    strategy: EnforcementStrategy,
    *,
    dangling_is_violation: bool = False,
) -> list[ReportEvent]:
    contract = result.contract
    if result.clean:
        return [ReportEvent("info", contract, EventKind.SUCCESS, {"count": len(result.implementations)})]

    fail_mode = strategy is EnforcementStrategy.FAIL
    unregistered_level = "error" if fail_mode else "warn"
    dangling_level = "error" if fail_mode and dangling_is_violation else "warn"
    block_level = "error" if result.status(strategy, dangling_is_violation) is CheckStatus.FAIL else "warn"

    events = [
        ReportEvent(block_level, contract, EventKind.BORDER),
        ReportEvent(block_level, contract, EventKind.HEADER),
    ]
    if result.unregistered:
        events.append(
            ReportEvent(unregistered_level, contract, EventKind.UNREGISTERED_HEADER, {"count": len(result.unregistered)})
        )
        events.extend(
            ReportEvent(unregistered_level, contract, EventKind.UNREGISTERED, {"name": name})
            for name in sorted(result.unregistered)
        )
    if result.dangling:
        events.append(ReportEvent(dangling_level, contract, EventKind.DANGLING_HEADER, {"count": len(result.dangling)}))
        events.extend(
            ReportEvent(dangling_level, contract, EventKind.DANGLING, {"name": name}) for name in sorted(result.dangling)
        )
    events.append(ReportEvent(block_level, contract, EventKind.BORDER))
    return events


def render_event(event: ReportEvent) -> str:
    kind = event.kind
    payload = event.payload
    if kind is EventKind.SUCCESS:
        return f"✓ [{event.contract}] All implementations properly registered ({payload['count']} implementations)"
    if kind is EventKind.BORDER:
        return BORDER
    if kind is EventKind.HEADER:
        return f"Service Interface: {event.contract}"
    if kind is EventKind.UNREGISTERED_HEADER:
        return f"✗ Unregistered implementations ({payload['count']}):"
    if kind is EventKind.DANGLING_HEADER:
        return f"! Registered but non-existent implementations ({payload['count']}):"
    return f"    {payload['name']}"


def emit_events(events: Iterable[ReportEvent], log: LogSink) -> None:
    for event in events:
        if log.enabled(event.level):
            log.emit(event.level, render_event(event), contract=event.contract, event=event.kind.value)


def report_results(
    results: Iterable[ContractCheckResult],
    strategy: EnforcementStrategy,
    log: LogSink,
    *,
    dangling_is_violation: bool = False,
) -> None:
    for result in results:
        emit_events(build_events(result, strategy, dangling_is_violation=dangling_is_violation), log)


def _row(result: ContractCheckResult, strategy: EnforcementStrategy, dangling_is_violation: bool) -> dict[str, Any]:
    return {
        "contract": result.contract,
        "status": result.status(strategy, dangling_is_violation).value,
        "implementations": sorted(result.implementations),
        "registered": sorted(result.registered),
        "unregistered": sorted(result.unregistered),
        "dangling": sorted(result.dangling),
    }


def build_report_payload(
    report: ServiceCheckReport,
    *,
    run_id: str = "",
    dangling_is_violation: bool = False,
) -> dict[str, Any]:
    rows = [_row(result, report.strategy, dangling_is_violation) for result in report.results]
    payload: dict[str, Any] = {
        "schema_name": CHECK_RUN,
        "schema_version": 1,
        "tool": "svcregctl",
        "kind": "check-run",
        "run_id": run_id,
        "status": report.status.value,
        "strategy": report.strategy.value,
        "summary": {
            "contracts": len(rows),
            "implementations": sum(len(result.implementations) for result in report.results),
            "unregistered": sum(len(result.unregistered) for result in report.results),
            "dangling": sum(len(result.dangling) for result in report.results),
            "violations": report.violations,
        },
        "rows": rows,
    }
    return validate_self(CHECK_RUN, payload)


def render_json(payload: dict[str, Any]) -> str:
    return json.dumps(payload, sort_keys=True, ensure_ascii=False)


def render_text(payload: dict[str, Any]) -> str:
    out: list[str] = []
    for row in payload.get("rows", []):
        out.append(
            f"{str(row['status']).upper()} {row['contract']} "
            f"implementations={len(row['implementations'])} unregistered={len(row['unregistered'])} "
            f"dangling={len(row['dangling'])}"
        )
    summary = payload.get("summary", {})
    out.append(
        f"summary: status={payload.get('status')} strategy={payload.get('strategy')} "
        f"contracts={int(summary.get('contracts', 0))} unregistered={int(summary.get('unregistered', 0))} "
        f"dangling={int(summary.get('dangling', 0))}"
    )
    return "\n".join(out)


__all__ = [
    "BORDER",
    "CHECK_RUN",
    "build_events",
    "build_report_payload",
    "emit_events",
    "render_event",
    "render_json",
    "render_text",
    "report_results",
]
