"""Reconciliation of discovered implementations against registrations."""

from .model import CheckStatus, ContractCheckResult, EventKind, ReportEvent, ServiceCheckReport
from .reconcile import check_contract, reconcile_all
from .report import build_events, build_report_payload, emit_events, render_event, report_results
from .runner import VIOLATION_MESSAGE, enforce, run_service_check, scan

__all__ = [
    "CheckStatus",
    "ContractCheckResult",
    "EventKind",
    "ReportEvent",
    "ServiceCheckReport",
    "VIOLATION_MESSAGE",
    "build_events",
    "build_report_payload",
    "check_contract",
    "emit_events",
    "enforce",
    "reconcile_all",
    "render_event",
    "report_results",
    "run_service_check",
    "scan",
]
