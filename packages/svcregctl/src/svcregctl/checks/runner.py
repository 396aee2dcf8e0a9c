from __future__ import annotations

from pathlib import Path
from typing import Iterable

from ..classfile.reader import ClassFileParser, MetadataParser
from ..config.model import EnforcementStrategy, ServiceCheckConfig
from ..core.errors import violation_error
from ..core.logging import LogSink
from ..resolve.graph import build_graph
from ..resolve.store import ArtifactStore
from .model import CheckStatus, ServiceCheckReport
from .reconcile import reconcile_all
from .report import report_results

VIOLATION_MESSAGE = "Service registration violations found. See messages above for details."


def _overall_status(violations: bool, clean: bool, fail_mode: bool) -> CheckStatus:
    if violations and fail_mode:
        return CheckStatus.FAIL
    if clean:
        return CheckStatus.PASS
    return CheckStatus.WARN


def scan(
    config: ServiceCheckConfig,
    output_root: Path,
    classpath: Iterable[Path] = (),
    *,
    log: LogSink,
    parser: MetadataParser | None = None,
) -> ServiceCheckReport:
    """Scans and reports every contract without enforcing the strategy."""
    output_root = Path(output_root)
    if not output_root.exists():
        log.info("No compiled classes found, skipping service registration check")
        return ServiceCheckReport(status=CheckStatus.SKIP, strategy=config.strategy, violations=False)

    log.info(f"Checking service registration for interfaces: {list(config.service_interfaces)}")
    log.info(f"Using enforcement strategy: {config.strategy.value}")
    log.info(f"Scanning packages: {list(config.packages_to_scan) if config.packages_to_scan else 'ALL'}")

    parser = parser or ClassFileParser()
    graph = build_graph(output_root, config.packages_to_scan, parser=parser, log=log)
    with ArtifactStore(output_root, classpath, parser=parser, log=log) as store:
        violations, results = reconcile_all(graph, output_root, config, store=store, parser=parser, log=log)

    report_results(results, config.strategy, log, dangling_is_violation=config.dangling_is_violation)
    clean = all(result.clean for result in results)
    return ServiceCheckReport(
        status=_overall_status(violations, clean, config.fail_mode),
        strategy=config.strategy,
        violations=violations,
        results=results,
    )


def enforce(report: ServiceCheckReport) -> ServiceCheckReport:
    if report.violations and report.strategy is EnforcementStrategy.FAIL:
        raise violation_error(VIOLATION_MESSAGE)
    return report


def run_service_check(
    config: ServiceCheckConfig,
    output_root: Path,
    classpath: Iterable[Path] = (),
    *,
    log: LogSink,
    parser: MetadataParser | None = None,
) -> ServiceCheckReport:
    return enforce(scan(config, output_root, classpath, log=log, parser=parser))
