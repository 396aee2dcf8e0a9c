from __future__ import annotations

from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable

from ..classfile.model import TypeMetadata
from ..classfile.reader import MetadataParser
from ..config.model import ServiceCheckConfig
from ..core.logging import LogSink, RecordingLogSink
from ..registration.reader import read_registered
from ..resolve.resolver import find_implementations
from ..resolve.store import ArtifactStore
from .model import ContractCheckResult


def _fmt(names: Iterable[str]) -> str:
    return "[" + ", ".join(sorted(names)) + "]"


def check_contract(
    graph: Mapping[str, TypeMetadata],
    root: Path,
    contract: str,
    package_filter: Iterable[str] = (),
    *,
    store: ArtifactStore | None = None,
    parser: MetadataParser | None = None,
    log: LogSink | None = None,
) -> ContractCheckResult:
    log = log or RecordingLogSink(min_level="error")
    implementations = find_implementations(graph, contract, package_filter, store, log=log)
    log.debug(f"Found {len(implementations)} implementations of {contract}: {_fmt(implementations)}")
    registered = read_registered(root, contract, parser=parser, log=log)
    log.debug(f"Found {len(registered)} registered services for {contract}: {_fmt(registered)}")
    return ContractCheckResult.from_sets(contract, implementations, registered)


def reconcile_all(
    graph: Mapping[str, TypeMetadata],
    root: Path,
    config: ServiceCheckConfig,
    *,
    store: ArtifactStore | None = None,
    parser: MetadataParser | None = None,
    log: LogSink | None = None,
) -> tuple[bool, tuple[ContractCheckResult, ...]]:
    def _one(contract: str) -> ContractCheckResult:
        return check_contract(
            graph,
            root,
            contract,
            config.packages_to_scan,
            store=store,
            parser=parser,
            log=log,
        )

    if config.jobs > 1 and len(config.service_interfaces) > 1:
        with ThreadPoolExecutor(max_workers=config.jobs) as pool:
            results = tuple(pool.map(_one, config.service_interfaces))
    else:
        results = tuple(_one(contract) for contract in config.service_interfaces)
    violations = any(result.has_violation(config.dangling_is_violation) for result in results)
    return violations, results
