"""Decides which concrete types realize a contract.

A type realizes a contract when the contract is the type itself, one of its
declared interfaces, or is realized by any interface or superclass reachable
from it. Edges are followed through the scanned graph first and the artifact
store second; names neither can resolve end that path.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Iterable

from ..classfile.model import TypeMetadata
from ..classfile.names import ROOT_TYPE, matches_packages, to_internal, to_qualified
from ..core.logging import LogSink, RecordingLogSink
from .store import ArtifactStore


def _lookup(
    name: str,
    graph: Mapping[str, TypeMetadata],
    store: ArtifactStore | None,
    log: LogSink,
    edge: str,
) -> TypeMetadata | None:
    found = graph.get(name)
    if found is None and store is not None:
        found = store.resolve(name)
    if found is None:
        log.debug(f"Could not load {edge}: {name}")
    return found


def is_realized_by(
    candidate: TypeMetadata,
    contract: str,
    graph: Mapping[str, TypeMetadata],
    store: ArtifactStore | None = None,
    visited: set[str] | None = None,
    *,
    log: LogSink | None = None,
) -> bool:
    target = to_internal(contract)
    seen = visited if visited is not None else set()
    log = log or RecordingLogSink(min_level="error")
    stack = [candidate]
    while stack:
        node = stack.pop()
        if node.name in seen:
            continue
        seen.add(node.name)
        if node.name == target or target in node.interfaces:
            return True
        pending: list[TypeMetadata] = []
        for interface in sorted(node.interfaces):
            if interface in seen:
                continue
            resolved = _lookup(interface, graph, store, log, "interface")
            if resolved is not None:
                pending.append(resolved)
        if node.super_name and node.super_name != ROOT_TYPE and node.super_name not in seen:
            resolved = _lookup(node.super_name, graph, store, log, "superclass")
            if resolved is not None:
                pending.append(resolved)
        # interfaces are explored before the superclass
        stack.extend(reversed(pending))
    return False


def find_implementations(
    graph: Mapping[str, TypeMetadata],
    contract: str,
    package_filter: Iterable[str] = (),
    store: ArtifactStore | None = None,
    *,
    log: LogSink | None = None,
) -> frozenset[str]:
    packages = tuple(package_filter)
    found: set[str] = set()
    for name in sorted(graph):
        node = graph[name]
        if not node.is_concrete:
            continue
        qualified = to_qualified(name)
        if not matches_packages(qualified, packages):
            continue
        if is_realized_by(node, contract, graph, store, set(), log=log):
            found.add(qualified)
    return frozenset(found)
