from __future__ import annotations

from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Iterable

from ..classfile.model import TypeMetadata
from ..classfile.names import CLASS_SUFFIX, is_nested_artifact, matches_packages, qualified_name_for, to_internal
from ..classfile.reader import ClassFileParser, ClassFormatError, MetadataParser, parse_path
from ..core.errors import io_error
from ..core.logging import LogSink, RecordingLogSink


class ArtifactGraph(Mapping[str, TypeMetadata]):
    """Read-only internal-name -> metadata mapping for one scan."""

    def __init__(self, nodes: Mapping[str, TypeMetadata] | None = None) -> None:
        self._nodes: Mapping[str, TypeMetadata] = MappingProxyType(dict(nodes or {}))

    @classmethod
    def of(cls, types: Iterable[TypeMetadata]) -> ArtifactGraph:
        return cls({item.name: item for item in types})

    def __getitem__(self, name: str) -> TypeMetadata:
        return self._nodes[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"ArtifactGraph({len(self._nodes)} types)"


def iter_artifacts(root: Path) -> list[Path]:
    try:
        return sorted(path for path in root.rglob("*" + CLASS_SUFFIX) if path.is_file())
    except OSError as exc:
        raise io_error(f"Error scanning for service implementations under {root}: {exc}") from exc


def build_graph(
    root: Path,
    package_filter: Iterable[str] = (),
    *,
    parser: MetadataParser | None = None,
    log: LogSink | None = None,
) -> ArtifactGraph:
    parser = parser or ClassFileParser()
    log = log or RecordingLogSink(min_level="error")
    packages = tuple(package_filter)
    nodes: dict[str, TypeMetadata] = {}
    for artifact in iter_artifacts(root):
        if is_nested_artifact(artifact):
            continue
        qualified = qualified_name_for(root, artifact)
        if not matches_packages(qualified, packages):
            continue
        try:
            parsed = parse_path(artifact, parser)
        except (OSError, ClassFormatError) as exc:
            log.debug(f"Error checking class: {artifact} - {exc}")
            continue
        if not isinstance(parsed, TypeMetadata):
            continue
        nodes[to_internal(qualified)] = parsed
    log.debug(f"Indexed {len(nodes)} types under {root}")
    return ArtifactGraph(nodes)
