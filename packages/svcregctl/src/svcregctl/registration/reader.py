from __future__ import annotations

from pathlib import Path

from ..classfile.model import ModuleDescriptor
from ..classfile.names import MODULE_INFO, SERVICES_DIR, to_internal, to_qualified
from ..classfile.reader import ClassFormatError, MetadataParser, parse_path
from ..core.errors import io_error
from ..core.logging import LogSink, RecordingLogSink


def services_file_path(root: Path, contract: str) -> Path:
    return root.joinpath(*SERVICES_DIR, contract)


def parse_service_lines(text: str) -> list[str]:
    out: list[str] = []
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        out.append(line)
    return out


def read_service_file(path: Path) -> frozenset[str]:
    if not path.is_file():
        return frozenset()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise io_error(f"cannot read service registrations {path}: {exc}") from exc
    return frozenset(parse_service_lines(text))


def read_module_provides(
    path: Path,
    contract: str,
    *,
    parser: MetadataParser | None = None,
    log: LogSink | None = None,
) -> frozenset[str]:
    if not path.is_file():
        return frozenset()
    log = log or RecordingLogSink(min_level="error")
    try:
        parsed = parse_path(path, parser)
    except (OSError, ClassFormatError) as exc:
        log.debug(f"Error reading module descriptor: {path} - {exc}")
        return frozenset()
    if not isinstance(parsed, ModuleDescriptor):
        log.debug(f"{path} does not declare a module")
        return frozenset()
    return frozenset(to_qualified(name) for name in parsed.providers_for(to_internal(contract)))


def read_registered(
    root: Path,
    contract: str,
    *,
    parser: MetadataParser | None = None,
    log: LogSink | None = None,
) -> frozenset[str]:
    from_file = read_service_file(services_file_path(root, contract))
    from_module = read_module_provides(root / MODULE_INFO, contract, parser=parser, log=log)
    return from_file | from_module
