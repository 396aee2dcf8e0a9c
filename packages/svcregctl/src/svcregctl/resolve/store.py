from __future__ import annotations

import threading
import zipfile
from pathlib import Path
from typing import Iterable

from ..classfile.model import TypeMetadata
from ..classfile.names import CLASS_SUFFIX, to_internal
from ..classfile.reader import ClassFileParser, ClassFormatError, MetadataParser
from ..core.logging import LogSink, RecordingLogSink
from .classpath import ClasspathResolver


class ArtifactStore:
    """On-demand type lookup: compiled output first, dependency classpath second.

    A miss is the normal outcome for platform types such as ``java/lang/Object``
    and returns ``None``. Lookups are memoized for the lifetime of the store.
    """

    def __init__(
        self,
        output_root: Path,
        classpath: Iterable[Path] | ClasspathResolver = (),
        *,
        parser: MetadataParser | None = None,
        log: LogSink | None = None,
    ) -> None:
        self.output_root = Path(output_root)
        self.classpath = classpath if isinstance(classpath, ClasspathResolver) else ClasspathResolver(classpath)
        self.parser = parser or ClassFileParser()
        self.log = log or RecordingLogSink(min_level="error")
        self._memo: dict[str, TypeMetadata | None] = {}
        self._lock = threading.Lock()

    def __enter__(self) -> ArtifactStore:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    def close(self) -> None:
        self.classpath.close()

    def resolve(self, name: str) -> TypeMetadata | None:
        internal = to_internal(name)
        with self._lock:
            if internal in self._memo:
                return self._memo[internal]
        found = self._load(internal)
        with self._lock:
            self._memo.setdefault(internal, found)
        return found

    def _load(self, internal: str) -> TypeMetadata | None:
        data, origin = self._read(internal)
        if data is None:
            return None
        try:
            parsed = self.parser.parse(data)
        except ClassFormatError as exc:
            self.log.debug(f"Error analyzing class file: {origin} - {exc}")
            return None
        if not isinstance(parsed, TypeMetadata):
            self.log.debug(f"Not a type artifact: {origin}")
            return None
        return parsed

    def _read(self, internal: str) -> tuple[bytes | None, str]:
        local = self.output_root / (internal + CLASS_SUFFIX)
        try:
            if local.is_file():
                return local.read_bytes(), str(local)
        except OSError as exc:
            self.log.debug(f"Error reading class file: {local} - {exc}")
            return None, str(local)
        try:
            return self.classpath.find(internal), internal
        except (OSError, zipfile.BadZipFile) as exc:
            self.log.debug(f"Could not load class from classpath: {internal.replace('/', '.')} - {exc}")
            return None, internal
