from __future__ import annotations

import os
import threading
import zipfile
from pathlib import Path
from typing import Iterable

from ..classfile.names import CLASS_SUFFIX

ARCHIVE_SUFFIXES = {".jar", ".zip"}


def split_classpath(raw: str | None) -> tuple[Path, ...]:
    if not raw:
        return ()
    return tuple(Path(item) for item in raw.split(os.pathsep) if item.strip())


class ClasspathResolver:
    """Looks up raw class-file bytes on a dependency classpath.

    Entries are directories or jar/zip archives, searched in order. Archives
    are opened lazily and kept open until :meth:`close`.
    """

    def __init__(self, entries: Iterable[Path] = ()) -> None:
        self.entries = tuple(Path(entry) for entry in entries)
        self._archives: dict[Path, zipfile.ZipFile | None] = {}
        self._lock = threading.Lock()

    def _archive(self, entry: Path) -> zipfile.ZipFile | None:
        with self._lock:
            if entry not in self._archives:
                try:
                    self._archives[entry] = zipfile.ZipFile(entry)
                except (OSError, zipfile.BadZipFile):
                    self._archives[entry] = None
            return self._archives[entry]

    def find(self, internal_name: str) -> bytes | None:
        member = internal_name + CLASS_SUFFIX
        for entry in self.entries:
            if entry.suffix.lower() in ARCHIVE_SUFFIXES and entry.is_file():
                archive = self._archive(entry)
                if archive is None:
                    continue
                try:
                    with self._lock:
                        return archive.read(member)
                except KeyError:
                    continue
            elif entry.is_dir():
                candidate = entry / member
                if candidate.is_file():
                    return candidate.read_bytes()
        return None

    def close(self) -> None:
        with self._lock:
            for archive in self._archives.values():
                if archive is not None:
                    archive.close()
            self._archives.clear()
