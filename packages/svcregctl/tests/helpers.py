from __future__ import annotations

import os
import struct
import subprocess
import sys
import zipfile
from pathlib import Path

ROOT = Path(__file__).resolve().parents[3]

ACC_PUBLIC = 0x0001
ACC_SUPER = 0x0020
ACC_INTERFACE = 0x0200
ACC_ABSTRACT = 0x0400
ACC_MODULE = 0x8000


class _Pool:
    def __init__(self) -> None:
        self.entries: list[bytes] = []
        self._index: dict[tuple[str, str], int] = {}

    def _add(self, key: tuple[str, str], entry: bytes) -> int:
        self.entries.append(entry)
        self._index[key] = len(self.entries)
        return self._index[key]

    def utf8(self, value: str) -> int:
        key = ("utf8", value)
        if key in self._index:
            return self._index[key]
        data = value.encode("utf-8")
        return self._add(key, struct.pack(">BH", 1, len(data)) + data)

    def cls(self, name: str) -> int:
        key = ("class", name)
        if key in self._index:
            return self._index[key]
        return self._add(key, struct.pack(">BH", 7, self.utf8(name)))

    def module(self, name: str) -> int:
        key = ("module", name)
        if key in self._index:
            return self._index[key]
        return self._add(key, struct.pack(">BH", 19, self.utf8(name)))

    def long(self, value: int) -> None:
        # occupies two constant pool slots
        self.entries.append(struct.pack(">Bq", 5, value))
        self.entries.append(b"")

    def serialize(self) -> bytes:
        return struct.pack(">H", len(self.entries) + 1) + b"".join(self.entries)


def class_bytes(
    name: str,
    *,
    super_name: str | None = "java/lang/Object",
    interfaces: tuple[str, ...] = (),
    access: int = ACC_PUBLIC | ACC_SUPER,
    with_long_constant: bool = False,
) -> bytes:
    pool = _Pool()
    if with_long_constant:
        pool.long(42)
    this_index = pool.cls(name)
    super_index = pool.cls(super_name) if super_name else 0
    interface_indexes = [pool.cls(item) for item in interfaces]
    # one field carrying a ConstantValue-like attribute, to exercise member skipping
    field_name = pool.utf8("value")
    field_desc = pool.utf8("I")
    attr_name = pool.utf8("Synthetic")
    body = struct.pack(">HHH", access, this_index, super_index)
    body += struct.pack(">H", len(interface_indexes)) + b"".join(struct.pack(">H", i) for i in interface_indexes)
    body += struct.pack(">H", 1) + struct.pack(">HHHH", 0x0002, field_name, field_desc, 1)
    body += struct.pack(">HI", attr_name, 0)
    body += struct.pack(">H", 0)  # methods
    body += struct.pack(">H", 0)  # attributes
    return struct.pack(">IHH", 0xCAFEBABE, 0, 61) + pool.serialize() + body


def with_mangled_name(name: str, prefix: bytes) -> bytes:
    """Class bytes whose first Utf8 constant (the class name) starts with raw ``prefix`` bytes."""
    data = bytearray(class_bytes(name))
    # magic, minor, major, pool count, tag, length
    start = 4 + 2 + 2 + 2 + 1 + 2
    data[start : start + len(prefix)] = prefix
    return bytes(data)


def interface_bytes(name: str, *, extends: tuple[str, ...] = ()) -> bytes:
    return class_bytes(
        name,
        interfaces=extends,
        access=ACC_PUBLIC | ACC_INTERFACE | ACC_ABSTRACT,
    )


def module_info_bytes(module: str, provides: dict[str, tuple[str, ...]]) -> bytes:
    pool = _Pool()
    this_index = pool.cls("module-info")
    module_attr = pool.utf8("Module")
    module_index = pool.module(module)
    java_base = pool.module("java.base")
    used = pool.cls("java/lang/Runnable")
    exported = struct.pack(">BH", 20, pool.utf8(module.replace(".", "/")))
    pool.entries.append(exported)
    package_index = len(pool.entries)

    attr = struct.pack(">HHH", module_index, 0, 0)
    attr += struct.pack(">H", 1) + struct.pack(">HHH", java_base, 0x8000, 0)  # requires
    attr += struct.pack(">H", 1) + struct.pack(">HHH", package_index, 0, 0)  # exports
    attr += struct.pack(">H", 0)  # opens
    attr += struct.pack(">H", 1) + struct.pack(">H", used)  # uses
    attr += struct.pack(">H", len(provides))
    for service, providers in provides.items():
        attr += struct.pack(">HH", pool.cls(service), len(providers))
        attr += b"".join(struct.pack(">H", pool.cls(item)) for item in providers)

    body = struct.pack(">HHH", ACC_MODULE, this_index, 0)
    body += struct.pack(">HHH", 0, 0, 0)  # interfaces, fields, methods
    body += struct.pack(">H", 1) + struct.pack(">HI", module_attr, len(attr)) + attr
    return struct.pack(">IHH", 0xCAFEBABE, 0, 53) + pool.serialize() + body


class ClassTree:
    """Writes class files and registrations under one compiled-output root."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def _write(self, internal_name: str, data: bytes) -> Path:
        path = self.root / (internal_name + ".class")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path

    def cls(self, name: str, **kwargs: object) -> Path:
        return self._write(name, class_bytes(name, **kwargs))  # type: ignore[arg-type]

    def abstract(self, name: str, **kwargs: object) -> Path:
        return self.cls(name, access=ACC_PUBLIC | ACC_SUPER | ACC_ABSTRACT, **kwargs)

    def interface(self, name: str, extends: tuple[str, ...] = ()) -> Path:
        return self._write(name, interface_bytes(name, extends=extends))

    def raw(self, name: str, data: bytes) -> Path:
        return self._write(name, data)

    def services(self, contract: str, *lines: str) -> Path:
        path = self.root / "META-INF" / "services" / contract
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    def module_info(self, module: str, provides: dict[str, tuple[str, ...]]) -> Path:
        path = self.root / "module-info.class"
        path.write_bytes(module_info_bytes(module, provides))
        return path


def write_jar(path: Path, classes: dict[str, bytes]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as jar:
        for name, data in classes.items():
            jar.writestr(name + ".class", data)
    return path


def run_svcregctl(*args: str, cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    env = os.environ.copy()
    env["PYTHONPATH"] = str(ROOT / "packages/svcregctl/src")
    env.setdefault("RUN_ID", "pytest-run")
    env.pop("SVCREGCTL_STRATEGY", None)
    return subprocess.run(
        [sys.executable, "-m", "svcregctl", *args],
        cwd=(cwd or ROOT),
        env=env,
        text=True,
        capture_output=True,
        check=False,
    )
