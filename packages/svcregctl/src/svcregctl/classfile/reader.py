"""Minimal JVM class-file reader.

Only the parts needed to answer "what does this type extend and implement"
are decoded: the constant pool, access flags, this/super class, the interface
table and, for ``module-info.class``, the ``Module`` attribute's ``provides``
table. Fields and methods are skipped without inspection.
"""

from __future__ import annotations

import struct
from pathlib import Path
from typing import Protocol

from .model import ModuleDescriptor, ProvidesDeclaration, TypeKind, TypeMetadata

MAGIC = 0xCAFEBABE

ACC_INTERFACE = 0x0200
ACC_ABSTRACT = 0x0400
ACC_MODULE = 0x8000

_TAG_UTF8 = 1
_TAG_CLASS = 7
_TAG_MODULE = 19
_TAG_PACKAGE = 20
# Byte length of the payload following the tag, for fixed-size entries.
_FIXED_SIZES = {
    3: 4,
    4: 4,
    5: 8,
    6: 8,
    _TAG_CLASS: 2,
    8: 2,
    9: 4,
    10: 4,
    11: 4,
    12: 4,
    15: 3,
    16: 2,
    17: 4,
    18: 4,
    _TAG_MODULE: 2,
    _TAG_PACKAGE: 2,
}
_WIDE_TAGS = {5, 6}


class ClassFormatError(ValueError):
    pass


class MetadataParser(Protocol):
    def parse(self, data: bytes) -> TypeMetadata | ModuleDescriptor: ...


class _Cursor:
    __slots__ = ("data", "pos")

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.pos = 0

    def take(self, size: int) -> bytes:
        end = self.pos + size
        if end > len(self.data):
            raise ClassFormatError(f"truncated class file: wanted {size} bytes at offset {self.pos}")
        chunk = self.data[self.pos : end]
        self.pos = end
        return chunk

    def u1(self) -> int:
        return self.take(1)[0]

    def u2(self) -> int:
        return struct.unpack(">H", self.take(2))[0]

    def u4(self) -> int:
        return struct.unpack(">I", self.take(4))[0]

    def skip(self, size: int) -> None:
        self.take(size)


def _decode_modified_utf8(raw: bytes) -> str:
    try:
        text = raw.replace(b"\xc0\x80", b"\x00").decode("utf-8", errors="surrogatepass")
        if any("\ud800" <= ch <= "\udfff" for ch in text):
            text = text.encode("utf-16-le", errors="surrogatepass").decode("utf-16-le")
    except UnicodeError as exc:
        raise ClassFormatError(f"malformed utf8 constant: {exc}") from exc
    return text


class _ConstantPool:
    def __init__(self, cursor: _Cursor) -> None:
        count = cursor.u2()
        self._entries: dict[int, tuple[int, object]] = {}
        index = 1
        while index < count:
            tag = cursor.u1()
            if tag == _TAG_UTF8:
                length = cursor.u2()
                self._entries[index] = (tag, _decode_modified_utf8(cursor.take(length)))
            elif tag in (_TAG_CLASS, _TAG_MODULE, _TAG_PACKAGE):
                self._entries[index] = (tag, cursor.u2())
            elif tag in _FIXED_SIZES:
                cursor.skip(_FIXED_SIZES[tag])
            else:
                raise ClassFormatError(f"unknown constant pool tag {tag} at index {index}")
            index += 2 if tag in _WIDE_TAGS else 1

    def utf8(self, index: int) -> str:
        tag, value = self._entries.get(index, (0, None))
        if tag != _TAG_UTF8:
            raise ClassFormatError(f"constant pool index {index} is not a Utf8 entry")
        return str(value)

    def _named(self, index: int, expected: int) -> str:
        tag, value = self._entries.get(index, (0, None))
        if tag != expected:
            raise ClassFormatError(f"constant pool index {index} has tag {tag}, expected {expected}")
        return self.utf8(int(value))  # type: ignore[arg-type]

    def class_name(self, index: int) -> str:
        return self._named(index, _TAG_CLASS)

    def module_name(self, index: int) -> str:
        return self._named(index, _TAG_MODULE)


def _skip_members(cursor: _Cursor) -> None:
    for _ in range(cursor.u2()):
        cursor.skip(6)
        _skip_attributes(cursor)


def _skip_attributes(cursor: _Cursor) -> None:
    for _ in range(cursor.u2()):
        cursor.skip(2)
        cursor.skip(cursor.u4())


def _read_provides(body: bytes, pool: _ConstantPool) -> tuple[str, tuple[ProvidesDeclaration, ...]]:
    cursor = _Cursor(body)
    module_name = pool.module_name(cursor.u2())
    cursor.skip(4)  # flags, version
    cursor.skip(6 * cursor.u2())  # requires
    for _ in range(2):  # exports, opens
        for _ in range(cursor.u2()):
            cursor.skip(4)
            cursor.skip(2 * cursor.u2())
    cursor.skip(2 * cursor.u2())  # uses
    provides: list[ProvidesDeclaration] = []
    for _ in range(cursor.u2()):
        service = pool.class_name(cursor.u2())
        providers = tuple(pool.class_name(cursor.u2()) for _ in range(cursor.u2()))
        provides.append(ProvidesDeclaration(service=service, providers=providers))
    return module_name, tuple(provides)


class ClassFileParser:
    def parse(self, data: bytes) -> TypeMetadata | ModuleDescriptor:
        cursor = _Cursor(data)
        if cursor.u4() != MAGIC:
            raise ClassFormatError("bad magic number")
        cursor.skip(4)  # minor, major
        pool = _ConstantPool(cursor)
        access = cursor.u2()
        this_index = cursor.u2()
        super_index = cursor.u2()
        interfaces = frozenset(pool.class_name(cursor.u2()) for _ in range(cursor.u2()))

        if access & ACC_MODULE:
            _skip_members(cursor)
            _skip_members(cursor)
            for _ in range(cursor.u2()):
                attr_name = pool.utf8(cursor.u2())
                body = cursor.take(cursor.u4())
                if attr_name == "Module":
                    name, provides = _read_provides(body, pool)
                    return ModuleDescriptor(name=name, provides=provides)
            raise ClassFormatError("module descriptor without a Module attribute")

        return TypeMetadata(
            name=pool.class_name(this_index),
            kind=TypeKind.INTERFACE if access & ACC_INTERFACE else TypeKind.CLASS,
            is_abstract=bool(access & ACC_ABSTRACT),
            super_name=pool.class_name(super_index) if super_index else None,
            interfaces=interfaces,
        )


def parse_path(path: Path, parser: MetadataParser | None = None) -> TypeMetadata | ModuleDescriptor:
    return (parser or ClassFileParser()).parse(path.read_bytes())
