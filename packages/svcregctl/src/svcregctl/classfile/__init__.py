"""Compiled class metadata: the abstract view and its class-file parser."""

from .model import ModuleDescriptor, ProvidesDeclaration, TypeKind, TypeMetadata
from .names import (
    CLASS_SUFFIX,
    MODULE_INFO,
    NESTED_SEPARATOR,
    ROOT_TYPE,
    to_internal,
    to_qualified,
)
from .reader import ClassFileParser, ClassFormatError, MetadataParser, parse_path

__all__ = [
    "CLASS_SUFFIX",
    "ClassFileParser",
    "ClassFormatError",
    "MODULE_INFO",
    "MetadataParser",
    "ModuleDescriptor",
    "NESTED_SEPARATOR",
    "ProvidesDeclaration",
    "ROOT_TYPE",
    "TypeKind",
    "TypeMetadata",
    "parse_path",
    "to_internal",
    "to_qualified",
]
