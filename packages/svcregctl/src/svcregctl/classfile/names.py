from __future__ import annotations

from pathlib import PurePath

CLASS_SUFFIX = ".class"
NESTED_SEPARATOR = "$"
ROOT_TYPE = "java/lang/Object"
MODULE_INFO = "module-info" + CLASS_SUFFIX
SERVICES_DIR = ("META-INF", "services")


def to_internal(name: str) -> str:
    return name.strip().replace(".", "/")


def to_qualified(name: str) -> str:
    return name.strip().replace("/", ".")


def is_nested_artifact(path: PurePath) -> bool:
    return NESTED_SEPARATOR in path.name


def qualified_name_for(root: PurePath, artifact: PurePath) -> str:
    relative = artifact.relative_to(root)
    stem = relative.as_posix()[: -len(CLASS_SUFFIX)]
    return to_qualified(stem)


def matches_packages(qualified_name: str, packages: tuple[str, ...] | list[str]) -> bool:
    if not packages:
        return True
    return any(qualified_name.startswith(prefix) for prefix in packages)
