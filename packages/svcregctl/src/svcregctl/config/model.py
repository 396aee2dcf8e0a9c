from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping

from ..core.errors import config_error

_ALIASES = {
    "service_interfaces": ("service_interfaces", "serviceInterfaces"),
    "packages_to_scan": ("packages_to_scan", "packagesToScan"),
    "strategy": ("strategy",),
    "dangling_is_violation": ("dangling_is_violation", "danglingIsViolation"),
    "jobs": ("jobs",),
}


class EnforcementStrategy(str, Enum):
    FAIL = "FAIL"
    WARN = "WARN"


_STRATEGY_NAMES = {
    "FAIL": EnforcementStrategy.FAIL,
    "FAILURE": EnforcementStrategy.FAIL,
    "WARN": EnforcementStrategy.WARN,
    "WARNING": EnforcementStrategy.WARN,
}


def parse_strategy(value: str | EnforcementStrategy | None) -> EnforcementStrategy:
    if value is None:
        return EnforcementStrategy.FAIL
    if isinstance(value, EnforcementStrategy):
        return value
    found = _STRATEGY_NAMES.get(str(value).strip().upper())
    if found is None:
        raise config_error(f"Invalid strategy: {value}. Valid values are: FAIL, WARN")
    return found


def _names(values: Iterable[str] | None) -> tuple[str, ...]:
    out: list[str] = []
    for item in values or ():
        name = str(item).strip()
        if name and name not in out:
            out.append(name)
    return tuple(out)


def canonical_keys(raw: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, spellings in _ALIASES.items():
        for spelling in spellings:
            if spelling in raw:
                out[key] = raw[spelling]
    return out


@dataclass(frozen=True)
class ServiceCheckConfig:
    service_interfaces: tuple[str, ...]
    packages_to_scan: tuple[str, ...] = ()
    strategy: EnforcementStrategy = EnforcementStrategy.FAIL
    dangling_is_violation: bool = False
    jobs: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "service_interfaces", _names(self.service_interfaces))
        object.__setattr__(self, "packages_to_scan", _names(self.packages_to_scan))
        object.__setattr__(self, "strategy", parse_strategy(self.strategy))
        if not self.service_interfaces:
            raise config_error("serviceInterfaces parameter is required and must not be empty")
        if int(self.jobs) < 1:
            raise config_error(f"jobs must be a positive integer, got {self.jobs}")
        object.__setattr__(self, "jobs", int(self.jobs))

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> ServiceCheckConfig:
        data = canonical_keys(raw)
        return cls(
            service_interfaces=tuple(data.get("service_interfaces") or ()),
            packages_to_scan=tuple(data.get("packages_to_scan") or ()),
            strategy=data.get("strategy"),  # type: ignore[arg-type]
            dangling_is_violation=bool(data.get("dangling_is_violation", False)),
            jobs=int(data.get("jobs", 1)),
        )

    @property
    def fail_mode(self) -> bool:
        return self.strategy is EnforcementStrategy.FAIL

    def as_dict(self) -> dict[str, Any]:
        return {
            "service_interfaces": list(self.service_interfaces),
            "packages_to_scan": list(self.packages_to_scan),
            "strategy": self.strategy.value,
            "dangling_is_violation": self.dangling_is_violation,
            "jobs": self.jobs,
        }

    def __str__(self) -> str:
        return (
            f"svcregctl[serviceInterfaces={list(self.service_interfaces)}, "
            f"packagesToScan={list(self.packages_to_scan)}, strategy={self.strategy.value}]"
        )


def unknown_keys(raw: Mapping[str, Any]) -> list[str]:
    known = {spelling for spellings in _ALIASES.values() for spelling in spellings}
    return sorted(str(key) for key in raw if key not in known)
