from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping

from ..config.model import EnforcementStrategy


class CheckStatus(str, Enum):
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"
    SKIP = "skip"


class EventKind(str, Enum):
    SUCCESS = "success"
    BORDER = "border"
    HEADER = "header"
    UNREGISTERED_HEADER = "unregistered_header"
    UNREGISTERED = "unregistered"
    DANGLING_HEADER = "dangling_header"
    DANGLING = "dangling"


@dataclass(frozen=True)
class ContractCheckResult:
    contract: str
    implementations: frozenset[str]
    registered: frozenset[str]
    unregistered: frozenset[str]
    dangling: frozenset[str]

    @classmethod
    def from_sets(cls, contract: str, implementations: Iterable[str], registered: Iterable[str]) -> ContractCheckResult:
        found = frozenset(implementations)
        declared = frozenset(registered)
        return cls(
            contract=contract,
            implementations=found,
            registered=declared,
            unregistered=found - declared,
            dangling=declared - found,
        )

    @property
    def clean(self) -> bool:
        return not self.unregistered and not self.dangling

    def has_violation(self, dangling_is_violation: bool = False) -> bool:
        return bool(self.unregistered) or (dangling_is_violation and bool(self.dangling))

    def status(self, strategy: EnforcementStrategy, dangling_is_violation: bool = False) -> CheckStatus:
        if self.clean:
            return CheckStatus.PASS
        if self.has_violation(dangling_is_violation) and strategy is EnforcementStrategy.FAIL:
            return CheckStatus.FAIL
        return CheckStatus.WARN


@dataclass(frozen=True)
class ReportEvent:
    level: str
    contract: str
    kind: EventKind
    payload: Mapping[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class ServiceCheckReport:
    status: CheckStatus
    strategy: EnforcementStrategy
    violations: bool
    results: tuple[ContractCheckResult, ...] = ()

    def result_for(self, contract: str) -> ContractCheckResult:
        for result in self.results:
            if result.contract == contract:
                return result
        raise KeyError(contract)
