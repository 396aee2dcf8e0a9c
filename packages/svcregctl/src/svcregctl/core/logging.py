"""Leveled log sinks used by the checker and the CLI."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Protocol, TextIO, runtime_checkable

from .clock import utc_now_iso

if TYPE_CHECKING:
    from .context import RunContext

LEVELS = ("debug", "info", "warn", "error")
_RANK = {name: index for index, name in enumerate(LEVELS)}


def level_rank(level: str) -> int:
    try:
        return _RANK[level]
    except KeyError:
        raise ValueError(f"unknown log level `{level}`: expected one of {list(LEVELS)}") from None


@runtime_checkable
class LogSink(Protocol):
    def enabled(self, level: str) -> bool: ...

    def emit(self, level: str, message: str, **fields: object) -> None: ...


class _LevelHelpers:
    emit: Callable[..., None]

    def debug(self, message: str, **fields: object) -> None:
        self.emit("debug", message, **fields)

    def info(self, message: str, **fields: object) -> None:
        self.emit("info", message, **fields)

    def warn(self, message: str, **fields: object) -> None:
        self.emit("warn", message, **fields)

    def error(self, message: str, **fields: object) -> None:
        self.emit("error", message, **fields)


@dataclass
class StreamLogSink(_LevelHelpers):
    run_id: str
    component: str = "svcregctl"
    min_level: str = "info"
    log_json: bool = False
    stream: TextIO | None = None

    def __post_init__(self) -> None:
        level_rank(self.min_level)

    @classmethod
    def for_context(cls, ctx: RunContext, component: str = "svcregctl") -> StreamLogSink:
        return cls(run_id=ctx.run_id, component=component, min_level=ctx.log_level, log_json=ctx.log_json)

    def enabled(self, level: str) -> bool:
        return level_rank(level) >= level_rank(self.min_level)

    def emit(self, level: str, message: str, **fields: object) -> None:
        if not self.enabled(level):
            return
        out = self.stream or sys.stderr
        if self.log_json:
            payload = {
                "ts": utc_now_iso(),
                "level": level,
                "run_id": self.run_id,
                "component": self.component,
                "message": message,
                **fields,
            }
            out.write(json.dumps(payload, sort_keys=True, ensure_ascii=False, default=str) + "\n")
            return
        extras = " ".join(f"{key}={value}" for key, value in sorted(fields.items()))
        line = f"[{level.upper()}] {message}"
        out.write((line if not extras else f"{line} {extras}") + "\n")


@dataclass(frozen=True)
class LogRecord:
    level: str
    message: str
    fields: dict[str, object] = field(default_factory=dict)


@dataclass
class RecordingLogSink(_LevelHelpers):
    min_level: str = "debug"
    records: list[LogRecord] = field(default_factory=list)

    def enabled(self, level: str) -> bool:
        return level_rank(level) >= level_rank(self.min_level)

    def emit(self, level: str, message: str, **fields: object) -> None:
        if self.enabled(level):
            self.records.append(LogRecord(level, message, dict(fields)))

    def messages(self, level: str | None = None) -> list[str]:
        return [record.message for record in self.records if level is None or record.level == level]


def log_event(ctx: RunContext, level: str, component: str, action: str, **fields: object) -> None:
    sink = StreamLogSink.for_context(ctx, component=component)
    sink.emit(level, action, **fields)


__all__ = [
    "LEVELS",
    "LogRecord",
    "LogSink",
    "RecordingLogSink",
    "StreamLogSink",
    "level_rank",
    "log_event",
]
