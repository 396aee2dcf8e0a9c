"""Svcregctl core package."""
from .clock import utc_now_iso
from .context import RunContext
from .errors import ScriptError
from .logging import LogSink, RecordingLogSink, StreamLogSink, log_event
from .serialize import dumps_json

__all__ = [
    "LogSink",
    "RecordingLogSink",
    "RunContext",
    "ScriptError",
    "StreamLogSink",
    "dumps_json",
    "log_event",
    "utc_now_iso",
]
