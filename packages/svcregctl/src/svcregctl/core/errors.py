from __future__ import annotations

from dataclasses import dataclass

from .exit_codes import ERR_CONFIG, ERR_IO, ERR_VIOLATION


@dataclass
class ScriptError(Exception):
    message: str
    code: int
    kind: str = "generic_error"

    def __str__(self) -> str:
        return self.message


def config_error(message: str) -> ScriptError:
    return ScriptError(message, ERR_CONFIG, kind="config_error")


def io_error(message: str) -> ScriptError:
    return ScriptError(message, ERR_IO, kind="io_error")


def violation_error(message: str) -> ScriptError:
    return ScriptError(message, ERR_VIOLATION, kind="violation")
