from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from .clock import utc_stamp

OutputFormat = Literal["text", "json"]


@dataclass(frozen=True)
class RunContext:
    run_id: str
    project_root: Path
    output_format: OutputFormat
    verbose: bool
    quiet: bool
    log_json: bool

    @property
    def log_level(self) -> str:
        if self.verbose:
            return "debug"
        if self.quiet:
            return "error"
        return "info"

    @classmethod
    def from_args(
        cls,
        run_id: str | None,
        project_root: str | None = None,
        output_format: OutputFormat = "text",
        verbose: bool = False,
        quiet: bool = False,
        log_json: bool = False,
    ) -> "RunContext":
        resolved_root = Path(project_root or os.environ.get("SVCREGCTL_PROJECT_ROOT") or Path.cwd()).resolve()
        resolved_run_id = run_id or os.environ.get("RUN_ID") or f"svcreg-{utc_stamp()}"
        return cls(
            run_id=resolved_run_id,
            project_root=resolved_root,
            output_format=output_format,
            verbose=verbose,
            quiet=quiet,
            log_json=log_json,
        )
