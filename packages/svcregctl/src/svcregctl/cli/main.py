from __future__ import annotations

import argparse
import platform
import sys
from pathlib import Path
from typing import Any

from .. import __version__
from ..checks.report import build_report_payload, render_json, render_text
from ..checks.runner import enforce, scan
from ..config.loader import load_config
from ..config.model import ServiceCheckConfig
from ..core.context import RunContext
from ..core.errors import ScriptError
from ..core.exit_codes import ERR_INTERNAL, OK
from ..core.logging import StreamLogSink, log_event
from ..resolve.classpath import split_classpath
from .output import emit, render_error, write_out_file

DEFAULT_CLASSES_DIR = "target/classes"


def _add_config_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--classes-dir", default=DEFAULT_CLASSES_DIR, help="compiled output root (relative to --project-root)")
    p.add_argument(
        "--classpath",
        action="append",
        default=[],
        help="dependency classpath entries (directories or jars), separated by the platform path separator",
    )
    p.add_argument("--interface", action="append", default=[], help="service contract to check (repeatable)")
    p.add_argument("--package", action="append", default=[], help="package prefix to scan (repeatable)")
    p.add_argument("--strategy", help="FAIL (default) or WARN")
    p.add_argument("--strict-dangling", action="store_true", help="treat dangling registrations as violations")
    p.add_argument("--jobs", type=int, help="check contracts on N worker threads")
    p.add_argument("--config", help="config file (.toml, .yaml, .yml, .json or pyproject.toml)")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="svcregctl", description="verify Java service registrations against compiled classes")
    p.add_argument("--version", action="version", version=f"svcregctl {__version__}")
    p.add_argument("--json", action="store_true", help="emit JSON output")
    p.add_argument("--log-json", action="store_true", help="emit log lines as JSON")
    p.add_argument("--run-id", help="run identifier for reports")
    p.add_argument("--project-root", help="project root used to resolve relative paths and config")
    vg = p.add_mutually_exclusive_group()
    vg.add_argument("--verbose", action="store_true", help="enable debug diagnostics")
    vg.add_argument("--quiet", action="store_true", help="only emit errors")
    sub = p.add_subparsers(dest="cmd", required=True)

    check_p = sub.add_parser("check", help="check service registrations")
    _add_config_args(check_p)
    check_p.add_argument("--out-file", help="optional output path for the JSON report")

    config_p = sub.add_parser("config", help="print the resolved configuration")
    _add_config_args(config_p)

    sub.add_parser("version", help="print version information")
    return p


def _overrides(ns: argparse.Namespace) -> dict[str, Any]:
    return {
        "service_interfaces": ns.interface,
        "packages_to_scan": ns.package,
        "strategy": ns.strategy,
        "dangling_is_violation": True if ns.strict_dangling else None,
        "jobs": ns.jobs,
    }


def _resolve_config(ctx: RunContext, ns: argparse.Namespace) -> ServiceCheckConfig:
    config_file = Path(ns.config) if ns.config else None
    if config_file is not None and not config_file.is_absolute():
        config_file = ctx.project_root / config_file
    return load_config(config_file=config_file, project_root=ctx.project_root, overrides=_overrides(ns))


def _resolve_path(ctx: RunContext, raw: str | Path) -> Path:
    path = Path(raw)
    return path if path.is_absolute() else ctx.project_root / path


def run_check_command(ctx: RunContext, ns: argparse.Namespace) -> int:
    config = _resolve_config(ctx, ns)
    log = StreamLogSink.for_context(ctx)
    log.debug(f"Resolved configuration: {config}")
    output_root = _resolve_path(ctx, ns.classes_dir)
    classpath = [_resolve_path(ctx, entry) for raw in ns.classpath for entry in split_classpath(raw)]
    report = scan(config, output_root, classpath, log=log)
    payload = build_report_payload(report, run_id=ctx.run_id, dangling_is_violation=config.dangling_is_violation)
    rendered = render_json(payload)
    write_out_file(ns.out_file, rendered)
    if ctx.output_format == "json":
        print(rendered)
    elif not ctx.quiet:
        print(render_text(payload))
    enforce(report)
    return OK


def run_config_command(ctx: RunContext, ns: argparse.Namespace) -> int:
    config = _resolve_config(ctx, ns)
    payload: dict[str, object] = {
        "schema_version": 1,
        "tool": "svcregctl",
        "status": "ok",
        "classes_dir": str(_resolve_path(ctx, ns.classes_dir)),
        "config": config.as_dict(),
    }
    emit(payload, ctx.output_format == "json")
    return OK


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    ctx = RunContext.from_args(
        ns.run_id,
        ns.project_root,
        output_format="json" if ns.json else "text",
        verbose=ns.verbose,
        quiet=ns.quiet,
        log_json=ns.log_json,
    )
    try:
        if ns.cmd == "version":
            emit(
                {
                    "schema_version": 1,
                    "tool": "svcregctl",
                    "status": "ok",
                    "version": __version__,
                    "python": platform.python_version(),
                },
                ns.json,
            )
            return OK
        if ns.cmd == "config":
            return run_config_command(ctx, ns)
        if ns.cmd == "check":
            return run_check_command(ctx, ns)
        return 2
    except ScriptError as exc:
        log_event(ctx, "debug", "svcregctl", "failed", kind=exc.kind, code=exc.code)
        print(render_error(as_json=ns.json, message=str(exc), code=exc.code, kind=exc.kind), file=sys.stderr)
        return exc.code
    except Exception as exc:  # pragma: no cover
        print(render_error(as_json=ns.json, message=f"internal error: {exc}", code=ERR_INTERNAL), file=sys.stderr)
        return ERR_INTERNAL


if __name__ == "__main__":
    raise SystemExit(main())
