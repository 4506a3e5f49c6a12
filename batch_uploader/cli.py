"""Command line interface for batch uploader package."""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from rich.logging import RichHandler

from . import __version__
from .cli_progress import StatusTableDisplay, render_configuration_summary
from .config import UploadConfig, load_config
from .errors import ConfigError
from .models import FileDescriptor
from .orchestrator import BatchUploadOrchestrator, BatchUploadResult
from .orchestrator.file_collector import FileCollector
from .services import ForbiddenTypeValidator, HTTPUploader, MockUploader
from .utils.formatting import human_size


class CLIError(RuntimeError):
    """Raised when CLI validation/execution fails."""


def _setup_logging(debug: bool, silent: bool, log_level: Optional[str]) -> str:
    """
    Configure logging.

    Default behavior is silent unless --debug or --log-level is provided.
    Returns a string describing effective mode.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    logging.disable(logging.NOTSET)

    if silent or (not debug and not log_level):
        logging.disable(logging.CRITICAL)
        root_logger.setLevel(logging.CRITICAL + 1)
        return "silent"

    if debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, log_level.upper(), None)
        if not isinstance(level, int):
            env_level = os.getenv("LOG_LEVEL")
            level = getattr(logging, (env_level or "INFO").upper(), logging.INFO)

    handler = RichHandler(
        rich_tracebacks=True,
        markup=False,
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    return logging.getLevelName(level)


def _strip_optional_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        return value[1:-1]
    return value


def _load_env_file(path: Path, override: bool = False) -> None:
    if not path.exists():
        raise CLIError(f"env file not found: {path}")
    if not path.is_file():
        raise CLIError(f"env path is not a file: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CLIError(f"could not read env file {path}: {exc}") from exc

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].strip()
        if "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        if not key:
            continue

        value = _strip_optional_quotes(value.strip())
        if override or key not in os.environ:
            os.environ[key] = value


def _resolve_default_env_file() -> Optional[Path]:
    default_env = Path(".env")
    return default_env if default_env.exists() and default_env.is_file() else None


def _collect(paths: Sequence[Path]) -> List[FileDescriptor]:
    try:
        return FileCollector.collect_files(paths)
    except OSError as exc:
        raise CLIError(str(exc)) from exc


async def _run_upload(paths: Sequence[Path], config: UploadConfig, dry_run: bool) -> int:
    files = _collect(paths)
    if not files:
        raise CLIError("no files to upload")

    validator = ForbiddenTypeValidator(max_file_size=config.max_file_size)
    display = StatusTableDisplay(live=sys.stdout.isatty())

    async def upload_with(uploader) -> BatchUploadResult:
        orchestrator = BatchUploadOrchestrator(uploader, validator, config)
        orchestrator.board.on_reset(display.start)
        return await orchestrator.upload(files, on_status=display.on_status)

    try:
        if dry_run:
            result = await upload_with(MockUploader())
        else:
            async with HTTPUploader(config) as uploader:
                result = await upload_with(uploader)
    except BaseException:
        display.stop()
        raise

    display.finish(result)
    return 0 if result.all_success else 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="batch-up",
        description="Pack files into size-bounded groups and upload the groups concurrently.",
    )
    parser.add_argument("paths", nargs="*", type=Path, help="Files or folders to upload")
    parser.add_argument(
        "-e",
        "--endpoint",
        default=None,
        help="Upload endpoint URL (default from UPLOAD_API_URL)",
    )
    parser.add_argument(
        "-b",
        "--budget",
        type=int,
        default=None,
        help="Maximum bytes per request group (default from UPLOAD_BYTE_BUDGET or 10 MiB)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate and pack, then send to an in-memory uploader instead of the endpoint",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load environment variables from this .env file",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logs")
    parser.add_argument("--silent", action="store_true", help="Only print errors")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Explicit log level (DEBUG/INFO/WARNING/ERROR)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"batch-up {__version__}",
    )
    return parser


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    used_env_file = args.env_file or _resolve_default_env_file()
    if used_env_file is not None:
        try:
            _load_env_file(Path(used_env_file))
        except CLIError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1

    effective_log_mode = _setup_logging(
        debug=args.debug,
        silent=args.silent,
        log_level=args.log_level,
    )

    if not args.paths:
        parser.print_help()
        return 0

    try:
        config = load_config(
            require_endpoint=not args.dry_run,
            endpoint_url=args.endpoint,
            byte_budget=args.budget,
        )
    except ConfigError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    paths = [Path(p).expanduser() for p in args.paths]
    render_configuration_summary(
        {
            "Sources": ", ".join(str(p) for p in paths),
            "Endpoint": "(dry run)" if args.dry_run else config.endpoint_url,
            "Group Budget": human_size(config.byte_budget),
            "Max File Size": human_size(config.max_file_size),
            "Env File": str(used_env_file) if used_env_file else "-",
            "Logging": effective_log_mode,
        }
    )

    try:
        return asyncio.run(_run_upload(paths, config, dry_run=args.dry_run))
    except CLIError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Cancelled.", file=sys.stderr)
        return 130


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
