from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .commands import check_binary as cmd_check_binary
from .commands import fetch_binaries as cmd_fetch_binaries
from .commands import postinstall as cmd_postinstall
from .config import Settings
from .errors import AudifyError
from .health import health_check
from .platforms import HostPlatform, map_to_artifact_path, supported_platform_keys

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}


class ShortPathFormatter(logging.Formatter):
    def __init__(self, fmt: str, roots: list[Path]) -> None:
        super().__init__(fmt)
        self.roots = [str(root) for root in roots if root]

    def _shorten(self, message: str) -> str:
        for root in self.roots:
            if not message:
                break
            message = message.replace(f"{root}/", "")
        return message

    def format(self, record: logging.LogRecord) -> str:
        return self._shorten(super().format(record))


class ColorFormatter(ShortPathFormatter):
    def __init__(self, fmt: str, roots: list[Path], *, use_color: bool = True) -> None:
        super().__init__(fmt, roots)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color or not self.use_color:
            return message
        return f"{color}{message}{C_RESET}"


class WarningBufferHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.WARNING)
        self.records: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
        except Exception:  # pragma: no cover
            msg = record.getMessage()
        self.records.append(msg)


def configure_logging(level_name: str, roots: list[Path]) -> WarningBufferHandler:
    log_level = getattr(logging, level_name.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    color_handler = logging.StreamHandler()
    color_handler.setFormatter(
        ColorFormatter(LOG_FORMAT, roots, use_color=sys.stderr.isatty())
    )
    root_logger.addHandler(color_handler)

    warn_buffer = WarningBufferHandler()
    warn_buffer.setFormatter(ShortPathFormatter(LOG_FORMAT, roots))
    root_logger.addHandler(warn_buffer)
    return warn_buffer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="audify-plus", description="Prebuilt RtAudio/Opus binary management"
    )
    parser.add_argument("--config", type=Path, help="Path to audify.yaml")
    parser.add_argument("--log-level", default="INFO", help="Python logging level")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser(
        "check-binary", help="Verify the prebuilt binary for this platform"
    )
    subparsers.add_parser(
        "postinstall", help="Set binary permissions and run a health check"
    )
    subparsers.add_parser(
        "health", help="Print the health check report as JSON"
    )
    subparsers.add_parser("info", help="Show the resolved platform and binary path")
    subparsers.add_parser(
        "fetch-binaries",
        help="Download release archives and populate the prebuilds directory",
    )
    return parser


def _print_info(settings: Settings, host: HostPlatform) -> None:
    print(f"Platform: {host.key}")
    try:
        path = map_to_artifact_path(
            host.key, settings.loader.root, settings.loader.artifact_name
        )
    except AudifyError as exc:
        print(f"Binary path: unavailable ({exc})")
    else:
        print(f"Binary path: {path}")
    print(f"Supported platforms: {', '.join(supported_platform_keys())}")


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = Settings.from_config(args.config)
    warn_buffer = configure_logging(args.log_level, [settings.loader.root])
    host = HostPlatform.detect()

    try:
        match args.command:
            case "check-binary":
                report = cmd_check_binary.run(settings.loader, host=host)
                for line in report.checks:
                    print(line)
                if not report.ok:
                    print("Please report this issue with your platform details:")
                    for line in cmd_check_binary.bug_report_lines(host):
                        print(line)
                    raise SystemExit(1)
            case "postinstall":
                result = cmd_postinstall.run(settings.loader, host=host)
                if result.health is not None:
                    print(json.dumps(result.health.to_dict(), indent=2))
            case "health":
                report = health_check(settings.loader, host=host)
                print(json.dumps(report.to_dict(), indent=2))
                if not report.ok:
                    raise SystemExit(1)
            case "info":
                _print_info(settings, host)
            case "fetch-binaries":
                outcomes = cmd_fetch_binaries.run(settings)
                if not any(outcome.ok for outcome in outcomes):
                    raise SystemExit(1)
            case _:
                parser.error("Unknown command")
    except AudifyError as exc:
        raise SystemExit(str(exc)) from exc
    finally:
        if warn_buffer.records:
            print("\nWarnings/Errors summary:", file=sys.stderr)
            for line in warn_buffer.records:
                print(f" - {line}", file=sys.stderr)


if __name__ == "__main__":  # pragma: no cover
    main()
