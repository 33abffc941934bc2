from __future__ import annotations

import argparse
import logging
import os
import sys
import traceback
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import AppConfig, load_config
from .engine import suggest_path
from .models import EpisodeInfo, StoragePath, TorrentDescriptor
from .patterns import parse_episode
from .utils import load_yaml_file, parse_bool
from .validation import ValidationIssue, validate_config_data

LOGGER = logging.getLogger(__name__)
CONSOLE = Console()
ERROR_CONSOLE = Console(stderr=True)
LOG_LEVEL_CHOICES = ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]
LOG_RECORD_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_CONFIG_PATH = "savepath.yaml"

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_UNRESOLVED = 2


def _env_bool(name: str) -> Optional[bool]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return parse_bool(raw)


def parse_args(argv: Optional[Tuple[str, ...]] = None) -> argparse.Namespace:
    arguments = list(sys.argv[1:] if argv is None else argv)
    if arguments and arguments[0] == "validate-config":
        return _parse_validate_args(arguments[1:])
    if arguments and arguments[0] == "suggest":
        arguments = arguments[1:]
    return _parse_suggest_args(arguments)


def _add_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Path to the YAML configuration file (default $CONFIG_PATH or ./{DEFAULT_CONFIG_PATH})",
    )


def _parse_suggest_args(arguments: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="savepath",
        description="Suggest a download location for torrent release names",
    )
    parser.add_argument("names", nargs="+", help="Torrent release name(s)")
    parser.add_argument("--category", help="Category reported by the site for every given name")
    _add_config_argument(parser)
    parser.add_argument(
        "--path",
        dest="extra_paths",
        action="append",
        default=[],
        metavar="NAME=PATH",
        help="Additional download path, may be repeated",
    )
    parser.add_argument(
        "--series-subfolder",
        action="store_true",
        default=None,
        help="Append a per-series subfolder for season releases",
    )
    parser.add_argument("--trace", action="store_true", help="Show how each suggestion was reached")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-level", choices=LOG_LEVEL_CHOICES, help="Log level (default WARNING)")
    parser.add_argument("--log-file", type=Path, help="Also write logs to this file")
    namespace = parser.parse_args(arguments)
    namespace.command = "suggest"
    return namespace


def _parse_validate_args(arguments: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="savepath validate-config",
        description="Validate a savepath configuration file",
    )
    _add_config_argument(parser)
    parser.add_argument(
        "--show-trace",
        action="store_true",
        help="Print exception tracebacks when validation fails",
    )
    namespace = parser.parse_args(arguments)
    namespace.command = "validate-config"
    return namespace


def _resolve_config_path(args: argparse.Namespace) -> Tuple[Path, bool]:
    """Return the config path and whether it was explicitly requested."""
    if args.config is not None:
        return args.config, True
    env_path = os.getenv("CONFIG_PATH")
    if env_path:
        return Path(env_path), True
    return Path(DEFAULT_CONFIG_PATH), False


def _resolve_level(name: str) -> int:
    return getattr(logging, name.upper(), logging.WARNING)


def configure_logging(log_level_name: str, log_file: Optional[Path] = None) -> None:
    log_level = _resolve_level(log_level_name)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_RECORD_FORMAT, LOG_DATE_FORMAT)

    plain_console = _env_bool("PLAIN_CONSOLE_LOGS")
    use_rich_console = ERROR_CONSOLE.is_terminal if plain_console is None else not plain_console
    if use_rich_console:
        console_handler: logging.Handler = RichHandler(console=ERROR_CONSOLE, rich_tracebacks=True, markup=False)
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)

    if log_file is not None:
        log_file = log_file.resolve()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.setLevel(log_level)
    logging.captureWarnings(True)
    LOGGER.debug(
        "Logging at %s (console style %s%s)",
        logging.getLevelName(log_level),
        "rich" if use_rich_console else "plain",
        f", file {log_file}" if log_file else "",
    )


def _parse_extra_path(raw: str, index: int) -> StoragePath:
    name, separator, location = raw.partition("=")
    if not separator or not name.strip():
        raise ValueError(f"--path expects NAME=PATH, got {raw!r}")
    return StoragePath(id=f"cli-{index}", name=name.strip(), path=location.strip())


def _load_app_config(args: argparse.Namespace) -> Optional[AppConfig]:
    config_path, explicit = _resolve_config_path(args)
    if config_path.exists():
        try:
            config = load_config(config_path)
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("Failed to load configuration %s: %s", config_path, exc)
            return None
        LOGGER.debug("Loaded %d download path(s) from %s", len(config.paths), config_path)
    elif explicit:
        LOGGER.error("Configuration file %s does not exist", config_path)
        return None
    else:
        config = AppConfig()

    try:
        extra = [_parse_extra_path(raw, index) for index, raw in enumerate(args.extra_paths, start=1)]
    except ValueError as exc:
        LOGGER.error("%s", exc)
        return None
    config.paths.extend(extra)
    return config


def apply_runtime_overrides(config: AppConfig, args: argparse.Namespace) -> None:
    subfolder = args.series_subfolder
    if subfolder is None:
        subfolder = _env_bool("CREATE_SERIES_SUBFOLDER")
    if subfolder is not None:
        config.inference.create_series_subfolder = bool(subfolder)


def _describe_episode(info: Optional[EpisodeInfo]) -> str:
    if info is None:
        return "-"
    season = f"S{info.season:02d}" if info.season is not None else ""
    if not info.episodes:
        return f"{season} (pack)" if season else "-"
    if len(info.episodes) == 1:
        return f"{season}E{info.episodes[0]:02d}"
    return f"{season}E{info.episodes[0]:02d}-E{info.episodes[-1]:02d}"


def _execute_suggest(args: argparse.Namespace) -> int:
    verbose = args.verbose or bool(_env_bool("VERBOSE"))
    level = args.log_level or os.getenv("LOG_LEVEL") or ("DEBUG" if verbose else "WARNING")
    log_file_env = os.getenv("LOG_FILE")
    log_file = args.log_file or (Path(log_file_env) if log_file_env else None)
    configure_logging(level.upper(), log_file)

    config = _load_app_config(args)
    if config is None:
        return EXIT_ERROR
    if not config.paths:
        LOGGER.error("No download paths configured; pass --config or --path NAME=PATH")
        return EXIT_ERROR

    apply_runtime_overrides(config, args)

    results: List[Dict[str, Any]] = []
    for name in args.names:
        trace: Optional[Dict[str, Any]] = {} if args.trace else None
        torrent = TorrentDescriptor(name=name, category=args.category or None)
        suggestion = suggest_path(torrent, config.paths, config.inference, trace=trace)
        results.append(
            {
                "name": name,
                "category": torrent.category,
                "episode": parse_episode(name),
                "suggestion": suggestion,
                "trace": trace,
            }
        )

    if args.json:
        _print_json(results)
    else:
        _print_table(results, show_trace=args.trace)

    unresolved = [item["name"] for item in results if item["suggestion"] is None]
    if unresolved:
        LOGGER.warning("No suggestion for %d name(s): %s", len(unresolved), ", ".join(unresolved))
        return EXIT_UNRESOLVED
    return EXIT_OK


def _print_json(results: List[Dict[str, Any]]) -> None:
    payload = []
    for item in results:
        episode: Optional[EpisodeInfo] = item["episode"]
        entry: Dict[str, Any] = {
            "name": item["name"],
            "category": item["category"],
            "season": episode.season if episode else None,
            "episodes": list(episode.episodes) if episode else [],
            "suggestion": item["suggestion"].to_dict() if item["suggestion"] else None,
        }
        if item["trace"] is not None:
            entry["trace"] = item["trace"]
        payload.append(entry)
    CONSOLE.print_json(data=payload, ensure_ascii=False, highlight=False)


def _print_table(results: List[Dict[str, Any]], *, show_trace: bool) -> None:
    table = Table(title="Suggested download paths")
    table.add_column("Torrent", overflow="fold")
    table.add_column("Detected")
    table.add_column("Location")
    table.add_column("Path", overflow="fold")
    for item in results:
        suggestion = item["suggestion"]
        if suggestion is None:
            table.add_row(escape(item["name"]), _describe_episode(item["episode"]), "[red]none[/red]", "-")
            continue
        table.add_row(
            escape(item["name"]),
            _describe_episode(item["episode"]),
            escape(suggestion.name),
            escape(suggestion.path) if suggestion.path else "[dim](client default)[/dim]",
        )
    CONSOLE.print(table)

    if show_trace:
        for item in results:
            CONSOLE.print(f"\n[bold]{escape(item['name'])}[/bold]")
            CONSOLE.print_json(data=item["trace"], ensure_ascii=False)


def run_validate_config(args: argparse.Namespace) -> int:
    config_path, _ = _resolve_config_path(args)
    if not config_path.exists():
        CONSOLE.print(f"[bold red]Configuration file not found: {escape(str(config_path))}[/bold red]")
        return EXIT_ERROR

    try:
        data = load_yaml_file(config_path)
    except Exception as exc:  # noqa: BLE001
        CONSOLE.print(f"[bold red]Failed to load configuration: {escape(str(exc))}[/bold red]")
        if getattr(args, "show_trace", False):
            CONSOLE.print(traceback.format_exc(), style="dim")
        return EXIT_ERROR

    report = validate_config_data(data)

    if report.is_valid:
        try:
            load_config(config_path)
        except Exception as exc:  # noqa: BLE001
            report.errors.append(
                ValidationIssue(
                    severity="error",
                    path="<load_config>",
                    message=f"{type(exc).__name__}: {exc}",
                    code="load-config",
                )
            )
            if getattr(args, "show_trace", False):
                CONSOLE.print(traceback.format_exc(), style="dim")

    if report.errors:
        CONSOLE.print(f"[bold red]{len(report.errors)} validation error(s) detected:[/bold red]")
        for issue in report.errors:
            CONSOLE.print(f"  • [bold]{escape(issue.path)}[/bold]: {escape(issue.message)} ({issue.code})")
    else:
        CONSOLE.print("[bold green]Configuration passed validation.[/bold green]")

    if report.warnings:
        CONSOLE.print(f"[yellow]{len(report.warnings)} warning(s):[/yellow]")
        for issue in report.warnings:
            CONSOLE.print(f"  • [bold]{escape(issue.path)}[/bold]: {escape(issue.message)} ({issue.code})")

    return EXIT_OK if report.is_valid else EXIT_ERROR


def main(argv: Optional[Tuple[str, ...]] = None) -> int:
    args = parse_args(argv)
    if getattr(args, "command", "suggest") == "validate-config":
        return run_validate_config(args)
    return _execute_suggest(args)


if __name__ == "__main__":
    sys.exit(main())
