#!/usr/bin/env python3
"""JSONL Editor - Claude Code conversation log editor.

Entry point for the CLI application.
"""

import argparse
import dataclasses
import logging
import socket
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import SAMPLES_DIR, EditorConfig
from .errors import EditorError

logger = logging.getLogger("jsonl_editor")

MAX_PORT_ATTEMPTS = 10


def setup_logging(verbose: bool = False, quiet: bool = False):
    """Configure root logging for CLI runs."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def is_port_available(host: str, port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.bind((host, port))
        except OSError:
            return False
    return True


def find_available_port(host: str, start_port: int, max_attempts: int = MAX_PORT_ATTEMPTS) -> Optional[int]:
    """First free port in [start_port, start_port + max_attempts)."""
    for port in range(start_port, start_port + max_attempts):
        if is_port_available(host, port):
            return port
    return None


def build_config(args) -> EditorConfig:
    """Environment settings overridden by command-line flags."""
    config = EditorConfig.from_env()
    overrides = {}
    if args.jsonl_path:
        overrides["jsonl_path"] = Path(args.jsonl_path).expanduser().resolve()
    if args.port is not None:
        overrides["port"] = args.port
    if args.expose:
        overrides["host"] = "0.0.0.0"
    elif args.host:
        overrides["host"] = args.host
    if args.no_backup:
        overrides["backup"] = False
    overrides["verbose"] = args.verbose
    overrides["quiet"] = args.quiet
    return dataclasses.replace(config, **overrides)


def resolve_root(config: EditorConfig) -> EditorConfig:
    """Check the configured path, falling back to ./samples when unset."""
    if config.jsonl_path is not None:
        if not config.jsonl_path.exists():
            logger.error(f"Cannot access path: {config.jsonl_path}")
            sys.exit(1)
        logger.info(f"Target path: {config.jsonl_path}")
        return config

    if SAMPLES_DIR.is_dir():
        samples = SAMPLES_DIR.resolve()
        logger.info(f"Using default samples directory: {samples}")
        return dataclasses.replace(config, jsonl_path=samples)

    logger.warning("No JSONL path specified and no samples/ directory found")
    logger.info("Use --jsonl-path <path> to edit files; server will operate in limited mode")
    return config


def cmd_serve(config: EditorConfig):
    """Run the HTTP API and browser editor."""
    import uvicorn

    from .server import create_app

    config = resolve_root(config)
    if not config.backup:
        logger.info("Automatic backup creation disabled")

    port = config.port
    if not is_port_available(config.host, port):
        logger.warning(f"Port {port} is already in use, searching for available port...")
        port = find_available_port(config.host, port + 1)
        if port is None:
            logger.error("No available ports found in range")
            sys.exit(1)
        logger.info(f"Using alternative port: {port}")
        config = dataclasses.replace(config, port=port)

    display_host = "localhost" if config.host == "0.0.0.0" else config.host
    logger.info(f"Server starting on http://{display_host}:{port}")
    if config.host == "0.0.0.0":
        logger.info("Network access enabled - available on all interfaces")

    uvicorn.run(
        create_app(config),
        host=config.host,
        port=port,
        log_level="debug" if config.verbose else ("warning" if config.quiet else "info"),
    )


def cmd_tui(config: EditorConfig, path: Optional[str] = None):
    """Launch the terminal editor."""
    from .tui.app import JSONLEditorApp

    if path:
        config = dataclasses.replace(config, jsonl_path=Path(path).expanduser().resolve())
    config = resolve_root(config)
    if config.jsonl_path is None:
        print("No JSONL path given. Usage: jsonl-editor tui <file-or-directory>")
        sys.exit(1)

    JSONLEditorApp(config).run()


def cmd_backups(config: EditorConfig, path: str):
    """List backups of a JSONL file."""
    from .files import FileAccess

    target = Path(path).expanduser().resolve()
    files = FileAccess(dataclasses.replace(config, jsonl_path=target))
    try:
        backups = files.list_backups(target.name)
    except EditorError as e:
        print(f"Error: {e.message}")
        sys.exit(1)

    if not backups:
        print(f"No backups found for {target}")
        return

    print(f"Backups of {target}:")
    print("-" * 60)
    for backup in backups:
        stamp = int(backup.name.rsplit(".", 1)[-1])
        when = datetime.fromtimestamp(stamp / 1000).strftime("%Y-%m-%d %H:%M:%S")
        size = backup.stat().st_size
        print(f"  {when}  {size / 1024:8.1f} KB  {backup.name}")


def add_server_arguments(parser, suppress_defaults=False):
    """Add the root/server options to ``parser``.

    Subcommands get the same options with suppressed defaults, so a flag
    given before the subcommand is not reset by the subparser.
    """
    def default(value):
        return argparse.SUPPRESS if suppress_defaults else value

    parser.add_argument("-p", "--jsonl-path", default=default(None),
                        help="Path to JSONL file or directory containing JSONL files")
    parser.add_argument("-P", "--port", type=int, default=default(None), help="Server port (default: 3001)")
    parser.add_argument("--host", default=default(None), help="Host to bind to (default: localhost)")
    parser.add_argument("--expose", action="store_true", default=default(False),
                        help="Expose server to network (same as --host 0.0.0.0)")
    parser.add_argument("--no-backup", action="store_true", default=default(False),
                        help="Disable automatic backup creation when saving files")
    parser.add_argument("-v", "--verbose", action="store_true", default=default(False),
                        help="Enable verbose logging")
    parser.add_argument("-q", "--quiet", action="store_true", default=default(False),
                        help="Suppress non-error output")


def main(argv=None):
    """Main entry point for jsonl-editor CLI."""
    parser = argparse.ArgumentParser(
        description="Interactive editor for Claude Code JSONL conversation files",
        prog="jsonl-editor",
    )
    parser.add_argument("--version", action="store_true", help="Show version")
    add_server_arguments(parser)

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    serve_parser = subparsers.add_parser("serve", help="Start the API server and browser editor (default)")
    add_server_arguments(serve_parser, suppress_defaults=True)

    tui_parser = subparsers.add_parser("tui", help="Edit files in the terminal")
    tui_parser.add_argument("path", nargs="?", help="JSONL file or directory")
    tui_parser.add_argument(
        "--no-backup", action="store_true", default=argparse.SUPPRESS,
        help="Disable automatic backup creation when saving files",
    )

    backups_parser = subparsers.add_parser("backups", help="List backups of a JSONL file")
    backups_parser.add_argument("path", help="JSONL file")

    args = parser.parse_args(argv)

    if args.version:
        from . import __version__
        print(f"jsonl-editor {__version__}")
        return

    setup_logging(args.verbose, args.quiet)
    config = build_config(args)

    if args.command == "tui":
        cmd_tui(config, args.path)
    elif args.command == "backups":
        cmd_backups(config, args.path)
    else:
        cmd_serve(config)


if __name__ == "__main__":
    main()
