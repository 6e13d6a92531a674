"""
Launcher: resolve a presentation name to its slides and start Slidev on it.

All ambient state (argv, installation root, output streams, the spawner) is
carried by a LaunchContext so the flow can run against a temp directory and a
fake spawner.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, TextIO

from deckdev.config import LauncherConfig, load_launcher_config, parse_log_level, resolve_root
from deckdev.errors import (
    LauncherError,
    MissingArgumentError,
    SpawnError,
    UnresolvedSlideFileError,
)
from deckdev.process import ChildProcess, spawn_passthrough, wait_for_exit

log = logging.getLogger(__name__)

EXIT_USER_ERROR = 1
EXIT_SPAWN_FAILED = 127

Spawner = Callable[[Sequence[str], Path], ChildProcess]


@dataclass(frozen=True)
class LaunchContext:
    root_dir: Path
    config: LauncherConfig = field(default_factory=LauncherConfig)
    stdout: TextIO = field(default_factory=lambda: sys.stdout)
    stderr: TextIO = field(default_factory=lambda: sys.stderr)
    spawn: Spawner = spawn_passthrough

    @property
    def presentations_root(self) -> Path:
        return self.root_dir / self.config.presentations_dir


def list_available(presentations_root: Path, out: TextIO) -> List[str]:
    """Print the presentation directories under ``presentations_root``.

    Best effort: an unreadable or missing directory prints nothing.
    Entries are not checked for a slide file.
    """
    try:
        with os.scandir(presentations_root) as it:
            available = [entry.name for entry in it if entry.is_dir()]
    except OSError:
        log.debug("Cannot list presentations in %s", presentations_root, exc_info=True)
        return []

    if available:
        print("\nAvailable presentations:", file=out)
        for name in available:
            print(f"- {name}", file=out)
    return available


def resolve_slide_path(config: LauncherConfig, name: Optional[str]) -> str:
    if not name:
        raise MissingArgumentError("Please provide the name of the presentation.")
    return "/".join((config.presentations_dir, name, config.slide_filename))


def _check_exists(ctx: LaunchContext, slide_path: str) -> Path:
    absolute = ctx.root_dir / slide_path
    if not absolute.exists():
        raise UnresolvedSlideFileError(slide_path)
    log.debug("Resolved %s -> %s", slide_path, absolute)
    return absolute


def resolve_and_run(ctx: LaunchContext, name: Optional[str]) -> int:
    try:
        slide_path = resolve_slide_path(ctx.config, name)
        _check_exists(ctx, slide_path)
    except MissingArgumentError as e:
        print(f"Error: {e}", file=ctx.stderr)
        print(f"Usage: {ctx.config.usage_command} <presentation-name>", file=ctx.stdout)
        list_available(ctx.presentations_root, ctx.stdout)
        return EXIT_USER_ERROR
    except UnresolvedSlideFileError as e:
        print(f"Error: {e}", file=ctx.stderr)
        list_available(ctx.presentations_root, ctx.stdout)
        return EXIT_USER_ERROR

    print(f"Starting Slidev for: {slide_path}", file=ctx.stdout)
    ctx.stdout.flush()

    try:
        child = ctx.spawn([*ctx.config.command, slide_path], ctx.root_dir)
    except SpawnError as e:
        print(f"Error: {e}", file=ctx.stderr)
        return EXIT_SPAWN_FAILED

    code = wait_for_exit(child)
    print(f"Slidev process exited with code {code}", file=ctx.stdout)
    if ctx.config.propagate_exit_code:
        return code
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deckdev",
        description="Start the Slidev dev server for one presentation under presentations/.",
    )
    parser.add_argument("name", nargs="?", help="Presentation directory name.")
    parser.add_argument(
        "--root",
        default=None,
        help="Directory holding presentations/ (default: $DECKDEV_ROOT, else the working directory).",
    )
    parser.add_argument("--config", default=None, help="JSON config file (default: <root>/deckdev.config.json).")
    parser.add_argument("--log-level", default=None, help="Diagnostic log level (default from config: WARNING).")
    return parser


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = _build_parser()
    # Names such as "-draft" look like options to argparse; keep them as the name.
    args, extras = parser.parse_known_args(argv)
    if extras:
        if args.name is not None or len(extras) > 1:
            parser.error(f"unrecognized arguments: {' '.join(extras)}")
        args.name = extras[0]
    return args


def main(argv: Optional[Sequence[str]] = None, root_dir: Optional[Path] = None) -> int:
    args = _parse_args(argv)
    root = resolve_root(args.root or (str(root_dir) if root_dir else None))

    try:
        config = load_launcher_config(args.config, root_dir=root)
        level = parse_log_level(args.log_level) if args.log_level else config.log_level
    except (LauncherError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USER_ERROR

    logging.basicConfig(
        level=logging.getLevelName(level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    log.debug("Presentation root: %s", root)

    ctx = LaunchContext(root_dir=root, config=config, spawn=spawn_passthrough)
    return resolve_and_run(ctx, args.name)
