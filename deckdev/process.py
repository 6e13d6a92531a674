"""
Child process spawning with terminal passthrough.

The child inherits stdin/stdout/stderr; the parent never touches them while
the child runs. Termination is reported through a single-shot Future.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from deckdev.errors import SpawnError

log = logging.getLogger(__name__)


def normalize_returncode(code: int) -> int:
    """Map a POSIX signal death (negative code) to the shell's 128+N form."""
    if code < 0:
        return 128 + (-code)
    return code


@dataclass
class ChildProcess:
    proc: subprocess.Popen
    completion: "Future[int]" = field(default_factory=Future)

    @property
    def pid(self) -> int:
        return self.proc.pid

    def _watch(self) -> None:
        try:
            code = self.proc.wait()
        except Exception as e:
            self.completion.set_exception(e)
            return
        self.completion.set_result(normalize_returncode(code))


def spawn_passthrough(cmd: Sequence[str], cwd: Path) -> ChildProcess:
    argv = [str(c) for c in cmd]
    if argv:
        argv[0] = shutil.which(argv[0]) or argv[0]
    log.debug("Spawning %s in %s", argv, cwd)
    try:
        proc = subprocess.Popen(argv, cwd=str(cwd))
    except OSError as e:
        raise SpawnError(argv, e.strerror or repr(e)) from e

    child = ChildProcess(proc)
    watcher = threading.Thread(target=child._watch, name=f"child-watch-{proc.pid}", daemon=True)
    watcher.start()
    return child


def wait_for_exit(child: ChildProcess) -> int:
    # The terminal already delivered SIGINT to the child; keep waiting for its code.
    while True:
        try:
            return child.completion.result()
        except KeyboardInterrupt:
            log.debug("Interrupted while waiting for pid %s; still waiting", child.pid)
