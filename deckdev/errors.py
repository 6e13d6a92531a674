"""Launcher error hierarchy."""

from typing import Sequence


class LauncherError(RuntimeError):
    """Base error for all launcher failures."""


class ConfigError(LauncherError):
    """Launcher configuration is malformed."""


class MissingArgumentError(LauncherError):
    """No presentation name was given."""


class UnresolvedSlideFileError(LauncherError):
    """The presentation name does not map to an existing slide file."""

    def __init__(self, slide_path: str):
        super().__init__(f'Could not find slides at "{slide_path}"')
        self.slide_path = slide_path


class SpawnError(LauncherError):
    """The presentation tool could not be started."""

    def __init__(self, command: Sequence[str], reason: str):
        super().__init__(f"Could not start {' '.join(command)}: {reason}")
        self.command = tuple(command)
