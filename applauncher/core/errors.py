from typing import Optional


class LauncherError(Exception):
    """Base class for every error raised by the launcher pipeline."""


class MissingField(LauncherError):
    """
    A descriptor lacks one of the keys a record cannot exist without.
    Args:
        field: The desktop-entry key that was missing or empty ("Name", "Exec").
        path: The descriptor file, when known.
    """

    def __init__(self, field: str, path: Optional[str] = None):
        self.field = field
        self.path = path
        where = f" in {path}" if path else ""
        super().__init__(f"missing required key '{field}'{where}")


class DecodeFailure(LauncherError):
    """An icon file could not be turned into RGBA pixels."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot decode {path}: {reason}" if reason else path)


class LaunchError(LauncherError):
    """Raised when a launch request cannot be carried out."""


class EmptyCommand(LaunchError):
    def __init__(self, command: str = ""):
        self.command = command
        super().__init__("nothing to run: the command is empty")


class SpawnFailure(LaunchError):
    def __init__(self, command: str, reason: str):
        self.command = command
        self.reason = reason
        super().__init__(f"failed to launch '{command}': {reason}")
