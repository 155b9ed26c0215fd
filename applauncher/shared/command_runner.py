import shlex
import subprocess
from typing import Any, Callable, Optional
import structlog
from applauncher.core.errors import EmptyCommand, SpawnFailure


class CommandRunner:
    """
    Starts programs detached from the launcher. Only the spawn call itself is
    reported on; the child's lifetime and exit status are not tracked.
    """

    def __init__(self, logger: Any = None, popen: Optional[Callable] = None):
        self.logger = logger or structlog.get_logger()
        self._popen = popen or subprocess.Popen

    def split(self, command: str) -> list:
        """
        Splits a launch-ready command into argv using shell quoting rules.
        Raises:
            EmptyCommand: The command holds no program to run.
            SpawnFailure: The quoting is unbalanced.
        """
        if not command or not command.strip():
            raise EmptyCommand(command)
        try:
            argv = shlex.split(command)
        except ValueError as e:
            raise SpawnFailure(command, str(e)) from e
        if not argv or not argv[0]:
            raise EmptyCommand(command)
        return argv

    def launch(self, command: str) -> Any:
        """
        Launches `command` without waiting for it.
        Returns:
            The process handle; the caller is not expected to manage it.
        Raises:
            EmptyCommand: Nothing is left to run.
            SpawnFailure: The process could not be started.
        """
        argv = self.split(command)
        try:
            process = self._popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            self.logger.error(f"Error running command: {command}: {e}")
            raise SpawnFailure(command, e.strerror or str(e)) from e
        self.logger.info(f"Launched: {command}")
        return process
