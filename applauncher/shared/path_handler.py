import os
from pathlib import Path
from typing import List


class PathHandler:
    """
    Resolves application paths based on the XDG Base Directory
    Specification.
    """

    def __init__(self, app_name: str = "applauncher"):
        self.app_name = app_name
        self._home = Path.home()

    def _get_xdg_base_dir(self, env_var: str, default_path: Path) -> Path:
        """Helper to get XDG base directory with fallback."""
        path_str = os.getenv(env_var)
        if path_str:
            return Path(path_str)
        return default_path

    def get_config_dir(self) -> Path:
        """
        Returns $XDG_CONFIG_HOME/applauncher or ~/.config/applauncher.
        Creates the directory if it does not exist.
        """
        config_home = self._get_xdg_base_dir("XDG_CONFIG_HOME", self._home / ".config")
        config_dir = config_home / self.app_name
        config_dir.mkdir(parents=True, exist_ok=True)
        return config_dir

    def get_data_home(self) -> Path:
        return self._get_xdg_base_dir("XDG_DATA_HOME", self._home / ".local" / "share")

    def get_data_dirs(self) -> List[Path]:
        """
        Returns the system data directories from $XDG_DATA_DIRS, falling back
        to /usr/local/share and /usr/share when the variable is unset or empty.
        """
        raw = os.getenv("XDG_DATA_DIRS") or "/usr/local/share:/usr/share"
        return [Path(p) for p in raw.split(":") if p]

    def get_search_dirs(self, subdir: str) -> List[Path]:
        """
        Returns `subdir` under the user data home followed by every system data
        directory, in lookup priority order and without duplicates.
        """
        seen = set()
        result = []
        for base in [self.get_data_home(), *self.get_data_dirs()]:
            candidate = base / subdir
            if candidate in seen:
                continue
            seen.add(candidate)
            result.append(candidate)
        return result
