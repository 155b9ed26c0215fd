import copy
import time
import toml
import structlog
from pathlib import Path
from typing import Any, List, Optional, Dict, Union
from applauncher.shared import config_template
from applauncher.shared.path_handler import PathHandler


class ConfigHandler:
    """
    Manages the application's configuration file (config.toml) and provides
    key-path access to it.
    Handles file I/O and merging with defaults. Keys ending in `_hint` in the
    default template document a setting and never reach the file.
    """

    def __init__(
        self,
        logger: Any = None,
        config_file: Optional[Union[str, Path]] = None,
        path_handler: Optional[PathHandler] = None,
    ):
        """
        Sets up paths and loads the initial configuration.
        Args:
            logger: Logger to report through; a structlog logger is created if omitted.
            config_file: Explicit path to config.toml. Defaults to the XDG config dir.
            path_handler: Used to resolve the XDG config dir when `config_file` is omitted.
        """
        self.logger = logger or structlog.get_logger()
        self.path_handler = path_handler or PathHandler()
        self._load_successful: bool = False
        self.default_config = config_template.default_config
        if config_file is None:
            config_file = self.path_handler.get_config_dir() / "config.toml"
        self.config_file = Path(config_file).expanduser()
        self.config_data: Dict[str, Any] = self.load_config()

    def _strip_hints(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Recursively removes keys ending with '_hint' from a configuration dictionary.
        Args:
            data: The configuration dictionary, typically self.default_config.
        Returns:
            A copy containing only configuration values.
        """
        stripped_data = {}
        for key, value in data.items():
            if key.endswith("_hint"):
                continue
            if isinstance(value, dict):
                stripped_data[key] = self._strip_hints(value)
            else:
                stripped_data[key] = copy.deepcopy(value)
        return stripped_data

    @property
    def default_config_stripped(self) -> Dict[str, Any]:
        """Returns the default config without any setting metadata hints."""
        return self._strip_hints(self.default_config)

    def _recursive_merge(
        self,
        user_config: Dict[str, Any],
        default_config: Dict[str, Any],
    ) -> bool:
        """
        Recursively merges missing keys from `default_config` into `user_config`.
        Returns:
            True if any key was added.
        """
        added = False
        for key, default_value in default_config.items():
            if key not in user_config:
                user_config[key] = default_value
                added = True
            elif isinstance(default_value, dict) and isinstance(
                user_config.get(key), dict
            ):
                if self._recursive_merge(user_config[key], default_value):
                    added = True
        return added

    def save_config(self) -> None:
        """Writes the current state of self.config_data to the TOML file."""
        if not self._load_successful:
            self.logger.warning(
                "Skipping configuration save: config.toml failed to load. Please fix it manually."
            )
            return
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w") as f:
                toml.dump(self.config_data, f)
            self.logger.info("Configuration saved successfully.")
        except OSError as e:
            self.logger.error(f"Failed to save configuration to {self.config_file}: {e}")

    def load_config(self) -> Dict[str, Any]:
        """
        Loads the configuration from file, or uses defaults if missing/corrupt.
        Returns:
            The loaded and merged configuration dictionary.
        """
        config_from_file: Dict[str, Any] = {}
        file_must_be_created = not self.config_file.exists()
        load_succeeded = False
        if file_must_be_created:
            self.logger.info("Config file is missing. Will apply defaults and create.")
            load_succeeded = True
        else:
            max_retries = 3
            retry_delay_seconds = 0.1
            for attempt in range(max_retries):
                try:
                    with open(self.config_file, "r") as f:
                        config_from_file = toml.load(f)
                    self.logger.debug("Existing config.toml loaded successfully.")
                    load_succeeded = True
                    break
                except toml.TomlDecodeError as e:
                    self.logger.error(
                        f"config.toml is not valid TOML ({e}). Using default configuration."
                    )
                    config_from_file = {}
                    break
                except OSError as e:
                    self.logger.error(
                        f"Error loading config file on attempt {attempt + 1}: {e}. Retrying..."
                    )
                    time.sleep(retry_delay_seconds)
            else:
                self.logger.error(
                    "Failed to load config file after all retries. Using default configuration."
                )
                config_from_file = {}
        self._load_successful = load_succeeded
        self._recursive_merge(config_from_file, self.default_config_stripped)
        if file_must_be_created:
            self.logger.info("Saving default configuration to file because it was missing.")
            self.config_data = config_from_file
            self.save_config()
        return config_from_file

    def get_root_setting(self, key_path: List[str], default_value: Any = None) -> Any:
        """
        Traverses the configuration dict to retrieve a value.
        Args:
            key_path: List of strings representing the path (e.g., ['icons', 'size']).
            default_value: Value to return if the path is not found.
        Returns:
            The configuration value or the default value.
        """
        current_data = self.config_data
        for i, key in enumerate(key_path):
            if isinstance(current_data, dict) and key in current_data:
                current_data = current_data[key]
            else:
                self.logger.debug(
                    f"Missing configuration key at path: {' -> '.join(key_path[: i + 1])}. Using default value: {default_value}"
                )
                return default_value
        return current_data

