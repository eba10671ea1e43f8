"""User settings and versioning configuration discovery"""

import configparser
import logging
import os
import platform
from pathlib import Path
from typing import Any, Dict, Optional, Union

from gitversion.constants import CONFIG_FILE_NAMES
from gitversion.model.configuration import GitVersionConfiguration
from gitversion.model.validation import ConfigurationParseError

logger = logging.getLogger(__name__)

APP_NAME = "gitversion"

_home = os.path.expanduser("~")

xdg_config_home = os.environ.get("XDG_CONFIG_HOME") or os.path.join(_home, ".config")

DEFAULTS_SECTION = "defaults"

default_cfg = {DEFAULTS_SECTION: {"workflow": "gitflow", "output": "text"}}

if platform.system() == "Darwin":
    # macOS
    config_dir = Path("~/Library/Application Support/gitversion").expanduser()
else:
    # Linux or others
    config_dir = Path(os.path.join(xdg_config_home, APP_NAME))


def get_config_file() -> Path:
    return config_dir / f"{APP_NAME}.cfg"


class ConfigAccessor:
    """
    A dict-like accessor for the user settings file.

    Missing sections or keys fall back to the given default.

    Usage:
        config = ConfigAccessor()
        workflow = config.get('defaults', 'workflow', 'gitflow')
    """

    def __init__(self, config_path: Optional[Path] = None):
        if config_path is None:
            self.config_path = get_config_file()
        else:
            self.config_path = Path(config_path)

        self.config = configparser.ConfigParser()
        if self.config_path.exists():
            self.config.read(self.config_path)

    def get(self, section: str, key: str, default: Any = None) -> Any:
        try:
            return self.config[section][key]
        except (KeyError, configparser.NoSectionError, configparser.NoOptionError):
            return default

    def defaults(self) -> Dict[str, str]:
        """CLI defaults, with built-in values for anything not set."""
        values = dict(default_cfg[DEFAULTS_SECTION])
        for key in values:
            values[key] = self.get(DEFAULTS_SECTION, key, values[key])
        return values


def find_config_file(repo_root: Union[str, Path, None] = None) -> Optional[Path]:
    """Return the first well-known configuration file in repo_root, if any."""
    root = Path(repo_root) if repo_root is not None else Path.cwd()
    for name in CONFIG_FILE_NAMES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def load_configuration(
    path: Union[str, Path, None] = None,
    repo_root: Union[str, Path, None] = None,
) -> GitVersionConfiguration:
    """
    Load the versioning configuration.

    Args:
        path: Explicit configuration file (.yml, .yaml or .json)
        repo_root: Directory searched for GitVersion.yml and friends when no
            path is given

    Returns:
        The loaded configuration, or the defaults when no file exists

    Raises:
        ConfigurationParseError: If the file cannot be read or does not fit the
            configuration schema
    """
    if path is None:
        config_file = find_config_file(repo_root)
        if config_file is None:
            logger.debug("No configuration file found, using defaults")
            return GitVersionConfiguration()
    else:
        config_file = Path(path)
        if not config_file.is_file():
            raise ConfigurationParseError(
                message="Configuration file not found", config_file=config_file
            )

    logger.debug(f"Loading configuration from {config_file}")
    if config_file.suffix.lower() == ".json":
        configuration = GitVersionConfiguration.from_json(config_file)
    else:
        configuration = GitVersionConfiguration.from_yaml(config_file)

    configuration.validate_model_structure()
    return configuration
