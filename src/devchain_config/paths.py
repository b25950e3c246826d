"""Config file discovery for devchain-config library."""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from .constants import CONFIG_FILENAMES, CONFIG_PATH_ENV
from .exceptions import ConfigNotFoundError

logger = logging.getLogger(__name__)


def find_config_file(start_dir: Optional[Union[Path, str]] = None) -> Path:
    """
    Locate the configuration file.

    Lookup order:
    - $DEVCHAIN_CONFIG, when start_dir is not given
    - truffle-config.js, truffle.js, truffle-config.json in start_dir
      (defaults to the working directory), then in each parent directory

    Args:
        start_dir: Directory to start the upward search from

    Returns:
        Absolute path to the config file

    Raises:
        ConfigNotFoundError: If $DEVCHAIN_CONFIG points nowhere or no file is found
    """
    if start_dir is None:
        env_path = os.environ.get(CONFIG_PATH_ENV)
        if env_path:
            config_path = Path(env_path).expanduser().absolute()
            if not config_path.is_file():
                raise ConfigNotFoundError(
                    f"${CONFIG_PATH_ENV} points to {config_path}, which is not a file"
                )
            logger.debug("Using config file from $%s: %s", CONFIG_PATH_ENV, config_path)
            return config_path
        start = Path.cwd()
    else:
        start = Path(start_dir).absolute()

    for directory in (start, *start.parents):
        for filename in CONFIG_FILENAMES:
            candidate = directory / filename
            if candidate.is_file():
                logger.debug("Found config file %s", candidate)
                return candidate

    raise ConfigNotFoundError(
        f"No configuration file ({', '.join(CONFIG_FILENAMES)}) found in {start} "
        f"or its parents. Set ${CONFIG_PATH_ENV} to point at one."
    )
