"""
Secret resolution from the process environment and ``.env`` files.
"""
import logging
import os
from typing import Optional

from dotenv import dotenv_values, find_dotenv

logger = logging.getLogger(__name__)

DEFAULT_ENV_VAR = "APP_KEY"


def resolve_secret(env_var: str = DEFAULT_ENV_VAR,
                   dotenv_path: Optional[str] = None) -> Optional[str]:
    """Resolve the application secret.

    The ``.env`` file is read without touching ``os.environ``; a value set in
    the real environment takes precedence over the file.

    Args:
        env_var (str): Name of the variable holding the secret.
        dotenv_path (str, optional): Path to a ``.env`` file. When omitted,
            the nearest ``.env`` above the working directory is used if any.

    Returns:
        Optional[str]: The secret, or None if it is unset or empty.
    """
    value = os.environ.get(env_var)
    if value:
        return value

    path = dotenv_path if dotenv_path is not None else find_dotenv(usecwd=True)
    if path and os.path.isfile(path):
        value = dotenv_values(path).get(env_var)
        if value:
            logger.debug("Loaded %s from %s", env_var, path)
            return value

    return None
