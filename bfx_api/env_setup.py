"""Credential loading from the environment or a dotenv file.

Credentials are read from ``BFX_API_KEY`` / ``BFX_API_SECRET`` (or the shorter
``API_KEY`` / ``API_SECRET``). When the process environment does not hold
them, a ``.bfx_cli.env`` file in the working directory, then in the home
directory, is loaded with python-dotenv.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from bfx_api.errors import ValidationError
from bfx_api.types import Credential

log = logging.getLogger(__name__)

ENV_FILE_NAME = ".bfx_cli.env"
KEY_VARIABLES = ("BFX_API_KEY", "API_KEY")
SECRET_VARIABLES = ("BFX_API_SECRET", "API_SECRET")


def _first_set(names: tuple[str, ...]) -> str:
    for name in names:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return ""


def _read_environment() -> tuple[str, str]:
    return _first_set(KEY_VARIABLES), _first_set(SECRET_VARIABLES)


def find_env_file() -> Path | None:
    """Return the first existing ``.bfx_cli.env``: working directory, then home."""
    for directory in (Path.cwd(), Path.home()):
        path = directory / ENV_FILE_NAME
        if path.is_file():
            return path
    return None


def load_credential(env_file: str | Path | None = None) -> Credential:
    """Load the API credential.

    Args:
        env_file: Explicit dotenv file to load when the environment holds no
            credential. Defaults to the first ``.bfx_cli.env`` found.

    Returns:
        The credential, empty (public-only) when none was found.

    Raises:
        ValidationError: If ``env_file`` is given but does not exist.

    """
    key, secret = _read_environment()
    if key and secret:
        log.info("Using API credentials from environment variables")
        return Credential.from_strings(key, secret)

    path: Path | None
    if env_file is not None:
        path = Path(env_file)
        if not path.is_file():
            raise ValidationError(f"Credential file {env_file} does not exist")
    else:
        path = find_env_file()

    if path is not None:
        log.info("Loading API credentials from %s", path)
        load_dotenv(path)
        key, secret = _read_environment()
    else:
        log.info("%s file not found. Falling back to environment variables.", ENV_FILE_NAME)

    if not key or not secret:
        log.info("No API credentials found, only public endpoints are available")
        return Credential()
    return Credential.from_strings(key, secret)
