"""
Settings base class.

Values are read from init kwargs, then the process environment, then an env
file. The env file is the one named by RAGTIME_ENV_FILE, otherwise the first of
`.envs/local.env` and `.envs/dev.env` found in the working directory.
"""

import os
from pathlib import Path
from typing import TypeVar

from loguru import logger
from pydantic_settings import BaseSettings, SettingsConfigDict

T = TypeVar("T", bound="ABCBaseSettings")

ENV_FILE_VARIABLE = "RAGTIME_ENV_FILE"
DEFAULT_ENV_PATH = Path(".envs")
DEFAULT_ENV_FILE_CANDIDATES = (
    DEFAULT_ENV_PATH / "local.env",
    DEFAULT_ENV_PATH / "dev.env",
)


def resolve_env_file() -> Path | None:
    explicit = os.environ.get(ENV_FILE_VARIABLE)
    if explicit:
        path = Path(explicit)
        if path.is_file():
            logger.debug(f"Using env file from {ENV_FILE_VARIABLE}: {path}")
            return path
        logger.warning(f"{ENV_FILE_VARIABLE} points to a missing file: {path}")
        return None

    for candidate in DEFAULT_ENV_FILE_CANDIDATES:
        if candidate.is_file():
            logger.debug(f"Using env file: {candidate}")
            return candidate
    return None


class ABCBaseSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=resolve_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @classmethod
    def from_env_file(cls: type[T], env_path: str | Path) -> T:
        """
        Build settings from a specific env file, keeping the class's env prefix.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        env_path = Path(env_path)
        if not env_path.is_file():
            raise FileNotFoundError(f"Env file {env_path} does not exist.")
        return cls(_env_file=env_path)
