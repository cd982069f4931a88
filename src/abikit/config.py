"""Defines the abikit configuration from env vars."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass
class AbikitConfig:
    """The configuration dataclass for the abikit command line."""

    abi_dir: str = "./abis"
    """The directory relative ABI paths are resolved against."""
    log_level: int = logging.INFO
    """The level to log at."""
    log_filename: str | None = None
    """The file to log to. If set to None, we don't log to a file."""
    log_stdout: bool = True
    """Whether to log to stdout."""

    def __post_init__(self):
        if isinstance(self.log_level, str):
            self.log_level = _to_log_level(self.log_level)
        if isinstance(self.log_stdout, str):
            self.log_stdout = self.log_stdout.strip().lower() in ("1", "true", "yes", "on")

    def resolve_abi_path(self, abi_path: str) -> str:
        """Resolve a relative ABI path against abi_dir unless it exists as given.

        Arguments
        ---------
        abi_path: str
            The path passed by the user.

        Returns
        -------
        str
            The path to read.
        """
        if os.path.isabs(abi_path) or os.path.exists(abi_path):
            return abi_path
        return os.path.join(self.abi_dir, abi_path)


def build_abikit_config(dotenv_file: str = "abikit.env") -> AbikitConfig:
    """Build an abikit config that looks for environmental variables.
    If env var exists, use that, otherwise, default.

    Arguments
    ---------
    dotenv_file: str, optional
        The path location of the dotenv file to load from.
        Defaults to "abikit.env".

    Returns
    -------
    AbikitConfig
        Config settings for the abikit command line.
    """
    # Look for and load local config if it exists
    if os.path.exists(dotenv_file):
        load_dotenv(dotenv_file)

    abi_dir = os.getenv("ABIKIT_ABI_DIR")
    log_level = os.getenv("ABIKIT_LOG_LEVEL")
    log_filename = os.getenv("ABIKIT_LOG_FILENAME")
    log_stdout = os.getenv("ABIKIT_LOG_STDOUT")

    arg_dict = {}
    if abi_dir is not None:
        arg_dict["abi_dir"] = abi_dir
    if log_level is not None:
        arg_dict["log_level"] = log_level
    if log_filename is not None:
        arg_dict["log_filename"] = log_filename
    if log_stdout is not None:
        arg_dict["log_stdout"] = log_stdout
    return AbikitConfig(**arg_dict)  # type: ignore[arg-type]


def _to_log_level(log_level: str) -> int:
    # Accept both level names ("DEBUG") and numbers ("10")
    if log_level.strip().isdigit():
        return int(log_level)
    level = logging.getLevelName(log_level.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level!r}")
    return level
