"""Black configuration for generated modules.

The ``[tool.black]`` table of the project's pyproject.toml is honoured;
without one the defaults below apply.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any

import black

logger = logging.getLogger(__name__)

DEFAULT_LINE_LENGTH = 100

DEFAULT_BLACK_CONFIG: dict[str, Any] = {
    "line-length": DEFAULT_LINE_LENGTH,
    "skip-string-normalization": False,
    "skip-magic-trailing-comma": False,
}


def find_black_config(directory: str | Path = ".") -> dict[str, Any]:
    """Return ``[tool.black]`` from directory/pyproject.toml merged over the defaults."""
    config = dict(DEFAULT_BLACK_CONFIG)
    pyproject = Path(directory) / "pyproject.toml"
    if not pyproject.is_file():
        return config

    with open(pyproject, "rb") as f:
        data = tomllib.load(f)
    overrides = data.get("tool", {}).get("black", {})
    if overrides:
        logger.debug("Using [tool.black] from %s", pyproject)
    config.update(overrides)
    return config


def black_mode(config: dict[str, Any]) -> black.Mode:
    """Map pyproject-style keys onto a black.Mode."""
    target_versions = {
        black.TargetVersion[version.upper()] for version in config.get("target-version", [])
    }
    return black.Mode(
        target_versions=target_versions,
        line_length=config["line-length"],
        string_normalization=not config["skip-string-normalization"],
        magic_trailing_comma=not config["skip-magic-trailing-comma"],
        preview=config.get("preview", False),
    )


def load_black_mode(directory: str | Path = ".") -> black.Mode:
    return black_mode(find_black_config(directory))
