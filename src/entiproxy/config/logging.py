"""Logging setup for entiproxy entry points."""

from __future__ import annotations

import logging
from typing import Final

from .env import optional_env_var
from .errors import ConfigurationError

LOG_LEVEL_ENV: Final[str] = "ENTIPROXY_LOG_LEVEL"


def get_log_level(default: int = logging.INFO) -> int:
    """Return the level named by ``ENTIPROXY_LOG_LEVEL`` (e.g. ``DEBUG``)."""

    name = optional_env_var(LOG_LEVEL_ENV)
    if name is None:
        return default
    level = logging.getLevelNamesMapping().get(name.upper())
    if level is None:
        raise ConfigurationError(f"Invalid {LOG_LEVEL_ENV}: {name}")
    return level


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: the level
    defaults to ``ENTIPROXY_LOG_LEVEL`` (INFO when unset) and a terse format suitable
    for CLI output. Pass ``force=True`` to reconfigure during tests.
    """

    logging.basicConfig(
        level=get_log_level() if level is None else level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
