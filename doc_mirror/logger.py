# === FILE: doc_mirror/logger.py ===
"""Logging for DocMirror.

Everything logs below the ``DocMirror`` logger. Modules take a component
child with :func:`get_logger` (``DocMirror.fetcher``, ``DocMirror.storage``,
...), so a noisy part of a run can be turned up or down on its own::

    configure(level="INFO", component_levels={"storage": "WARNING"})
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Mapping, Optional, Union

DEFAULT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
ROOT_NAME = "DocMirror"
COMPONENTS = ("crawler", "fetcher", "resolver", "scheduler", "storage", "links", "engine")

Level = Union[int, str]


def get_logger(component: Optional[str] = None) -> logging.Logger:
    """The project logger, or its child for *component*."""
    if not component:
        return logging.getLogger(ROOT_NAME)
    return logging.getLogger(f"{ROOT_NAME}.{component}")


def _drop_handlers(lg: logging.Logger) -> None:
    for handler in list(lg.handlers):
        lg.removeHandler(handler)
        handler.close()


def configure(
    *,
    level: Level = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
    component_levels: Optional[Mapping[str, Level]] = None,
) -> logging.Logger:
    """
    Replace the handlers of the project logger: stdout always, plus a
    rotating *log_file* (5 MB, 3 backups) when given. Components not named
    in *component_levels* follow *level*.
    """
    root = get_logger()
    _drop_handlers(root)
    root.setLevel(level)
    root.propagate = False

    formatter = logging.Formatter(log_format)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(str(log_file), maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8")
        )
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    overrides = dict(component_levels or {})
    unknown = set(overrides) - set(COMPONENTS)
    if unknown:
        raise ValueError(f"Unknown log component(s): {', '.join(sorted(unknown))}")
    for component in COMPONENTS:
        get_logger(component).setLevel(overrides.get(component, logging.NOTSET))
    return root


def init_logging(
    level: Level = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
    component_levels: Optional[Mapping[str, Level]] = None,
) -> logging.Logger:
    """Positional-friendly form of :func:`configure` used by the CLI."""
    return configure(level=level, log_file=log_file, log_format=log_format, component_levels=component_levels)


logger = init_logging()

__all__ = ["COMPONENTS", "configure", "get_logger", "init_logging", "logger"]
