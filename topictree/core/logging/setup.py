# topictree/core/logging/setup.py
from __future__ import annotations
import logging
import logging.handlers

from topictree.core.settings import TopicTreeSettings, loadSettings
from .formatters import DevFormatter, JsonFormatter

__all__ = ["configureLogging"]



def configureLogging(settings: TopicTreeSettings | None = None) -> logging.Logger:
    """
    Install the global logging configuration for an application embedding topictree.
    The library never calls this on its own.

    Dev:
      - Console pretty logs (DEBUG)
      - JSON file log (DEBUG) when `logging.logFile` is set

    Prod:
      - Console INFO
      - JSON file logs INFO with rotation

    `logging.level` overrides the level picked by dev/prod mode.
    Returns the configured root logger.
    """
    cfg = (settings if settings is not None else loadSettings()).logging
    if cfg.level:
        rootLevel = logging.getLevelName(cfg.level.upper())
        if not isinstance(rootLevel, int):
            raise ValueError(f"Unknown logging level '{cfg.level}'")
    else:
        rootLevel = logging.DEBUG if cfg.devModeEnabled else logging.INFO

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(rootLevel)

    for name in cfg.noPropagate:
        logging.getLogger(name).propagate = False

    consoleHandler = logging.StreamHandler()
    consoleHandler.setLevel(rootLevel)
    consoleHandler.setFormatter(DevFormatter() if cfg.devModeEnabled else JsonFormatter())
    root.addHandler(consoleHandler)

    if cfg.logFile:
        fileHandler = logging.handlers.RotatingFileHandler(
            cfg.logFile,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8"
        )
        fileHandler.setLevel(rootLevel)
        fileHandler.setFormatter(JsonFormatter())
        root.addHandler(fileHandler)

    return root
