# topictree/core/settings.py
from __future__ import annotations
import json5, os
from functools import lru_cache
from pathlib import Path
from typing import cast

from pydantic import BaseModel, ConfigDict, Field, JsonValue, ValidationError

from topictree.core.errors import SettingsError

import logging
logger = logging.getLogger(__name__)

__all__ = [
    "SETTINGS_ENV_VAR", "SETTINGS_DEFAULTS", "DeliverySettings", "LoggingSettings",
    "TopicTreeSettings", "userSettingsPath", "loadUserSettings", "loadSettings",
    "deepMerge",
]


SETTINGS_ENV_VAR = "TOPICTREE_SETTINGS"
SETTINGS_DEFAULTS: dict[str, JsonValue] = {
    "delivery": {
        "defaultAsync": True,
        "isolateSubscriberErrors": False,
        "tracePublishes": False,
    },
    "logging": {
        "devModeEnabled": True,
        "level": None,
        "logFile": None,
        "noPropagate": ["asyncio"],
    },
}



class DeliverySettings(BaseModel):
    """How publishes are delivered."""
    model_config = ConfigDict(extra="forbid")

    defaultAsync: bool = True            # publish() without isAsync goes through the coalesced path
    isolateSubscriberErrors: bool = False # log a failing subscriber and keep delivering
    tracePublishes: bool = False         # DEBUG logs + log context for every publish/flush



class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    devModeEnabled: bool = True
    level: str | None = None
    logFile: str | None = None
    noPropagate: list[str] = Field(default_factory=lambda: ["asyncio"])



class TopicTreeSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    delivery: DeliverySettings = Field(default_factory=DeliverySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)



def userSettingsPath() -> Path:
    override = os.environ.get(SETTINGS_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path(os.path.expanduser("~/.topictree/topictree.json5"))



def loadUserSettings() -> JsonValue:
    filePath = userSettingsPath()
    if filePath.exists():
        try:
            return json5.loads(filePath.read_text(encoding="utf-8"))
        except Exception as err:
            logger.error("Failed to parse '%s': %s", filePath, err)
    return {}



@lru_cache(maxsize=1)
def loadSettings() -> TopicTreeSettings:
    """
    Returns the merged settings (defaults overlaid with the user file).
    Cached; call `loadSettings.cache_clear()` after changing the file.
    """
    merged = deepMerge(cast(JsonValue, SETTINGS_DEFAULTS), loadUserSettings())
    try:
        return TopicTreeSettings.model_validate(merged)
    except ValidationError as err:
        raise SettingsError(f"Invalid topictree settings in '{userSettingsPath()}': {err}") from err



def deepMerge(first: JsonValue, second: JsonValue) -> JsonValue:
    """
    Returns a new JsonValue where keys from `second` override/extend `first`.
    Only merges recursively when BOTH sides are JSON objects (dicts); any other
    right-hand value replaces the left one.
    """
    if isinstance(first, dict) and isinstance(second, dict):
        out: dict[str, JsonValue] = dict(first)
        for key, value in second.items():
            out[key] = deepMerge(out[key], value) if key in out else value
        return cast(JsonValue, out)
    return second

