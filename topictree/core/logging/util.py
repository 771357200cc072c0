# topictree/core/logging/util.py
from __future__ import annotations

import logging



def getLogger(name: str, side: str = "") -> logging.Logger:
    """Returns `side.name` (or plain `name`), e.g. getLogger("chat", "subscribers")."""
    side = str(side).strip()
    name = str(name).strip()
    return logging.getLogger(f"{side}.{name}" if side else name)
