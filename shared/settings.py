"""Read the optional JSON settings file that can relocate the game's data files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

logger = logging.getLogger(__name__)


def load_settings(path: Path, defaults: Dict[str, Any], allowed: Optional[Iterable[str]] = None) -> Dict[str, Any]:
    """
    Load settings from ``path`` merged over ``defaults``.

    Only keys in ``allowed`` (every key of ``defaults`` when omitted) are taken
    from the file. Returns defaults if the file is missing or invalid.
    """
    data = dict(defaults)
    keys = set(allowed) if allowed is not None else set(defaults)
    if not path.exists():
        return data
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring settings file %s (%s)", path, exc)
        return data
    if not isinstance(raw, dict):
        logger.warning("Ignoring settings file %s (expected a JSON object)", path)
        return data
    for key, value in raw.items():
        if key in keys and isinstance(value, str) and value.strip():
            data[key] = value
    return data
