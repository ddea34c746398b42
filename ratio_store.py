"""
Durable storage for the two conversion ratios.

Values are kept as strings under fixed keys, the same shape a browser's
key/value storage would hold. Storage problems never reach the form: a bad
read looks like an empty store and a failed write is logged and dropped.
"""

import json
import logging
import os
from typing import TYPE_CHECKING, Dict, Optional

if TYPE_CHECKING:
    from area_converter import RatioConfig

logger = logging.getLogger(__name__)


class RatioStore:
    """Key/value capability the converter reads and writes ratios through."""

    def load(self) -> Dict[str, str]:
        """Raw stored strings by key; parsing happens in RatioConfig.from_storage."""
        raise NotImplementedError

    def save(self, config: "RatioConfig") -> None:
        raise NotImplementedError


class MemoryRatioStore(RatioStore):
    def __init__(self, values: Optional[Dict[str, str]] = None):
        self.values: Dict[str, str] = dict(values or {})
        self.save_count = 0

    def load(self) -> Dict[str, str]:
        return dict(self.values)

    def save(self, config: "RatioConfig") -> None:
        self.values.update(config.as_storage())
        self.save_count += 1


class JsonFileRatioStore(RatioStore):
    """Ratios in a small JSON object on disk."""

    def __init__(self, filepath: str):
        self.filepath = os.path.expanduser(filepath)

    def load(self) -> Dict[str, str]:
        if not os.path.exists(self.filepath):
            return {}
        try:
            with open(self.filepath, "r") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read ratios from %s: %s", self.filepath, e)
            return {}

        if not isinstance(data, dict):
            logger.warning("Ignoring ratio file %s: not a JSON object", self.filepath)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def save(self, config: "RatioConfig") -> None:
        values = self.load()
        values.update(config.as_storage())
        try:
            directory = os.path.dirname(self.filepath)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.filepath, "w") as f:
                json.dump(values, f, indent=2)
        except OSError:
            logger.warning("Could not write ratios to %s", self.filepath, exc_info=True)
