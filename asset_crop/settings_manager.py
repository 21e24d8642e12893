from __future__ import annotations

import json
import os
from typing import Any

from .errors import ConfigurationError
from .logger import get_logger
from .models import DEFAULT_CROP_RATIOS, DEFAULT_JPEG_QUALITY, DEFAULT_PREFERRED_SIZE, CropDelegate
from .path_utils import abs_path

_logger = get_logger("settings")


class SettingsManager:
    def __init__(self, settings_path: str):
        self.settings_path = settings_path
        self._settings: dict[str, Any] = {}
        self.load()

    DEFAULTS: dict[str, Any] = {
        "crop_ratios": list(DEFAULT_CROP_RATIOS),
        "preferred_size": DEFAULT_PREFERRED_SIZE,
        "jpeg_quality": DEFAULT_JPEG_QUALITY,
        "scratch_dir": None,
        "keep_memory": False,
    }

    def load(self) -> None:
        try:
            if os.path.exists(self.settings_path):
                with open(self.settings_path, encoding="utf-8") as f:
                    data = json.load(f)
                    if isinstance(data, dict):
                        self._settings = data
                        _logger.debug("settings loaded: %s", self.settings_path)
                        return
        except (OSError, ValueError) as e:
            _logger.warning("settings load failed: %s", e)
        self._settings = {}

    def save(self) -> None:
        try:
            parent = os.path.dirname(self.settings_path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(self.settings_path, "w", encoding="utf-8") as f:
                json.dump(self._settings, f, ensure_ascii=False, indent=2)
            _logger.debug("settings saved: %s", self.settings_path)
        except OSError as e:
            _logger.error("settings save failed: %s", e)

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._settings:
            return self._settings[key]
        if default is not None:
            return default
        return self.DEFAULTS.get(key)

    def has(self, key: str) -> bool:
        return key in self._settings

    def set(self, key: str, value: Any) -> None:
        if key == "scratch_dir" and value:
            value = str(abs_path(value))
        self._settings[key] = value
        self.save()

    @property
    def data(self) -> dict[str, Any]:
        return self._settings

    @property
    def keep_memory(self) -> bool:
        return bool(self.get("keep_memory", False))

    @property
    def scratch_dir(self) -> str | None:
        val = self.get("scratch_dir")
        return str(abs_path(val)) if isinstance(val, str) and val else None

    def crop_delegate(self) -> CropDelegate:
        """Build the export options; invalid values raise ConfigurationError."""
        ratios = self.get("crop_ratios")
        if not isinstance(ratios, (list, tuple)):
            raise ConfigurationError(f"crop_ratios must be a list of numbers: {ratios!r}")
        try:
            return CropDelegate(
                crop_ratios=tuple(float(r) for r in ratios),
                preferred_size=int(self.get("preferred_size")),
                jpeg_quality=int(self.get("jpeg_quality")),
                scratch_dir=abs_path(self.scratch_dir) if self.scratch_dir else None,
            )
        except (TypeError, ValueError) as e:
            if isinstance(e, ConfigurationError):
                raise
            raise ConfigurationError(f"invalid crop settings in {self.settings_path}: {e}") from e
