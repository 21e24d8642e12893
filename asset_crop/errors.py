"""Exceptions raised by the crop store and the export pipeline."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Invalid crop/export configuration, detected at construction time."""


class MissingSourceError(RuntimeError):
    """The original file of an asset could not be obtained; ends the export run."""

    def __init__(self, asset_id: str) -> None:
        super().__init__(f"Source file unavailable for asset {asset_id!r}")
        self.asset_id = asset_id
