"""Crop parameter store and export pipeline for selected media assets.

Keep this module lightweight: it exposes the value types only.
Qt-backed pieces are imported from their modules:
    - `from asset_crop.ops.crop_controller import CropController`
    - `from asset_crop.app.session import CropSession`
    - `from asset_crop.ops.export_worker import ExportWorker`
"""

from asset_crop.errors import ConfigurationError, MissingSourceError
from asset_crop.models import (
    AssetRef,
    CropArea,
    CropDelegate,
    CropGeometry,
    CropRecord,
    ExportItem,
    ExportProgress,
    MediaKind,
)

__all__ = [
    "AssetRef",
    "ConfigurationError",
    "CropArea",
    "CropDelegate",
    "CropGeometry",
    "CropRecord",
    "ExportItem",
    "ExportProgress",
    "MediaKind",
    "MissingSourceError",
]
