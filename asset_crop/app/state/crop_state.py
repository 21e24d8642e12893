from __future__ import annotations

from PySide6.QtCore import Property, QObject, Signal

from asset_crop.models import QUARTER_TURNS, AssetRef


class CropState(QObject):
    """State bound by the crop view.

    Design:
    - The controller is authoritative; the view only reads these values and
      reacts to the change signals.
    - Rotation is stored in quarter turns (0..3).
    """

    cropRatioIndexChanged = Signal(int)
    cropViewReadyChanged = Signal(bool)
    previewAssetChanged = Signal(object)
    rotationChanged = Signal(int)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._crop_ratio_index = 0
        self._crop_view_ready = False
        self._preview_asset: AssetRef | None = None
        self._rotation = 0

    # ---- read-only properties (mutate via controller) ----
    def _get_crop_ratio_index(self) -> int:
        return int(self._crop_ratio_index)

    cropRatioIndex = Property(int, _get_crop_ratio_index, notify=cropRatioIndexChanged)  # type: ignore[arg-type]

    def _get_crop_view_ready(self) -> bool:
        return bool(self._crop_view_ready)

    cropViewReady = Property(bool, _get_crop_view_ready, notify=cropViewReadyChanged)  # type: ignore[arg-type]

    def _get_preview_asset(self) -> AssetRef | None:
        return self._preview_asset

    previewAsset = Property(object, _get_preview_asset, notify=previewAssetChanged)  # type: ignore[arg-type]

    def _get_rotation(self) -> int:
        return int(self._rotation)

    rotation = Property(int, _get_rotation, notify=rotationChanged)  # type: ignore[arg-type]

    # ---- internal mutation helpers (called by controller) ----
    def _set_crop_ratio_index(self, index: int) -> None:
        i = int(index)
        if i == self._crop_ratio_index:
            return
        self._crop_ratio_index = i
        self.cropRatioIndexChanged.emit(i)

    def _set_crop_view_ready(self, value: bool) -> None:
        v = bool(value)
        if v == self._crop_view_ready:
            return
        self._crop_view_ready = v
        self.cropViewReadyChanged.emit(v)

    def _set_preview_asset(self, asset: AssetRef | None) -> None:
        if asset == self._preview_asset:
            return
        self._preview_asset = asset
        self.previewAssetChanged.emit(asset)

    def _set_rotation(self, quarter_turns: int) -> None:
        r = int(quarter_turns) % QUARTER_TURNS
        if r == self._rotation:
            return
        self._rotation = r
        self.rotationChanged.emit(r)
