from __future__ import annotations

from collections.abc import Sequence
from fractions import Fraction
from typing import TYPE_CHECKING, Any

from asset_crop.app.session import ParameterCache
from asset_crop.app.state.crop_state import CropState
from asset_crop.errors import ConfigurationError
from asset_crop.logger import get_logger
from asset_crop.models import QUARTER_TURNS, AssetRef, CropDelegate, CropGeometry, CropRecord
from asset_crop.ops.export import CancellationToken, ExportRun

if TYPE_CHECKING:
    from asset_crop.app.session import CropSession

_logger = get_logger("crop_controller")

_RATIO_MAX_DENOMINATOR = 100


class CropController:
    """Keeps the crop parameters of the selected assets and exports them.

    The parameter list always mirrors the current selection: it is rebuilt by
    `reconcile` whenever the previewed asset or the selection changes, and
    replaced in a single assignment so readers never see a partial list.

    With ``keep_memory=True`` the list lives in the session's shared
    `ParameterCache`, so a later controller of the same session starts from
    it; otherwise it is local. `dispose` clears whichever list is in use.
    """

    def __init__(
        self,
        delegate: CropDelegate | None = None,
        *,
        keep_memory: bool = False,
        session: CropSession | None = None,
        codec: Any = None,
        source: Any = None,
    ) -> None:
        self.delegate = delegate or CropDelegate()
        self.keep_memory = bool(keep_memory)
        if not self.keep_memory:
            self._store = ParameterCache()
        elif session is None:
            raise ConfigurationError("keep_memory requires a CropSession to hold the shared parameters")
        else:
            self._store = session.parameters
        self._codec = codec
        self._source = source
        self.state = CropState()

    # ---- parameter list ----
    @property
    def crop_parameters(self) -> tuple[CropRecord, ...]:
        return self._store.records

    def _update_store(self, records: Sequence[CropRecord]) -> None:
        self._store.replace(tuple(records))

    def get(self, asset: AssetRef) -> CropRecord | None:
        """Return the crop parameters saved for `asset`, if any."""
        for record in self.crop_parameters:
            if record.asset == asset:
                return record
        return None

    def reconcile(
        self,
        active_asset: AssetRef | None,
        active_geometry: CropGeometry | None,
        selection: Sequence[AssetRef],
        rotation: int | None = None,
    ) -> None:
        """Rebuild the parameter list for `selection`, saving the active asset's edit.

        The active asset gets a fresh record from `active_geometry` and the
        rotation (the crop view's current rotation when omitted); every other
        asset keeps its saved record, or gets default parameters.
        """
        turns = self.state.rotation if rotation is None else int(rotation)
        records: list[CropRecord] = []
        for asset in selection:
            if active_asset is not None and asset == active_asset:
                records.append(CropRecord.from_state(asset, active_geometry, turns))
                continue
            saved = self.get(asset)
            records.append(saved if saved is not None else CropRecord.from_state(asset))
        self._update_store(records)
        _logger.debug(
            "reconciled %d record(s), active=%s",
            len(records),
            active_asset.id if active_asset is not None else None,
        )

    def clear(self) -> None:
        """Forget every saved crop parameter and reset the crop view state."""
        self._update_store(())
        self.state._set_preview_asset(None)
        self.state._set_rotation(0)

    def dispose(self) -> None:
        self.clear()
        self.state._set_crop_view_ready(False)

    # ---- aspect ratio ----
    @property
    def aspect_ratio(self) -> float:
        return self.delegate.crop_ratios[self.state.cropRatioIndex]

    @property
    def aspect_ratio_string(self) -> str:
        r = self.aspect_ratio
        if r == 1:
            return "1:1"
        f = Fraction(r).limit_denominator(_RATIO_MAX_DENOMINATOR)
        return f"{f.numerator}:{f.denominator}"

    def next_crop_ratio(self) -> None:
        """Select the next crop ratio, wrapping around to the first one."""
        index = self.state.cropRatioIndex
        self.state._set_crop_ratio_index((index + 1) % len(self.delegate.crop_ratios))

    # ---- crop view state ----
    @property
    def rotation(self) -> int:
        return self.state.rotation

    def rotate(self) -> None:
        self.state._set_rotation((self.state.rotation + 1) % QUARTER_TURNS)

    def apply_rotation(self, asset: AssetRef) -> None:
        """Restore the rotation saved for `asset` in the crop view."""
        saved = self.get(asset)
        self.state._set_rotation(saved.rotation if saved is not None else 0)

    @property
    def preview_asset(self) -> AssetRef | None:
        return self.state.previewAsset

    def set_preview_asset(self, asset: AssetRef | None) -> None:
        self.state._set_preview_asset(asset)

    def set_crop_view_ready(self, ready: bool) -> None:
        self.state._set_crop_view_ready(ready)

    # ---- export ----
    def _backends(self) -> tuple[Any, Any]:
        codec, source = self._codec, self._source
        if codec is None:
            from asset_crop.image_engine.codec import VipsCodec

            codec = self._codec = VipsCodec(self.delegate.scratch_dir, jpeg_quality=self.delegate.jpeg_quality)
        if source is None:
            from asset_crop.image_engine.source import FileAssetSource

            source = self._source = FileAssetSource()
        return codec, source

    def export_crop_files(
        self,
        selection: Sequence[AssetRef],
        skip_crop: bool = False,
        token: CancellationToken | None = None,
    ) -> ExportRun:
        """Apply the saved crop parameters to `selection`, lazily.

        Iterate the returned run to drive the export; each step yields an
        `ExportProgress`. The parameter list is read once, now.
        """
        codec, source = self._backends()
        return ExportRun(
            selection,
            self.crop_parameters,
            aspect_ratio=self.aspect_ratio,
            codec=codec,
            source=source,
            preferred_size=self.delegate.preferred_size,
            skip_crop=skip_crop,
            token=token,
        )
