"""Export pipeline: sample -> rotate -> crop, one asset at a time.

`ExportRun` is a one-shot iterator of `ExportProgress`. Work is only done
while the consumer asks for the next snapshot, so a consumer that stops
iterating (or cancels the token) stops the pipeline before the next asset.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

from asset_crop.errors import MissingSourceError
from asset_crop.logger import get_logger
from asset_crop.models import AssetRef, CropRecord, ExportItem, ExportProgress
from asset_crop.path_utils import discard, new_scratch_file

_logger = get_logger("export")


class CancellationToken:
    """Set once by the consumer; checked by the pipeline between assets."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


def _rotate_file(codec: Any, working: Path, quarter_turns: int) -> Path:
    """Rotate `working` into a new file and delete it; keep it if undecodable."""
    image = codec.decode(working)
    if image is None:
        _logger.debug("rotation skipped, cannot decode %s", working)
        return working
    data = codec.encode(codec.rotate(image, quarter_turns * 90))
    rotated = new_scratch_file(working.parent, "rotated")
    try:
        rotated.write_bytes(data)
    except OSError:
        discard(rotated)
        raise
    discard(working)
    return rotated


def export_item(record: CropRecord, *, codec: Any, source: Any, preferred_size: int) -> ExportItem:
    """Transform one image asset according to its record.

    Raises:
        MissingSourceError: If the asset's original file is unavailable
    """
    asset = record.asset
    origin = source.origin_file(asset)
    if origin is None:
        raise MissingSourceError(asset.id)

    scale = record.scale if record.scale > 0 else 1.0
    working: Path | None = None
    try:
        # keep the sample large enough for the zoomed-in crop
        working = codec.sample(origin, round(preferred_size / scale))
        if record.rotation != 0:
            working = _rotate_file(codec, working, record.rotation)
        if record.area is None:
            _logger.debug("exported %s without crop: %s", asset.id, working)
            return ExportItem(output_file=working, record=record)
        cropped = codec.crop(working, record.area)
    except Exception:
        _logger.debug("export failed for %s, discarding scratch files", asset.id)
        if working is not None and working != origin:
            discard(working)
        raise

    if working != origin:
        discard(working)
    _logger.debug("exported %s: %s", asset.id, cropped)
    return ExportItem(output_file=cropped, record=record)


class ExportRun:
    """Lazily export `selection`, yielding a progress snapshot after each asset.

    The first snapshot has fraction 0.0 and is produced before any work; the
    last one has fraction exactly 1.0 and holds one item per asset.
    """

    def __init__(
        self,
        selection: Iterable[AssetRef],
        records: Iterable[CropRecord],
        *,
        aspect_ratio: float,
        codec: Any,
        source: Any,
        preferred_size: int,
        skip_crop: bool = False,
        token: CancellationToken | None = None,
    ) -> None:
        self.selection = tuple(selection)
        self.records = tuple(records)
        self.aspect_ratio = float(aspect_ratio)
        self.codec = codec
        self.source = source
        self.preferred_size = int(preferred_size)
        self.skip_crop = bool(skip_crop)
        self.token = token or CancellationToken()
        self.items: list[ExportItem] = []
        self._iter = self._produce()

    def __iter__(self) -> Iterator[ExportProgress]:
        return self

    def __next__(self) -> ExportProgress:
        return next(self._iter)

    def cancel(self) -> None:
        self.token.cancel()

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled

    def close(self) -> None:
        self._iter.close()

    def result(self) -> list[ExportItem]:
        """Run to completion and return the exported items."""
        for _progress in self:
            pass
        return list(self.items)

    def _resolve(self, asset: AssetRef) -> CropRecord:
        for record in self.records:
            if record.asset == asset:
                return record
        return CropRecord.from_state(asset)

    def _snapshot(self, fraction: float) -> ExportProgress:
        return ExportProgress(
            items=tuple(self.items),
            selection=self.selection,
            aspect_ratio=self.aspect_ratio,
            fraction=fraction,
        )

    def _produce(self) -> Iterator[ExportProgress]:
        total = len(self.selection)
        _logger.info("export started: %d asset(s), skip_crop=%s", total, self.skip_crop)
        yield self._snapshot(0.0)

        for index, asset in enumerate(self.selection):
            if self.token.cancelled:
                _logger.info("export cancelled after %d/%d asset(s)", index, total)
                return

            record = self._resolve(asset)
            if self.skip_crop or not asset.is_image:
                self.items.append(ExportItem(output_file=None, record=record))
            else:
                self.items.append(
                    export_item(
                        record,
                        codec=self.codec,
                        source=self.source,
                        preferred_size=self.preferred_size,
                    )
                )

            progress = (index + 1) / total
            if progress < 1.0:
                yield self._snapshot(progress)

        _logger.info("export finished: %d item(s)", len(self.items))
        yield self._snapshot(1.0)
