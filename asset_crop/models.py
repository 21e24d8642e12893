"""Value types shared by the crop store and the export pipeline.

All types are immutable. Crop areas are stored in normalized coordinates
(0..1) relative to the oriented asset, so they stay valid whatever resolution
the export pipeline ends up working at.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from asset_crop import filters
from asset_crop.errors import ConfigurationError

DEFAULT_CROP_RATIOS: tuple[float, ...] = (1.0, 4 / 5)
DEFAULT_PREFERRED_SIZE = 1080
DEFAULT_JPEG_QUALITY = 90

QUARTER_TURNS = 4


class MediaKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class AssetRef:
    """A selected media item. Identity is the `id` alone."""

    id: str
    media_kind: MediaKind = field(default=MediaKind.IMAGE, compare=False)
    oriented_width: int = field(default=0, compare=False)
    oriented_height: int = field(default=0, compare=False)
    path: Path | None = field(default=None, compare=False)

    @property
    def is_image(self) -> bool:
        return self.media_kind is MediaKind.IMAGE


def _clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


@dataclass(frozen=True, slots=True)
class CropArea:
    """Normalized rect (0..1) in (left, top, width, height) form."""

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def normalized(self) -> CropArea:
        x, y, w, h = float(self.left), float(self.top), float(self.width), float(self.height)
        if w < 0:
            x = x + w
            w = -w
        if h < 0:
            y = y + h
            h = -h
        return CropArea(x, y, w, h)

    def clamped(self) -> CropArea:
        """Fit the rect inside the unit square, size first, then position."""
        n = self.normalized()
        w = _clamp(n.width, 0.0, 1.0)
        h = _clamp(n.height, 0.0, 1.0)
        x = _clamp(n.left, 0.0, 1.0 - w)
        y = _clamp(n.top, 0.0, 1.0 - h)
        return CropArea(x, y, w, h)

    def to_pixels(self, width: int, height: int) -> tuple[int, int, int, int]:
        """Return (left, top, width, height) in pixels of a width x height image.

        The result always lies inside the image and is at least 1x1.
        """
        a = self.clamped()
        left = min(round(a.left * width), max(0, width - 1))
        top = min(round(a.top * height), max(0, height - 1))
        w = max(1, min(round(a.width * width), width - left))
        h = max(1, min(round(a.height * height), height - top))
        return left, top, w, h


@dataclass(frozen=True, slots=True)
class CropGeometry:
    """Crop view state at the moment an edit is finalized.

    `internal` holds codec-specific parameters that are carried along but
    never interpreted here.
    """

    scale: float = 1.0
    area: CropArea | None = None
    internal: Any = None


@dataclass(frozen=True, slots=True)
class CropRecord:
    """Crop parameters of one asset, as used at export time."""

    asset: AssetRef
    geometry: CropGeometry | None = None
    scale: float = 1.0
    rotation: int = 0  # quarter turns: 0, 1, 2, 3
    area: CropArea | None = None

    @classmethod
    def from_state(
        cls,
        asset: AssetRef,
        geometry: CropGeometry | None = None,
        rotation: int = 0,
    ) -> CropRecord:
        return cls(
            asset=asset,
            geometry=geometry,
            scale=geometry.scale if geometry is not None else 1.0,
            rotation=int(rotation) % QUARTER_TURNS,
            area=geometry.area if geometry is not None else None,
        )

    @property
    def ffmpeg_crop(self) -> str | None:
        return filters.ffmpeg_crop(self)

    @property
    def ffmpeg_scale(self) -> str | None:
        return filters.ffmpeg_scale(self)

    @property
    def ffmpeg_rotate(self) -> str | None:
        return filters.ffmpeg_rotate(self)


@dataclass(frozen=True, slots=True)
class ExportItem:
    """Result for one asset. `output_file` is None for pass-through items."""

    output_file: Path | None
    record: CropRecord


@dataclass(frozen=True, slots=True)
class ExportProgress:
    """Snapshot emitted by an export run; `fraction` is between 0.0 and 1.0."""

    items: tuple[ExportItem, ...]
    selection: tuple[AssetRef, ...]
    aspect_ratio: float
    fraction: float

    @property
    def done(self) -> bool:
        return self.fraction >= 1.0


@dataclass(frozen=True, slots=True)
class CropDelegate:
    """Crop and export options, validated once at construction."""

    crop_ratios: tuple[float, ...] = DEFAULT_CROP_RATIOS
    preferred_size: int = DEFAULT_PREFERRED_SIZE
    jpeg_quality: int = DEFAULT_JPEG_QUALITY
    scratch_dir: Path | None = None

    def __post_init__(self) -> None:
        ratios = tuple(float(r) for r in self.crop_ratios)
        if not ratios:
            raise ConfigurationError("The list of supported crop ratios cannot be empty.")
        if any(r <= 0 for r in ratios):
            raise ConfigurationError(f"Crop ratios must be positive: {ratios}")
        if int(self.preferred_size) <= 0:
            raise ConfigurationError(f"preferred_size must be positive: {self.preferred_size}")
        if not 1 <= int(self.jpeg_quality) <= 100:
            raise ConfigurationError(f"jpeg_quality must be within 1..100: {self.jpeg_quality}")
        object.__setattr__(self, "crop_ratios", ratios)
