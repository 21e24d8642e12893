"""Image codec and sampler using pyvips.

The export pipeline only relies on the five methods of `VipsCodec`
(`sample`, `decode`, `rotate`, `encode`, `crop`); any object providing them
can be passed to the controller instead.
"""

from __future__ import annotations

import contextlib
import math
from pathlib import Path
from typing import Any

from asset_crop.logger import get_logger
from asset_crop.models import DEFAULT_JPEG_QUALITY, CropArea
from asset_crop.path_utils import new_scratch_file, scratch_dir

_logger = get_logger("codec")

JPEG_EXTS = {".jpg", ".jpeg"}
_RIGHT_ANGLES = {90: "d90", 180: "d180", 270: "d270"}

_pyvips: Any | None = None


def _get_pyvips_module() -> Any:
    global _pyvips
    if _pyvips is None:
        import pyvips  # type: ignore

        _pyvips = pyvips
        # Configure pyvips caches to avoid memory growth across a batch
        with contextlib.suppress(Exception):
            pyvips.cache_set_max(0)
            pyvips.cache_set_max_mem(0)
            pyvips.cache_set_max_files(0)
    return _pyvips


def open_oriented(path: str | Path, access: str = "sequential") -> Any:
    """Open an image lazily, applying EXIF orientation for JPEG files."""
    pyvips = _get_pyvips_module()
    p = Path(path)
    if p.suffix.lower() in JPEG_EXTS:
        return pyvips.Image.new_from_file(str(p), access=access, autorotate=True)
    return pyvips.Image.new_from_file(str(p), access=access)


def sample_size(width: int, height: int, preferred_size: int) -> tuple[int, int]:
    """Target size whose shorter side is `preferred_size`, never upscaling."""
    short_side = min(width, height)
    if preferred_size <= 0 or short_side <= preferred_size:
        return width, height
    factor = preferred_size / short_side
    if width < height:
        return preferred_size, max(1, math.ceil(height * factor))
    return max(1, math.ceil(width * factor)), preferred_size


def _flatten(image: Any) -> Any:
    if image.hasalpha():
        image = image.flatten(background=[255, 255, 255])
    return image


class VipsCodec:
    """Sampler, codec and crop executor writing JPEG scratch files."""

    def __init__(self, scratch: str | Path | None = None, jpeg_quality: int = DEFAULT_JPEG_QUALITY):
        self.scratch = scratch
        self.jpeg_quality = int(jpeg_quality)

    def _out(self, prefix: str) -> Path:
        return new_scratch_file(scratch_dir(self.scratch), prefix)

    def sample(self, path: Path, preferred_size: int) -> Path:
        """Write a downscaled working copy of `path` and return it.

        The copy keeps at least `preferred_size` pixels on its shorter side so
        that a later crop still has enough resolution. A new file is always
        written; the source is never handed back.
        """
        pyvips = _get_pyvips_module()
        image = open_oriented(path)
        w, h = image.width, image.height
        new_w, new_h = sample_size(w, h, int(preferred_size))
        if (new_w, new_h) != (w, h):
            image = image.thumbnail_image(new_w, height=new_h, size=pyvips.Size.FORCE)
        out = self._out("sample")
        try:
            _flatten(image).write_to_file(str(out), Q=self.jpeg_quality)
        except Exception:
            _logger.error("Failed to write sample for %s", path, exc_info=True)
            with contextlib.suppress(OSError):
                out.unlink(missing_ok=True)
            raise
        _logger.debug("sampled %s: %dx%d -> %dx%d (%s)", path, w, h, new_w, new_h, out.name)
        return out

    def decode(self, path: Path) -> Any | None:
        """Decode `path` fully into memory; None when it is not a readable image."""
        pyvips = _get_pyvips_module()
        try:
            image = pyvips.Image.new_from_file(str(path))
            return image.copy_memory()
        except (pyvips.Error, OSError) as e:
            _logger.debug("decode failed: %s: %s", path, e)
            return None

    def rotate(self, image: Any, degrees: int) -> Any:
        """Rotate clockwise by `degrees`; right angles are lossless."""
        d = int(degrees) % 360
        if d == 0:
            return image
        angle = _RIGHT_ANGLES.get(d)
        if angle is not None:
            return image.rot(angle)
        return image.rotate(d)

    def encode(self, image: Any) -> bytes:
        return _flatten(image).write_to_buffer(".jpg", Q=self.jpeg_quality)

    def crop(self, path: Path, area: CropArea) -> Path:
        """Crop `path` to the normalized `area` and return the new file."""
        from asset_crop.crop import crop_to_area

        out = self._out("cropped")
        try:
            crop_to_area(str(path), area, str(out), quality=self.jpeg_quality)
        except Exception:
            with contextlib.suppress(OSError):
                out.unlink(missing_ok=True)
            raise
        return out
