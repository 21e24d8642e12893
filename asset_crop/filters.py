"""ffmpeg filter descriptors for a crop record.

Non-image assets are not transformed by the export pipeline; callers that
re-encode them with ffmpeg use these strings instead.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from asset_crop.models import CropRecord


def _num(value: float) -> str:
    v = float(value)
    return str(int(v)) if v.is_integer() else repr(v)


def ffmpeg_crop(record: CropRecord) -> str | None:
    """Crop filter in "out_w:out_h:x:y" form.

    None without a crop area, or when the asset's displayed size is unknown.
    """
    area = record.area
    if area is None:
        return None
    ow = record.asset.oriented_width
    oh = record.asset.oriented_height
    if ow <= 0 or oh <= 0:
        return None
    w = area.width * ow
    h = area.height * oh
    x = area.left * ow
    y = area.top * oh
    return f"{_num(w)}:{_num(h)}:{_num(x)}:{_num(y)}"


def ffmpeg_scale(record: CropRecord) -> str | None:
    """Scale filter in "iw*S:ih*S" form, or None when no geometry was recorded."""
    if record.geometry is None:
        return None
    s = _num(record.geometry.scale)
    return f"iw*{s}:ih*{s}"


def ffmpeg_rotate(record: CropRecord) -> str | None:
    """Rotate filter in "rotate=angle" form (radians), or None for no rotation."""
    if record.rotation == 0:
        return None
    return f"rotate={math.radians(record.rotation * 90)!r}"


def ffmpeg_filter_chain(record: CropRecord) -> str | None:
    """Join the present descriptors as a crop -> scale -> rotate filter chain."""
    parts = []
    crop = ffmpeg_crop(record)
    if crop is not None:
        parts.append(f"crop={crop}")
    scale = ffmpeg_scale(record)
    if scale is not None:
        parts.append(f"scale={scale}")
    rotate = ffmpeg_rotate(record)
    if rotate is not None:
        parts.append(rotate)
    return ",".join(parts) or None
