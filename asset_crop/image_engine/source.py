"""Asset source backed by local files."""

from __future__ import annotations

from pathlib import Path

from asset_crop.image_engine.codec import _get_pyvips_module
from asset_crop.logger import get_logger
from asset_crop.models import AssetRef, MediaKind

_logger = get_logger("source")

IMAGE_EXTS = {".jpg", ".jpeg", ".png", ".bmp", ".tiff", ".tif", ".gif", ".webp", ".heic"}
VIDEO_EXTS = {".mp4", ".mov", ".m4v", ".avi", ".mkv", ".webm"}
AUDIO_EXTS = {".mp3", ".m4a", ".aac", ".wav", ".flac", ".ogg"}

# EXIF orientations that swap width and height
_TRANSPOSED_ORIENTATIONS = {5, 6, 7, 8}


def media_kind_for(path: str | Path) -> MediaKind:
    ext = Path(path).suffix.lower()
    if ext in IMAGE_EXTS:
        return MediaKind.IMAGE
    if ext in VIDEO_EXTS:
        return MediaKind.VIDEO
    if ext in AUDIO_EXTS:
        return MediaKind.AUDIO
    return MediaKind.OTHER


def oriented_dimensions(path: str | Path) -> tuple[int, int]:
    """Return (width, height) as displayed, honoring the EXIF orientation.

    Only the header is read.
    """
    pyvips = _get_pyvips_module()
    image = pyvips.Image.new_from_file(str(path))
    w, h = image.width, image.height
    orientation = 1
    if image.get_typeof("orientation") != 0:
        orientation = int(image.get("orientation"))
    if orientation in _TRANSPOSED_ORIENTATIONS:
        return h, w
    return w, h


def asset_from_file(
    path: str | Path,
    asset_id: str | None = None,
    *,
    oriented_width: int = 0,
    oriented_height: int = 0,
) -> AssetRef:
    """Describe a local file as an AssetRef.

    Image dimensions are read from the file header. Other media cannot be
    probed here, so their displayed size comes from the caller and stays 0x0
    (unknown) when omitted.
    """
    p = Path(path)
    kind = media_kind_for(p)
    width, height = int(oriented_width), int(oriented_height)
    if kind is MediaKind.IMAGE:
        width, height = oriented_dimensions(p)
    return AssetRef(
        id=asset_id or str(p),
        media_kind=kind,
        oriented_width=width,
        oriented_height=height,
        path=p,
    )


class FileAssetSource:
    """Resolve assets to the file recorded in `AssetRef.path`."""

    def origin_file(self, asset: AssetRef) -> Path | None:
        path = asset.path
        if path is None:
            _logger.debug("asset %s has no path", asset.id)
            return None
        p = Path(path)
        if not p.is_file():
            _logger.debug("origin file missing for %s: %s", asset.id, p)
            return None
        return p
