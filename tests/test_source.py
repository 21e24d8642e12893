from __future__ import annotations

from pathlib import Path

from asset_crop.filters import ffmpeg_crop
from asset_crop.image_engine.source import FileAssetSource, asset_from_file, media_kind_for
from asset_crop.models import AssetRef, CropArea, CropGeometry, CropRecord, MediaKind


def test_media_kind_by_extension() -> None:
    assert media_kind_for("a/photo.JPG") is MediaKind.IMAGE
    assert media_kind_for("clip.mov") is MediaKind.VIDEO
    assert media_kind_for("voice.m4a") is MediaKind.AUDIO
    assert media_kind_for("notes.txt") is MediaKind.OTHER


def test_origin_file_requires_existing_file(tmp_path: Path) -> None:
    present = tmp_path / "a.jpg"
    present.write_bytes(b"x")
    source = FileAssetSource()

    assert source.origin_file(AssetRef("a", path=present)) == present
    assert source.origin_file(AssetRef("b", path=tmp_path / "missing.jpg")) is None
    assert source.origin_file(AssetRef("c", path=tmp_path)) is None
    assert source.origin_file(AssetRef("d")) is None


def test_asset_from_non_image_file(tmp_path: Path) -> None:
    clip = tmp_path / "clip.mp4"
    clip.write_bytes(b"\x00")

    asset = asset_from_file(clip, asset_id="clip-1")

    assert asset.id == "clip-1"
    assert asset.media_kind is MediaKind.VIDEO
    # size unknown until the caller supplies it
    assert (asset.oriented_width, asset.oriented_height) == (0, 0)
    assert ffmpeg_crop(CropRecord.from_state(asset, CropGeometry(area=CropArea(0.1, 0.2, 0.5, 0.3)))) is None


def test_asset_from_video_with_known_size(tmp_path: Path) -> None:
    clip = tmp_path / "clip.mp4"
    clip.write_bytes(b"\x00")

    asset = asset_from_file(clip, oriented_width=1000, oriented_height=2000)
    rec = CropRecord.from_state(asset, CropGeometry(area=CropArea(0.1, 0.2, 0.5, 0.3)))

    assert (asset.oriented_width, asset.oriented_height) == (1000, 2000)
    assert rec.ffmpeg_crop == "500:600:100:400"
