"""Pytest configuration.

The crop controller owns a QObject state and the export worker is a QThread.
A single `QCoreApplication` is created for the whole session before any of
them exist, and shut down cleanly at the end.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from asset_crop.models import AssetRef, MediaKind
from asset_crop.path_utils import new_scratch_file

_APP: Any | None = None


def pytest_configure(config) -> None:  # noqa: ARG001
    """Ensure a QCoreApplication exists before collecting/running tests."""

    # Import lazily so non-Qt environments can still import this conftest.
    try:
        from PySide6.QtCore import QCoreApplication
    except ImportError:
        return

    global _APP

    app = QCoreApplication.instance()
    # Keep a strong ref so it isn't GC'd mid-session.
    _APP = app if app is not None else QCoreApplication([])


def pytest_sessionfinish(session, exitstatus) -> None:  # noqa: ARG001
    try:
        from PySide6.QtCore import QCoreApplication
    except ImportError:
        return

    app = QCoreApplication.instance()
    if app is None:
        return

    app.quit()
    app.processEvents()


# ---- shared fakes for the export pipeline ----


class FakeCodec:
    """Codec double writing small marker files into a scratch folder."""

    def __init__(self, scratch: Path, decodable: bool = True, fail_crop: bool = False):
        self.scratch = scratch
        self.decodable = decodable
        self.fail_crop = fail_crop
        self.calls: list[tuple] = []

    def sample(self, path: Path, preferred_size: int) -> Path:
        self.calls.append(("sample", Path(path), preferred_size))
        out = new_scratch_file(self.scratch, "sample")
        out.write_bytes(Path(path).read_bytes())
        return out

    def decode(self, path: Path):
        self.calls.append(("decode", Path(path)))
        if not self.decodable:
            return None
        return {"data": Path(path).read_bytes(), "degrees": 0}

    def rotate(self, image, degrees: int):
        self.calls.append(("rotate", degrees))
        return {**image, "degrees": degrees}

    def encode(self, image) -> bytes:
        self.calls.append(("encode",))
        return b"rotated:%d" % image["degrees"]

    def crop(self, path: Path, area) -> Path:
        self.calls.append(("crop", Path(path), area))
        if self.fail_crop:
            raise RuntimeError("crop backend failed")
        out = new_scratch_file(self.scratch, "cropped")
        out.write_bytes(b"cropped:" + Path(path).read_bytes())
        return out

    def names(self) -> list[str]:
        return [c[0] for c in self.calls]


class FakeSource:
    def __init__(self) -> None:
        self.requested: list[str] = []

    def origin_file(self, asset: AssetRef) -> Path | None:
        self.requested.append(asset.id)
        if asset.path is None or not Path(asset.path).is_file():
            return None
        return Path(asset.path)


@pytest.fixture
def scratch(tmp_path: Path) -> Path:
    d = tmp_path / "scratch"
    d.mkdir()
    return d


@pytest.fixture
def fake_codec(scratch: Path) -> FakeCodec:
    return FakeCodec(scratch)


@pytest.fixture
def make_codec(scratch: Path):
    def _make(**kwargs) -> FakeCodec:
        return FakeCodec(scratch, **kwargs)

    return _make


@pytest.fixture
def fake_source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def make_asset(tmp_path: Path):
    """Factory creating an AssetRef backed by a small file on disk."""
    src = tmp_path / "src"
    src.mkdir()

    def _make(
        asset_id: str,
        kind: MediaKind = MediaKind.IMAGE,
        width: int = 1000,
        height: int = 2000,
        exists: bool = True,
    ) -> AssetRef:
        path = src / f"{asset_id}.bin"
        if exists:
            path.write_bytes(asset_id.encode("utf-8"))
        return AssetRef(asset_id, kind, width, height, path)

    return _make
