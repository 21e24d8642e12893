from __future__ import annotations

import json
from pathlib import Path

import pytest

from asset_crop.errors import ConfigurationError
from asset_crop.settings_manager import SettingsManager


def test_defaults_when_file_missing(tmp_path: Path) -> None:
    sm = SettingsManager(str(tmp_path / "settings.json"))

    assert sm.data == {}
    assert sm.get("preferred_size") == 1080
    assert sm.keep_memory is False
    assert sm.scratch_dir is None


def test_set_persists_to_disk(tmp_path: Path) -> None:
    settings_path = tmp_path / "conf" / "settings.json"
    sm = SettingsManager(str(settings_path))

    sm.set("preferred_size", 720)

    assert json.loads(settings_path.read_text(encoding="utf-8")) == {"preferred_size": 720}
    assert SettingsManager(str(settings_path)).get("preferred_size") == 720


def test_corrupt_file_falls_back_to_empty(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.json"
    settings_path.write_text("{not json", encoding="utf-8")

    sm = SettingsManager(str(settings_path))

    assert sm.data == {}
    assert sm.crop_delegate().crop_ratios == (1.0, 0.8)


def test_scratch_dir_is_stored_absolute(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    sm = SettingsManager(str(tmp_path / "settings.json"))

    sm.set("scratch_dir", "exports")

    assert Path(sm.scratch_dir) == (tmp_path / "exports").resolve()
    assert sm.crop_delegate().scratch_dir == (tmp_path / "exports").resolve()


def test_crop_delegate_from_settings(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.json"
    settings_path.write_text(
        json.dumps({"crop_ratios": [1, 1.7778], "preferred_size": 2048, "jpeg_quality": 80}),
        encoding="utf-8",
    )

    delegate = SettingsManager(str(settings_path)).crop_delegate()

    assert delegate.crop_ratios == (1.0, 1.7778)
    assert delegate.preferred_size == 2048
    assert delegate.jpeg_quality == 80


@pytest.mark.parametrize(
    "data",
    [
        {"crop_ratios": []},
        {"crop_ratios": "1:1"},
        {"crop_ratios": ["wide"]},
        {"preferred_size": "big"},
    ],
)
def test_invalid_settings_raise_configuration_error(tmp_path: Path, data) -> None:
    settings_path = tmp_path / "settings.json"
    settings_path.write_text(json.dumps(data), encoding="utf-8")

    with pytest.raises(ConfigurationError):
        SettingsManager(str(settings_path)).crop_delegate()
