import logging
import sys

from asset_crop.logger import get_logger, setup_logger


def _stderr_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, "stream", None) is sys.stderr]


def test_setup_logger_is_idempotent():
    setup_logger()
    logger = setup_logger()

    assert len(_stderr_handlers(logger)) == 1
    assert logger.propagate is False


def test_env_level_override(monkeypatch):
    monkeypatch.setenv("ASSET_CROP_LOG_LEVEL", "debug")
    assert setup_logger().level == logging.DEBUG

    monkeypatch.setenv("ASSET_CROP_LOG_LEVEL", "warning")
    assert setup_logger().level == logging.WARNING

    monkeypatch.delenv("ASSET_CROP_LOG_LEVEL")
    assert setup_logger().level == logging.INFO


def test_category_filter(monkeypatch):
    monkeypatch.setenv("ASSET_CROP_LOG_CATS", "export, codec")
    logger = setup_logger()
    (handler,) = _stderr_handlers(logger)

    def _record(name: str) -> logging.LogRecord:
        return logging.LogRecord(name, logging.INFO, __file__, 1, "msg", None, None)

    assert handler.filter(_record("asset_crop.export"))
    assert handler.filter(_record("asset_crop.codec"))
    assert not handler.filter(_record("asset_crop.settings"))

    monkeypatch.delenv("ASSET_CROP_LOG_CATS")
    setup_logger()
    assert handler.filter(_record("asset_crop.settings"))


def test_get_logger_returns_child():
    assert get_logger("export").name == "asset_crop.export"
    assert get_logger().name == "asset_crop"
