"""Qt worker that drives an export run off the GUI thread."""

from __future__ import annotations

from PySide6.QtCore import QThread, Signal

from asset_crop.logger import get_logger
from asset_crop.ops.export import ExportRun

_logger = get_logger("export_worker")


class ExportWorker(QThread):
    """Iterate an `ExportRun` and re-emit its snapshots as signals."""

    progress = Signal(object)  # ExportProgress
    finished_export = Signal(list)  # list[ExportItem]
    canceled = Signal()
    error = Signal(str)

    def __init__(self, run: ExportRun):
        super().__init__()
        self.export_run = run

    def run(self) -> None:
        last = None
        try:
            for snapshot in self.export_run:
                last = snapshot
                self.progress.emit(snapshot)
        except Exception as ex:
            _logger.error("export worker failed: %s", ex, exc_info=True)
            self.error.emit(str(ex))
            return

        if last is not None and last.done:
            self.finished_export.emit(list(last.items))
        else:
            self.canceled.emit()

    def cancel(self) -> None:
        self.export_run.cancel()
