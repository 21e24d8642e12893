"""Application-level session owning state shared between crop controllers.

A controller created with ``keep_memory=True`` stores its crop parameters in
the session's `ParameterCache`, so reopening the picker within the same
session restores them. The cache lives exactly as long as the session object.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from asset_crop.logger import get_logger
from asset_crop.models import CropDelegate, CropRecord

if TYPE_CHECKING:
    from asset_crop.ops.crop_controller import CropController

_logger = get_logger("session")


class ParameterCache:
    """Holds one immutable parameter list; replaced wholesale, never edited."""

    def __init__(self) -> None:
        self._records: tuple[CropRecord, ...] = ()

    @property
    def records(self) -> tuple[CropRecord, ...]:
        return self._records

    def replace(self, records: tuple[CropRecord, ...]) -> None:
        self._records = tuple(records)

    def __len__(self) -> int:
        return len(self._records)


class CropSession:
    def __init__(self, delegate: CropDelegate | None = None, codec=None, source=None) -> None:
        self.delegate = delegate or CropDelegate()
        self.codec = codec
        self.source = source
        self.parameters = ParameterCache()

    def create_controller(self, keep_memory: bool = False) -> CropController:
        """Return a CropController wired to this session's delegate and backends."""
        from asset_crop.ops.crop_controller import CropController

        _logger.debug("creating crop controller (keep_memory=%s)", keep_memory)
        return CropController(
            self.delegate,
            keep_memory=keep_memory,
            session=self,
            codec=self.codec,
            source=self.source,
        )

    def reset(self) -> None:
        """Forget every crop parameter kept for this session."""
        self.parameters.replace(())
