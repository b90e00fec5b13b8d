import logging
import re
import threading
import time
import uuid
from typing import Callable, List, Optional

from ..ports.analysis_repo import AnalysisRecord, AnalysisRepository
from ..ports.capture_source import CapturedImage
from ..ports.event_logger import EventLogger
from ..ports.storage_repo import ObjectStorage
from ...exceptions import NotFound, RemoteDeleteFailed, StorageDegraded

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 20

_UNSAFE_FILENAME = re.compile(r"[\s/\\]+")


def _now_ms() -> int:
    return int(time.time() * 1000)


def _new_id() -> str:
    return str(uuid.uuid4())


def sanitize_filename(filename: str) -> str:
    return _UNSAFE_FILENAME.sub("-", filename or "").strip("-") or "image"


def build_object_key(prefix: str, record_id: str, timestamp: int, filename: str) -> str:
    name = f"{record_id}-{timestamp}-{sanitize_filename(filename)}"
    return f"{prefix.strip('/')}/{name}" if prefix else name


class RecordStore(AnalysisRepository):
    """Bounded, newest-first, process-wide history of analysis records.

    Images go to object storage when it is configured; otherwise the record
    keeps an in-memory data URL instead of failing (degrade-not-fail).
    Remote delete failures are reported on the event channel and never block
    removal from the local history.
    """

    def __init__(
        self,
        storage: Optional[ObjectStorage] = None,
        events: Optional[EventLogger] = None,
        capacity: int = HISTORY_LIMIT,
        key_prefix: str = "screenshots",
        clock: Callable[[], int] = _now_ms,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.storage = storage
        self.events = events
        self.capacity = capacity
        self.key_prefix = key_prefix
        self._clock = clock
        self._id_factory = id_factory
        self._records: List[AnalysisRecord] = []
        # guards the read-modify-write on _records; never held across I/O
        self._lock = threading.Lock()

    def _emit(self, event: str, success: bool = True, **details) -> None:
        if self.events is not None:
            self.events.log(event, success=success, details=details)

    @property
    def remote_enabled(self) -> bool:
        return self.storage is not None and self.storage.configured

    async def _persist_image(self, key: str, image: CapturedImage) -> str:
        if self.remote_enabled:
            try:
                return await self.storage.put(key, image.data, image.mime_type)
            except StorageDegraded as e:
                reason = e.message
        else:
            reason = "object storage is not configured"
        logger.warning(f"Using fallback storage for {key}: {reason}")
        self._emit("storage_degraded", success=False, key=key, reason=reason)
        return image.data_url()

    async def store(self, image: CapturedImage, analysis_type: str, analysis_result: str) -> AnalysisRecord:
        record_id = self._id_factory()
        timestamp = self._clock()
        key = build_object_key(self.key_prefix, record_id, timestamp, image.filename)

        image_url = await self._persist_image(key, image)
        record = AnalysisRecord(
            id=record_id,
            image_url=image_url,
            timestamp=timestamp,
            analysis_type=analysis_type,
            analysis_result=analysis_result,
        )

        with self._lock:
            self._records = [record] + self._records[: self.capacity - 1]
        self._emit("record_stored", record_id=record_id, analysis_type=analysis_type)
        return record

    def list_records(self) -> List[AnalysisRecord]:
        with self._lock:
            return list(self._records)

    def get(self, record_id: str) -> Optional[AnalysisRecord]:
        with self._lock:
            for record in self._records:
                if record.id == record_id:
                    return record
        return None

    async def delete(self, record_id: str) -> None:
        record = self.get(record_id)
        if record is None:
            raise NotFound(f"Analysis record {record_id} not found")

        key = self.storage.key_for(record.image_url) if self.storage is not None else None
        if key:
            try:
                await self.storage.delete(key)
            except RemoteDeleteFailed as e:
                logger.warning(f"Could not delete from blob storage: {e.message}")
                self._emit("remote_delete_failed", success=False, record_id=record_id, key=key, reason=e.message)

        with self._lock:
            self._records = [r for r in self._records if r.id != record_id]
        self._emit("record_deleted", record_id=record_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
